"""Query Resolver — turns untrusted query-string parameters into a bounded, deterministic query.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no SQLAlchemy
    - page >= 1, 1 <= limit <= MAX_LIMIT, skip == (page - 1) * limit
    - Sort field always comes from SORTABLE_FIELDS; direction is asc or desc
    - Every malformed parameter is reported; the only exception raised is InvalidQueryParameterError

Design Decisions:
    - Parameters arrive as name -> list of raw strings so repeated keys (tags=a&tags=b) survive
    - Violations collected before raising: one response enumerates every bad parameter
    - Category-restricted endpoints pass a CategoryScope; the `category` parameter is not read then
    - The id tie-breaker for ordering lives in the SQL translation, not here (no column knowledge)
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from app.core.domain_types import (
    CategoryScope,
    OpportunityCategory,
    OTHERS_EXCLUDED_CATEGORIES,
    SORTABLE_FIELDS,
    SortDirection,
)
from app.core.errors import ErrorContext, InvalidQueryParameterError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Largest page whose OFFSET still fits a signed 64-bit integer at any limit
MAX_OFFSET = 2**63 - 1
MAX_PAGE = MAX_OFFSET // MAX_LIMIT
DEFAULT_SORT = "createdAt:desc"

_INTEGER_RE = re.compile(r"^[+-]?\d+$")

QueryParams = Mapping[str, Sequence[str]]


@dataclass(frozen=True)
class OpportunityFilter:
    """Structured filter predicate. Empty/None members mean 'no restriction'."""
    include_categories: frozenset[OpportunityCategory] = frozenset()
    exclude_categories: frozenset[OpportunityCategory] = frozenset()
    location: str | None = None
    is_remote: bool | None = None
    search: str | None = None
    organization: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Page:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def take(self) -> int:
        return self.limit


@dataclass(frozen=True)
class SortSpec:
    field: str = "createdAt"
    direction: SortDirection = SortDirection.DESC

    @property
    def attribute(self) -> str:
        """ORM attribute name for the API sort field."""
        return SORTABLE_FIELDS[self.field]


@dataclass(frozen=True)
class OpportunityQuery:
    filter: OpportunityFilter = field(default_factory=OpportunityFilter)
    page: Page = field(default_factory=Page)
    sort: SortSpec = field(default_factory=SortSpec)


def resolve_query(
    params: QueryParams,
    scope: CategoryScope = CategoryScope.ALL,
    require_search: bool = False,
) -> OpportunityQuery:
    """Resolve raw parameters into an OpportunityQuery or raise InvalidQueryParameterError."""
    violations: list[dict] = []

    page = _parse_bounded_int(
        params, "page", DEFAULT_PAGE, 1, MAX_PAGE, violations, reject_above=True,
    )
    limit = _parse_bounded_int(params, "limit", DEFAULT_LIMIT, 1, MAX_LIMIT, violations)
    include, exclude = _resolve_categories(params, scope, violations)
    is_remote = _parse_remote_flag(params, violations)
    search = _first_text(params, "q") or _first_text(params, "search")
    if require_search and not search:
        violations.append({"field": "q", "message": "search query (q) is required"})
    sort = _parse_sort(params, violations)

    if violations:
        first = violations[0]
        raise InvalidQueryParameterError(
            first["field"], first["message"], ErrorContext(details=violations),
        )

    return OpportunityQuery(
        filter=OpportunityFilter(
            include_categories=include,
            exclude_categories=exclude,
            location=_first_text(params, "location"),
            is_remote=is_remote,
            search=search,
            organization=_first_text(params, "organization"),
            tags=_collect_tags(params),
        ),
        page=Page(page=page, limit=limit),
        sort=sort,
    )


def has_more(page: Page, total: int) -> bool:
    return page.skip + page.limit < total


def build_pagination(page: Page, total: int) -> dict:
    """Pagination block of the list envelope."""
    return {
        "page": page.page,
        "limit": page.limit,
        "total": total,
        "hasMore": has_more(page, total),
    }


# ─── Parameter parsers ───────────────────────────────────────────

def _first_raw(params: QueryParams, name: str) -> str | None:
    values = params.get(name) or ()
    for value in values:
        if value is not None and value.strip():
            return value
    return None


def _first_text(params: QueryParams, name: str) -> str | None:
    raw = _first_raw(params, name)
    return raw.strip() if raw is not None else None


def _parse_bounded_int(
    params: QueryParams,
    name: str,
    default: int,
    lower: int,
    upper: int,
    violations: list[dict],
    reject_above: bool = False,
) -> int:
    raw = _first_text(params, name)
    if raw is None:
        return default
    if not _INTEGER_RE.match(raw):
        violations.append({"field": name, "message": f"{name} must be an integer"})
        return default
    value = int(raw)
    if value > upper and reject_above:
        violations.append({"field": name, "message": f"{name} must be at most {upper}"})
        return default
    return max(lower, min(value, upper))


def _resolve_categories(
    params: QueryParams, scope: CategoryScope, violations: list[dict],
) -> tuple[frozenset[OpportunityCategory], frozenset[OpportunityCategory]]:
    if scope is CategoryScope.INTERNSHIPS:
        return frozenset({OpportunityCategory.INTERNSHIP}), frozenset()
    if scope is CategoryScope.SCHOLARSHIPS:
        return frozenset({OpportunityCategory.SCHOLARSHIP}), frozenset()
    if scope is CategoryScope.OTHERS:
        return frozenset(), OTHERS_EXCLUDED_CATEGORIES

    raw = _first_text(params, "category")
    if raw is None:
        return frozenset(), frozenset()
    try:
        return frozenset({OpportunityCategory(raw)}), frozenset()
    except ValueError:
        allowed = ", ".join(c.value for c in OpportunityCategory)
        violations.append(
            {"field": "category", "message": f"category must be one of {allowed}"},
        )
        return frozenset(), frozenset()


def _parse_remote_flag(params: QueryParams, violations: list[dict]) -> bool | None:
    """Absent means no filter; only the literals 'true' and 'false' are accepted."""
    if "isRemote" not in params:
        return None
    raw = _first_text(params, "isRemote")
    if raw == "true":
        return True
    if raw == "false":
        return False
    violations.append(
        {"field": "isRemote", "message": "isRemote must be 'true' or 'false'"},
    )
    return None


def _collect_tags(params: QueryParams) -> tuple[str, ...]:
    """Accept repeated keys and comma-separated values; dedupe, keep first-seen order."""
    seen: dict[str, None] = {}
    for value in params.get("tags") or ():
        for part in value.split(","):
            tag = part.strip()
            if tag:
                seen.setdefault(tag, None)
    return tuple(seen)


def _parse_sort(params: QueryParams, violations: list[dict]) -> SortSpec:
    raw = _first_text(params, "sort") or DEFAULT_SORT
    field_name, _, direction = raw.partition(":")
    field_name = field_name.strip()
    if field_name not in SORTABLE_FIELDS:
        allowed = ", ".join(SORTABLE_FIELDS)
        violations.append(
            {"field": "sort", "message": f"sort field must be one of {allowed}"},
        )
        return SortSpec()
    resolved = (
        SortDirection.ASC if direction.strip().lower() == SortDirection.ASC.value
        else SortDirection.DESC
    )
    return SortSpec(field=field_name, direction=resolved)
