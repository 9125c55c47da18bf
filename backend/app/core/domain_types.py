"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - OpportunityId wraps a UUID; UserId is the opaque identity string from the token
    - All valid categories, scopes and sort directions encoded as Enums, no raw string matching
    - SORTABLE_FIELDS is the only source of sortable attribute names

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

OpportunityId = NewType("OpportunityId", UUID)
UserId = NewType("UserId", str)


# ─── Enums ───────────────────────────────────────────────────────

class OpportunityCategory(str, Enum):
    """Kinds of listing. Maps to DB `category` column."""
    INTERNSHIP = "INTERNSHIP"
    SCHOLARSHIP = "SCHOLARSHIP"
    COMPETITION = "COMPETITION"
    GIG = "GIG"
    PITCH = "PITCH"
    OTHER = "OTHER"


class CategoryScope(str, Enum):
    """Server-side category restriction applied by an endpoint."""
    ALL = "all"
    INTERNSHIPS = "internships"
    SCHOLARSHIPS = "scholarships"
    OTHERS = "others"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class GateOutcome(str, Enum):
    """Terminal states of the per-request authorization gate."""
    REJECTED = "rejected"
    FORBIDDEN = "forbidden"
    AUTHORIZED = "authorized"


# ─── Constants ───────────────────────────────────────────────────

# API field name → ORM attribute name
SORTABLE_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "deadline": "deadline",
    "title": "title",
    "category": "category",
}

# "others" = everything that is neither an internship nor a scholarship
OTHERS_EXCLUDED_CATEGORIES = frozenset({
    OpportunityCategory.INTERNSHIP,
    OpportunityCategory.SCHOLARSHIP,
})
