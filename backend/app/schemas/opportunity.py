"""Opportunity Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - JSON field names are camelCase (alias_generator); snake_case accepted on input too
    - title/description: stripped, non-empty; title and location <= 255 chars
    - category must be an OpportunityCategory value
    - isRemote must be a real JSON boolean (no "yes"/1 coercion)
    - createdBy is not an input field: unknown keys are ignored, owner comes from the token
    - OpportunityUpdate accepts any subset of create fields; explicit null only for nullable ones,
      rejected per field so every null is reported under its own name
    - deadline accepts a date or a full ISO timestamp (reduced to its UTC date)

Design Decisions:
    - Shared base for optional fields so create/update cannot drift apart
    - Empty strings on optional text fields normalize to None (cleared)
    - Tags normalized here (strip, dedupe) so the service only sees clean sets
"""

from datetime import date, datetime, timezone
from uuid import UUID

from pydantic import (
    BaseModel, ConfigDict, Field, StrictBool, ValidationInfo, field_validator,
)
from pydantic.alias_generators import to_camel

from app.core.domain_types import OpportunityCategory

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
MAX_TAGS = 50
MAX_TAG_LENGTH = 100

_API_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)
_NULLABLE_TEXT_FIELDS = (
    "location", "contact_email", "organization", "image", "excerpt", "requirements",
)


def _strip_required_text(value: str, name: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{name} cannot be empty or whitespace")
    return value


class _OpportunityInput(BaseModel):
    """Fields shared by create and update payloads."""
    model_config = _API_CONFIG

    location: str | None = Field(None, max_length=255)
    deadline: date | None = None
    contact_email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    organization: str | None = Field(None, max_length=255)
    image: str | None = Field(None, max_length=2000)
    excerpt: str | None = Field(None, max_length=500)
    requirements: str | None = None

    @field_validator(*_NULLABLE_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("deadline", mode="before")
    @classmethod
    def datetime_to_date(cls, v):
        """Full timestamps are accepted and stored as their UTC calendar date."""
        if isinstance(v, str) and "T" in v:
            try:
                v = datetime.fromisoformat(v.strip())
            except ValueError:
                return v
        if isinstance(v, datetime):
            if v.tzinfo is not None:
                v = v.astimezone(timezone.utc)
            return v.date()
        return v

    @field_validator("tags", mode="after", check_fields=False)
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        tags = list(dict.fromkeys(t.strip() for t in v if t.strip()))
        if len(tags) > MAX_TAGS:
            raise ValueError(f"at most {MAX_TAGS} tags are allowed")
        too_long = [t for t in tags if len(t) > MAX_TAG_LENGTH]
        if too_long:
            raise ValueError(f"tags must be at most {MAX_TAG_LENGTH} characters")
        return tags


class OpportunityCreate(_OpportunityInput):
    """Creation payload. The owner is taken from the verified token, never from the body."""
    title: str = Field(max_length=255)
    description: str
    category: OpportunityCategory
    is_remote: StrictBool = False
    tags: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required_text(v, "title")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return _strip_required_text(v, "description")


class OpportunityUpdate(_OpportunityInput):
    """Partial update payload: only fields present in the request are applied."""
    title: str | None = Field(None, max_length=255)
    description: str | None = None
    category: OpportunityCategory | None = None
    is_remote: StrictBool | None = None
    tags: list[str] | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return _strip_required_text(v, "title") if v is not None else v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return _strip_required_text(v, "description") if v is not None else v

    @field_validator("title", "description", "category", "is_remote", mode="before")
    @classmethod
    def reject_explicit_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{to_camel(info.field_name)} cannot be null")
        return v

    def changes(self) -> dict:
        """Only the fields the caller sent, keyed by ORM attribute name."""
        return self.model_dump(exclude_unset=True)


# --- Responses ---------------------------------------------------------------

class OpportunityResponse(BaseModel):
    """Opportunity as rendered to API clients."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    id: UUID
    title: str
    description: str
    category: OpportunityCategory
    location: str | None = None
    is_remote: bool
    deadline: date | None = None
    contact_email: str | None = None
    organization: str | None = None
    image: str | None = None
    excerpt: str | None = None
    requirements: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_by: str
    created_at: datetime
    updated_at: datetime


class PaginationMeta(BaseModel):
    model_config = _API_CONFIG

    page: int
    limit: int
    total: int
    has_more: bool


class OpportunityListResponse(BaseModel):
    data: list[OpportunityResponse]
    pagination: PaginationMeta


class OpportunitySearchResponse(OpportunityListResponse):
    query: str


class OpportunityEnvelope(BaseModel):
    data: OpportunityResponse


class OpportunityWriteResponse(BaseModel):
    message: str
    data: OpportunityResponse


class MessageResponse(BaseModel):
    message: str
