"""Opportunity Schemas — boundary validation for create/update payloads.

Invariants:
    - Unknown category rejected, error located at `category`
    - Every invalid field reported in one ValidationError
    - createdBy in a body is ignored (owner comes from the token)
    - Update distinguishes "not sent" from "sent as null"
"""

import pytest
from pydantic import ValidationError

from app.core.domain_types import OpportunityCategory
from app.schemas.opportunity import OpportunityCreate, OpportunityUpdate, PaginationMeta


def _valid(**overrides) -> dict:
    body = {
        "title": "Research Grant",
        "description": "Fully funded",
        "category": "SCHOLARSHIP",
    }
    body.update(overrides)
    return body


def _error_fields(exc: ValidationError) -> set[str]:
    return {str(e["loc"][0]) for e in exc.errors() if e["loc"]}


# --- OpportunityCreate -------------------------------------------------------

def test_minimal_create_gets_defaults():
    body = OpportunityCreate.model_validate(_valid())
    assert body.category is OpportunityCategory.SCHOLARSHIP
    assert body.is_remote is False
    assert body.tags == []
    assert body.location is None


def test_camel_case_fields_are_accepted():
    body = OpportunityCreate.model_validate(
        _valid(isRemote=True, contactEmail="team@example.org"),
    )
    assert body.is_remote is True
    assert body.contact_email == "team@example.org"


def test_bogus_category_is_rejected_at_category():
    with pytest.raises(ValidationError) as exc:
        OpportunityCreate.model_validate(_valid(category="BOGUS"))
    assert "category" in _error_fields(exc.value)


def test_all_violations_reported_together():
    with pytest.raises(ValidationError) as exc:
        OpportunityCreate.model_validate(
            {"title": "   ", "description": "", "category": "nope", "isRemote": "yes"},
        )
    assert _error_fields(exc.value) >= {"title", "description", "category", "isRemote"}


def test_title_is_stripped_and_bounded():
    assert OpportunityCreate.model_validate(_valid(title="  Grant  ")).title == "Grant"
    with pytest.raises(ValidationError):
        OpportunityCreate.model_validate(_valid(title="x" * 256))


def test_location_longer_than_255_rejected():
    with pytest.raises(ValidationError) as exc:
        OpportunityCreate.model_validate(_valid(location="L" * 256))
    assert "location" in _error_fields(exc.value)


def test_empty_optional_text_becomes_none():
    body = OpportunityCreate.model_validate(_valid(location="", organization="  "))
    assert body.location is None
    assert body.organization is None


def test_is_remote_must_be_a_real_boolean():
    with pytest.raises(ValidationError):
        OpportunityCreate.model_validate(_valid(isRemote="true"))


def test_deadline_parses_iso_date():
    body = OpportunityCreate.model_validate(_valid(deadline="2026-12-31"))
    assert body.deadline.isoformat() == "2026-12-31"


def test_deadline_accepts_full_timestamp():
    body = OpportunityCreate.model_validate(_valid(deadline="2025-12-31T23:59:00Z"))
    assert body.deadline.isoformat() == "2025-12-31"


def test_deadline_timestamp_with_offset_uses_utc_date():
    body = OpportunityCreate.model_validate(_valid(deadline="2025-12-31T23:30:00-05:00"))
    assert body.deadline.isoformat() == "2026-01-01"


def test_invalid_deadline_rejected():
    with pytest.raises(ValidationError) as exc:
        OpportunityCreate.model_validate(_valid(deadline="next friday"))
    assert "deadline" in _error_fields(exc.value)


def test_invalid_contact_email_rejected():
    with pytest.raises(ValidationError) as exc:
        OpportunityCreate.model_validate(_valid(contactEmail="not-an-email"))
    assert "contactEmail" in _error_fields(exc.value)


def test_tags_are_stripped_and_deduplicated():
    body = OpportunityCreate.model_validate(_valid(tags=[" ai ", "ai", "", "ml"]))
    assert body.tags == ["ai", "ml"]


def test_created_by_in_body_is_ignored():
    body = OpportunityCreate.model_validate(_valid(createdBy="someone-else"))
    assert "created_by" not in body.model_dump()


# --- OpportunityUpdate -------------------------------------------------------

def test_update_only_reports_sent_fields():
    body = OpportunityUpdate.model_validate({"isRemote": True})
    assert body.changes() == {"is_remote": True}


def test_update_allows_clearing_nullable_fields():
    body = OpportunityUpdate.model_validate({"location": None, "deadline": None})
    assert body.changes() == {"location": None, "deadline": None}


@pytest.mark.parametrize("field", ["title", "description", "category", "isRemote"])
def test_update_rejects_null_for_required_fields(field):
    with pytest.raises(ValidationError):
        OpportunityUpdate.model_validate({field: None})


def test_update_null_error_names_the_field():
    with pytest.raises(ValidationError) as exc:
        OpportunityUpdate.model_validate({"title": None})
    assert _error_fields(exc.value) == {"title"}


def test_update_reports_every_null_and_invalid_field():
    with pytest.raises(ValidationError) as exc:
        OpportunityUpdate.model_validate(
            {"title": None, "description": None, "category": "BOGUS", "isRemote": None},
        )
    assert _error_fields(exc.value) == {"title", "description", "category", "isRemote"}


def test_update_rejects_bogus_category():
    with pytest.raises(ValidationError):
        OpportunityUpdate.model_validate({"category": "BOGUS"})


def test_update_ignores_created_by():
    assert OpportunityUpdate.model_validate({"createdBy": "x"}).changes() == {}


# --- Responses ---------------------------------------------------------------

def test_pagination_serializes_camel_case():
    meta = PaginationMeta.model_validate(
        {"page": 1, "limit": 20, "total": 0, "hasMore": False},
    )
    assert meta.model_dump(by_alias=True) == {
        "page": 1, "limit": 20, "total": 0, "hasMore": False,
    }
