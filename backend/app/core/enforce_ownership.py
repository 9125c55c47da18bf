"""Ownership Enforcement — only the recorded creator may mutate a record.

Invariants:
    - PURE: compares two identifiers, no IO
    - Raises ForbiddenError on mismatch, returns None on match
    - Callers check existence first (ResourceNotFoundError) and authenticate second
"""

from app.core.errors import ErrorContext, ForbiddenError
from app.core.identity import Identity


def enforce_ownership(owner_id: str, identity: Identity, action: str) -> None:
    """Rule: record.created_by must equal the authenticated identity id."""
    if owner_id != identity.id:
        raise ForbiddenError(action, ErrorContext(user_id=identity.id))
