"""Identity Extraction — bearer header parsing and canonical identity from verified claims.

Invariants:
    - All functions are PURE: no IO, no token verification (see infrastructure/credentials.py)
    - IDENTITY_CLAIM_KEYS order is part of the contract: first present non-empty value wins
    - Identity.id is always a non-empty str (numeric subject ids are stringified)

Design Decisions:
    - Ordered candidate list over per-issuer adapters: tokens from different issuers
      name the subject differently (user_id, userId, sub, id)
    - extract_identity returns None instead of raising: the gate decides the error kind
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from app.core.domain_types import UserId
from app.core.errors import UnauthenticatedError

BEARER_SCHEME = "bearer"
IDENTITY_CLAIM_KEYS: tuple[str, ...] = ("user_id", "userId", "sub", "id")


@dataclass(frozen=True)
class Identity:
    """Canonical caller identity attached to the request."""
    id: UserId
    email: str | None = None
    role: str | None = None
    claims: Mapping[str, Any] = field(default_factory=dict, compare=False)


def parse_bearer_header(header: str | None) -> str:
    """Return the token from 'Bearer <token>' or raise UnauthenticatedError."""
    if not header or not header.strip():
        raise UnauthenticatedError("Authentication required: no token provided")
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME or not token.strip():
        raise UnauthenticatedError(
            "Authentication required: expected 'Bearer <token>'",
        )
    return token.strip()


def extract_identity(claims: Mapping[str, Any]) -> Identity | None:
    """Build an Identity from verified claims, or None when no id claim is present."""
    subject = _first_claim(claims, IDENTITY_CLAIM_KEYS)
    if subject is None:
        return None
    return Identity(
        id=UserId(subject),
        email=_optional_str(claims.get("email")),
        role=_optional_str(claims.get("role")),
        claims=dict(claims),
    )


def _first_claim(claims: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = claims.get(key)
        if value is None or isinstance(value, bool):
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
