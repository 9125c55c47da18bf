"""Credential Verification — PyJWT signature/expiry checks against the server-held secret.

Invariants:
    - Never returns unverified claims
    - ExpiredSignatureError → CredentialExpiredError; any other InvalidTokenError → InvalidCredentialError
    - Missing secret → ConfigurationError (500), never a silent pass

Design Decisions:
    - Algorithms pinned from Settings: tokens cannot choose their own algorithm
    - Expiry is enforced when present; tokens without exp are accepted, matching the issuer
"""

import logging
from typing import Any

import jwt

from app.config import Settings
from app.core.errors import (
    ConfigurationError, CredentialExpiredError, InvalidCredentialError,
)

logger = logging.getLogger(__name__)


def verify_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify signature and expiry; return the decoded claims."""
    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not configured")
        raise ConfigurationError("jwt_secret")
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=settings.jwt_algorithms,
            leeway=settings.jwt_leeway_seconds,
            options={"verify_aud": False},
        )
    except jwt.ExpiredSignatureError:
        raise CredentialExpiredError()
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected credential: {e}")
        raise InvalidCredentialError()
    if not isinstance(claims, dict):
        raise InvalidCredentialError()
    return claims
