"""Authorization Gate — single-pass credential check and owner enforcement per request.

Invariants:
    - authenticate(): NoCredential → Verifying → Verified | Rejected, never retried
    - authorize_owner(): Verified → Authorized | Forbidden
    - Every terminal outcome is logged with gate_outcome; no other side effects
    - Holds only the Settings reference: safe to share across concurrent requests

Design Decisions:
    - Class over bare functions: Settings is bound once (from Depends) instead of threaded
      through every call site
    - Steps live in core/identity.py, core/enforce_ownership.py and
      infrastructure/credentials.py; this class only sequences and logs them
"""

import logging

from app.config import Settings
from app.core.domain_types import GateOutcome
from app.core.enforce_ownership import enforce_ownership
from app.core.errors import (
    CredentialExpiredError, ForbiddenError, InvalidCredentialError,
    UnauthenticatedError,
)
from app.core.identity import Identity, extract_identity, parse_bearer_header
from app.infrastructure.credentials import verify_token

logger = logging.getLogger(__name__)


class AuthorizationGate:
    def __init__(self, settings: Settings):
        self._settings = settings

    def authenticate(self, authorization: str | None) -> Identity:
        """Resolve the caller identity from an Authorization header value."""
        try:
            token = parse_bearer_header(authorization)
            claims = verify_token(token, self._settings)
            identity = extract_identity(claims)
            if identity is None:
                raise UnauthenticatedError(
                    "Authentication required: token does not identify a user",
                )
        except (
            UnauthenticatedError, InvalidCredentialError, CredentialExpiredError,
        ) as e:
            logger.warning(
                f"Credential rejected: {e.message}",
                extra={
                    "gate_outcome": GateOutcome.REJECTED.value,
                    "error_code": e.code,
                },
            )
            raise
        return identity

    def authorize_owner(
        self, owner_id: str, identity: Identity, action: str, opportunity_id: str,
    ) -> None:
        """Allow the mutation only when identity owns the record."""
        try:
            enforce_ownership(owner_id, identity, action)
        except ForbiddenError:
            logger.warning(
                f"Ownership check failed for {action}",
                extra={
                    "gate_outcome": GateOutcome.FORBIDDEN.value,
                    "opportunity_id": opportunity_id,
                    "user_id": identity.id,
                },
            )
            raise
        logger.info(
            f"Ownership confirmed for {action}",
            extra={
                "gate_outcome": GateOutcome.AUTHORIZED.value,
                "opportunity_id": opportunity_id,
                "user_id": identity.id,
            },
        )
