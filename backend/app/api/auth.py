"""Auth Dependencies — FastAPI wiring for the authorization gate.

Invariants:
    - The gate is built from the injected Settings (never from os.environ)
    - require_identity runs before the route body: create never touches the store unauthenticated
    - Update/delete take the raw header so the service can check existence first
"""

from fastapi import Depends, Header

from app.config import Settings, get_settings
from app.core.identity import Identity
from app.services.authorization_gate import AuthorizationGate


def get_authorization_gate(
    settings: Settings = Depends(get_settings),
) -> AuthorizationGate:
    return AuthorizationGate(settings)


def require_identity(
    authorization: str | None = Header(None),
    gate: AuthorizationGate = Depends(get_authorization_gate),
) -> Identity:
    """Authenticated caller, or 401 before the handler runs."""
    return gate.authenticate(authorization)
