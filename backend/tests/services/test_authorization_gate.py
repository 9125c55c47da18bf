"""Authorization Gate — sequencing of parse → verify → extract and owner checks."""

import logging

import jwt
import pytest

from app.config import Settings
from app.core.errors import (
    CredentialExpiredError, ForbiddenError, InvalidCredentialError,
    UnauthenticatedError,
)
from app.services.authorization_gate import AuthorizationGate

SECRET = "gate-test-secret-0123456789abcdef-0000"


@pytest.fixture
def gate() -> AuthorizationGate:
    return AuthorizationGate(Settings(jwt_secret=SECRET))


def _bearer(payload: dict) -> str:
    return f"Bearer {jwt.encode(payload, SECRET, algorithm='HS256')}"


def test_authenticate_returns_identity(gate):
    identity = gate.authenticate(_bearer({"userId": "U1", "email": "u1@example.com"}))
    assert identity.id == "U1"
    assert identity.email == "u1@example.com"


def test_missing_header_is_unauthenticated(gate):
    with pytest.raises(UnauthenticatedError):
        gate.authenticate(None)


def test_token_without_identity_claim_is_unauthenticated(gate):
    with pytest.raises(UnauthenticatedError):
        gate.authenticate(_bearer({"email": "nobody@example.com"}))


def test_expired_token_is_rejected(gate):
    with pytest.raises(CredentialExpiredError):
        gate.authenticate(_bearer({"sub": "U1", "exp": 1}))


def test_forged_token_is_rejected(gate):
    forged = jwt.encode({"sub": "U1"}, "forged-secret-0123456789abcdef-0000", algorithm="HS256")
    with pytest.raises(InvalidCredentialError):
        gate.authenticate(f"Bearer {forged}")


def test_rejection_is_logged_with_outcome(gate, caplog):
    with caplog.at_level(logging.WARNING, logger="app.services.authorization_gate"):
        with pytest.raises(UnauthenticatedError):
            gate.authenticate("Basic abc")
    assert caplog.records[-1].gate_outcome == "rejected"


def test_authorize_owner_allows_owner(gate, caplog):
    identity = gate.authenticate(_bearer({"sub": "U1"}))
    with caplog.at_level(logging.INFO, logger="app.services.authorization_gate"):
        gate.authorize_owner("U1", identity, "update", "opp-1")
    assert caplog.records[-1].gate_outcome == "authorized"


def test_authorize_owner_forbids_other_identity(gate, caplog):
    identity = gate.authenticate(_bearer({"sub": "U2"}))
    with caplog.at_level(logging.WARNING, logger="app.services.authorization_gate"):
        with pytest.raises(ForbiddenError):
            gate.authorize_owner("U1", identity, "delete", "opp-1")
    assert caplog.records[-1].gate_outcome == "forbidden"
