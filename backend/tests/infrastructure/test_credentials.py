"""Credential Verification — PyJWT signature, expiry and configuration failures."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.config import Settings
from app.core.errors import (
    ConfigurationError, CredentialExpiredError, InvalidCredentialError,
)
from app.infrastructure.credentials import verify_token

SECRET = "credentials-test-secret-0123456789abcdef"


def _settings(**overrides) -> Settings:
    return Settings(jwt_secret=SECRET, **overrides)


def _token(payload: dict, secret: str = SECRET, algorithm: str = "HS256") -> str:
    return jwt.encode(payload, secret, algorithm=algorithm)


def _in(seconds: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(seconds=seconds)


def test_valid_token_returns_claims():
    claims = verify_token(_token({"user_id": "u1", "exp": _in(60)}), _settings())
    assert claims["user_id"] == "u1"


def test_token_without_exp_is_accepted():
    assert verify_token(_token({"sub": "u1"}), _settings())["sub"] == "u1"


def test_expired_token_raises_credential_expired():
    with pytest.raises(CredentialExpiredError) as exc:
        verify_token(_token({"sub": "u1", "exp": _in(-60)}), _settings())
    assert exc.value.code == "CREDENTIAL_EXPIRED"


def test_leeway_tolerates_small_clock_skew():
    token = _token({"sub": "u1", "exp": _in(-5)})
    assert verify_token(token, _settings(jwt_leeway_seconds=30))["sub"] == "u1"


def test_wrong_signature_raises_invalid_credential():
    token = _token({"sub": "u1"}, secret="another-secret-0123456789abcdef-xyz")
    with pytest.raises(InvalidCredentialError):
        verify_token(token, _settings())


def test_garbage_token_raises_invalid_credential():
    with pytest.raises(InvalidCredentialError):
        verify_token("not-a-jwt", _settings())


def test_algorithm_not_in_allow_list_is_rejected():
    token = _token({"sub": "u1"}, algorithm="HS512")
    with pytest.raises(InvalidCredentialError):
        verify_token(token, _settings(jwt_algorithms=["HS256"]))


def test_missing_secret_is_a_configuration_error():
    with pytest.raises(ConfigurationError) as exc:
        verify_token(_token({"sub": "u1"}), Settings(jwt_secret=None))
    assert exc.value.http_status == 500
