"""Root conftest — shared test configuration."""

import os

import pytest

# Tests never talk to a real database or identity provider
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("JWT_SECRET", "test-only-signing-secret-0123456789abcdef")
os.environ.setdefault("LOG_FORMAT", "text")


@pytest.fixture
def jwt_secret() -> str:
    return os.environ["JWT_SECRET"]
