"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache), one instance per process
    - Settings is injected (Depends) into the authorization gate and DB init, never read ad hoc

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - jwt_secret has no default: protected routes fail with CONFIGURATION_ERROR until it is set,
      read-only routes keep working
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://opportunities:opportunities@db:5432/opportunities"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Credentials (tokens are issued by the external identity provider)
    jwt_secret: str | None = None
    jwt_algorithms: list[str] = ["HS256"]
    jwt_leeway_seconds: int = 0

    # API
    service_name: str = "opportunities-service"
    api_version: str = "1.0.0"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
