"""
Environment-driven settings, grouped by concern.

Each group reads its own prefix (MONGO_, APP_, FOOTBALL_API_, TELEMETRY_)
from the process environment or a local `.env` file.
"""

from functools import lru_cache
from typing import Literal
from urllib.parse import quote_plus

from pydantic import Field, SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Development-only placeholders; production refuses to start with them
DEFAULT_ADMIN_API_TOKEN = "change-me"
DEFAULT_SESSION_SECRET = "change-me-too"


def _env(prefix: str = "") -> SettingsConfigDict:
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class MongoSettings(BaseSettings):
    """
    Where the database lives and how the driver pool behaves.

    MONGO_URL, when set, is used as-is; otherwise the URI is assembled
    from host, port and root credentials.
    """

    model_config = _env("MONGO_")

    url: SecretStr | None = None
    host: str = "localhost"
    port: int = Field(default=27017, ge=1, le=65535)
    root_user: str = "admin"
    root_password: SecretStr = SecretStr("secret")
    auth_source: str = "admin"
    db_name: str = "matchday"

    min_pool_size: int = Field(default=5, ge=0)
    max_pool_size: int = Field(default=50, ge=1)
    max_idle_time_ms: int = Field(default=60_000, ge=0)
    connect_timeout_ms: int = Field(default=5_000, ge=100)
    server_selection_timeout_ms: int = Field(default=5_000, ge=100)

    @computed_field  # type: ignore[misc]
    @property
    def uri(self) -> str:
        if self.url is not None:
            return self.url.get_secret_value()
        user = quote_plus(self.root_user)
        password = quote_plus(self.root_password.get_secret_value())
        return (
            f"mongodb://{user}:{password}@{self.host}:{self.port}/{self.db_name}"
            f"?authSource={self.auth_source}"
        )


class AppSettings(BaseSettings):
    """HTTP server, environment and auth secrets."""

    model_config = _env("APP_")

    name: str = "Matchday API"
    version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    # Browsers send the session cookie only to these origins
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    admin_api_token: SecretStr = Field(
        default=SecretStr(DEFAULT_ADMIN_API_TOKEN),
        description="Value the admin routes expect in the matchday-auth-token header",
    )
    session_secret: SecretStr = Field(
        default=SecretStr(DEFAULT_SESSION_SECRET),
        description="Signing key of the session cookie",
    )
    session_cookie: str = "matchday_session"
    session_ttl_hours: int = Field(default=24 * 14, ge=1)

    @model_validator(mode="after")
    def require_real_secrets_in_production(self) -> "AppSettings":
        if not self.is_production:
            return self
        placeholders = [
            name
            for name, value, default in (
                ("APP_ADMIN_API_TOKEN", self.admin_api_token, DEFAULT_ADMIN_API_TOKEN),
                ("APP_SESSION_SECRET", self.session_secret, DEFAULT_SESSION_SECRET),
            )
            if value.get_secret_value() in ("", default)
        ]
        if placeholders:
            raise ValueError(" and ".join(placeholders) + " must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class FootballApiSettings(BaseSettings):
    model_config = _env("FOOTBALL_API_")

    base_url: str = "https://v3.football.api-sports.io"
    api_key: SecretStr = SecretStr("")
    timeout_seconds: float = Field(default=30.0, gt=0)
    # Next fixtures of a team scanned when picking the upcoming game
    upcoming_fixtures: int = Field(default=10, ge=1, le=99)


class TelemetrySettings(BaseSettings):
    """Sentry reporting; everything is off while `dsn` is unset."""

    model_config = _env("TELEMETRY_")

    dsn: str | None = None
    role_name: str = "matchday-api"
    traces_sample_rate: float = Field(default=0.0, ge=0.0, le=1.0)


class Settings(BaseSettings):
    model_config = _env()

    mongo: MongoSettings = Field(default_factory=MongoSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    football_api: FootballApiSettings = Field(default_factory=FootballApiSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)


@lru_cache
def get_settings() -> Settings:
    """Settings of this process, read from the environment once."""
    return Settings()
