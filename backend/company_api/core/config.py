"""
Application configuration from environment variables.
Settings class using pydantic-settings; every field has a local-dev default.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from backend root so it loads when running from backend/ or project root
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent

# Request log profiles, keyed by NODE_ENV.
LOG_PROFILE_COMBINED = "combined"
LOG_PROFILE_DEV = "dev"
LOG_PROFILE_NONE = "none"


class Settings(BaseSettings):
    """
    Application settings loaded from environment and .env.
    Env names are kept from the deployment this service replaces (NODE_ENV, MONGO_URL, DB).
    """

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    environment: str = Field(
        default="",
        description="production, development, test; anything else uses the default profile",
        validation_alias="NODE_ENV",
    )

    # MongoDB
    mongo_url: str = Field(default="localhost", validation_alias="MONGO_URL")
    mongo_port: int = Field(default=37017, validation_alias="MONGO_PORT")
    mongo_db: str = Field(default="dev", validation_alias="DB")

    # HTTP
    port: int = Field(default=8080, validation_alias="PORT")
    force_https: bool = Field(
        default=True,
        description="Redirect requests whose X-Forwarded-Proto is not https",
        validation_alias="FORCE_HTTPS",
    )

    # Frontend bundle
    static_dir: Path = Field(
        default=_PACKAGE_ROOT / "assets" / "www",
        validation_alias="STATIC_DIR",
    )
    static_max_age: int = Field(
        default=60 * 60,
        description="Cache-Control max-age (seconds) for static files",
        validation_alias="STATIC_MAX_AGE",
    )

    @field_validator("environment", mode="before")
    @classmethod
    def strip_whitespace(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("mongo_url", "mongo_port", "mongo_db", mode="before")
    @classmethod
    def fallback_when_empty(cls, v: object, info: ValidationInfo) -> object:
        """Empty env values fall back to the literal defaults, like unset ones."""
        if isinstance(v, str):
            v = v.strip()
        if v is None or v == "":
            return cls.model_fields[info.field_name].default
        return v

    @property
    def mongo_uri(self) -> str:
        return f"mongodb://{self.mongo_url}:{self.mongo_port}/{self.mongo_db}"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def request_log_profile(self) -> str:
        """Map NODE_ENV to a request log format."""
        if self.environment == "production":
            return LOG_PROFILE_COMBINED
        if self.environment == "test":
            return LOG_PROFILE_NONE
        return LOG_PROFILE_DEV


@lru_cache()
def get_settings() -> Settings:
    return Settings()
