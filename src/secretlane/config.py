"""Application configuration.

Learn: pydantic-settings resolves every value once, in layers:
defaults → config.yaml (optional) → .env → SECRETLANE_* env vars.
Later layers win, so the environment always has the final say.

The resolved Settings object is handed to create_app() and from there
into each constructor. Nothing below reads configuration on its own.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Driver names accepted for backwards compatibility with DB_DRIVER-style configs.
_DIALECT_ALIASES = {
    "sqlite": "embedded",
    "postgres": "client-server",
    "postgresql": "client-server",
}


class Settings(BaseSettings):
    """All app configuration. Set via SECRETLANE_* env vars or config.yaml."""

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080

    # Storage
    db_dialect: Literal["embedded", "client-server"] = "embedded"
    sqlite_path: str = "./sqlite-secretlane.db"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_dbname: str = "secretlane"
    postgres_sslmode: str = "disable"
    # Full SQLAlchemy URL; overrides the per-dialect fields above when set.
    database_url: Optional[str] = None
    seed_default_user: bool = True

    # Sessions
    jwt_secret: str = ""
    token_ttl_hours: int = 24
    cookie_name: str = "token"
    cookie_secure: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_prefix="SECRETLANE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        yaml_file="config.yaml",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
        )

    @field_validator("db_dialect", mode="before")
    @classmethod
    def normalize_dialect(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return _DIALECT_ALIASES.get(value, value)
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide resolved settings."""
    return Settings()
