"""Application settings via Pydantic Settings."""

from functools import lru_cache
import json

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Reciters API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Hosted database (PostgREST gateway)
    supabase_url: str = Field(
        default="http://localhost:54321",
        validation_alias=AliasChoices("SUPABASE_URL"),
    )
    supabase_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_KEY", "SUPABASE_ANON_KEY"),
    )
    supabase_schema: str = Field(
        default="public",
        validation_alias=AliasChoices("SUPABASE_SCHEMA"),
    )
    supabase_timeout: float = Field(
        default=30.0,
        validation_alias=AliasChoices("SUPABASE_TIMEOUT"),
        gt=0,
        description="HTTP timeout (seconds) for requests to the database gateway",
    )

    @property
    def rest_url(self) -> str:
        """Base URL of the REST gateway (``<project>/rest/v1``)."""
        return f"{self.supabase_url.rstrip('/')}/rest/v1"

    # Tables
    reciters_table: str = "reciters"
    results_table: str = "reciterResults"

    # CORS
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        validation_alias=AliasChoices("CORS_ORIGINS", "ALLOWED_ORIGINS"),
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v: object) -> list[str]:
        """
        Accept either a JSON array string, a comma-separated string,
        or an already-parsed list.
        """
        if v is None:
            return []
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("["):
                try:
                    v = json.loads(s)
                except json.JSONDecodeError:
                    # Not valid JSON, treat as comma-separated.
                    v = s.strip("[]").split(",")
            else:
                v = s.split(",")
        if isinstance(v, list):
            return [str(x).strip().strip('"') for x in v if str(x).strip()]
        return [str(v).strip()] if str(v).strip() else []


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
