"""Application settings and configuration helpers."""
from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime configuration, built once at startup and passed to the app."""

    database_url: str = Field(
        default="sqlite+aiosqlite:///./office_admin.db", alias="DATABASE_URL"
    )
    jwt_secret: str = Field(default="change-me", alias="JWT_SECRET")
    session_secret: str = Field(default="change-me-too", alias="SESSION_SECRET")
    environment: str = Field(default="development", alias="APP_ENV")
    port: int = Field(default=10000, alias="PORT")
    access_token_expires_minutes: int = Field(default=60)

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
    }

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load `.env` (if present) and read the known variables."""

        load_dotenv(override=False)
        fields = cls.model_fields
        values = {
            info.alias: os.environ[info.alias]
            for info in fields.values()
            if info.alias and info.alias in os.environ
        }
        return cls.model_validate(values)
