# path: trip-briefing-api/app/core/config.py

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


ENV_PREFIX = "TRIP_BRIEFING_"
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseModel):
    database_url: str = "sqlite:///./trip_briefing.db"
    briefing_endpoint: Optional[str] = None
    local_model_url: Optional[str] = None
    local_model_name: str = "llama3.2"
    http_timeout_s: float = Field(default=10.0, gt=0)
    log_level: str = "INFO"

    @field_validator("briefing_endpoint", "local_model_url")
    @classmethod
    def blank_url_is_unset(cls, v: Optional[str]):
        if v is None or not v.strip():
            return None
        return v.strip().rstrip("/")

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str):
        return v.strip().upper()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    # Real environment variables win over .env entries.
    load_dotenv(ENV_FILE)
    return Settings.from_env()
