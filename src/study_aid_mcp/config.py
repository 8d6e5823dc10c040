"""Server configuration via environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_ENV_PATH = Path.home() / ".config" / "study-aid-mcp" / ".env"

VALID_LANGUAGES = {"english", "tamil"}
VALID_DIFFICULTIES = {"easy", "medium", "hard"}


class ServerConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    gemini_api_key: str = Field(default="")
    model: str = Field(default="gemini-1.5-flash-latest")
    temperature: float = Field(default=0.7)
    default_language: str = Field(default="english")
    default_difficulty: str = Field(default="medium")
    page_delay_seconds: float = Field(default=0.5)
    min_page_chars: int = Field(default=50)

    @field_validator("default_language")
    @classmethod
    def validate_language(cls, value: str) -> str:
        language = value.strip().lower()
        if language not in VALID_LANGUAGES:
            allowed = ", ".join(sorted(VALID_LANGUAGES))
            raise ValueError(f"Invalid language '{value}'. Allowed: {allowed}")
        return language

    @field_validator("default_difficulty")
    @classmethod
    def validate_difficulty(cls, value: str) -> str:
        difficulty = value.strip().lower()
        if difficulty not in VALID_DIFFICULTIES:
            allowed = ", ".join(sorted(VALID_DIFFICULTIES))
            raise ValueError(f"Invalid difficulty '{value}'. Allowed: {allowed}")
        return difficulty

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, value: float) -> float:
        if not 0.0 <= value <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        return value

    @field_validator("page_delay_seconds")
    @classmethod
    def validate_page_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("page_delay_seconds must be >= 0")
        return value

    @field_validator("min_page_chars")
    @classmethod
    def validate_min_page_chars(cls, value: int) -> int:
        if value < 1:
            raise ValueError("min_page_chars must be >= 1")
        return value

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build config from environment variables."""
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            model=os.getenv("STUDY_AID_MODEL", "gemini-1.5-flash-latest"),
            temperature=float(os.getenv("STUDY_AID_TEMPERATURE", "0.7")),
            default_language=os.getenv("STUDY_AID_LANGUAGE", "english"),
            default_difficulty=os.getenv("STUDY_AID_DIFFICULTY", "medium"),
            page_delay_seconds=float(os.getenv("STUDY_AID_PAGE_DELAY", "0.5")),
            min_page_chars=int(os.getenv("STUDY_AID_MIN_PAGE_CHARS", "50")),
        )


_config: ServerConfig | None = None


def get_config() -> ServerConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/study-aid-mcp/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        if load_dotenv(DEFAULT_ENV_PATH, override=False):
            logger.info("Loaded environment from %s", DEFAULT_ENV_PATH)
        _config = ServerConfig.from_env()
    return _config


def update_config(**overrides: object) -> ServerConfig:
    """Patch the live config (used by the ``infra_configure`` tool)."""
    global _config
    cfg = get_config()
    data = cfg.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    _config = ServerConfig(**data)
    return _config
