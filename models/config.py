"""Configuration enums and settings for the Perplexity Search MCP."""

import logging
import os
from enum import Enum
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_MODEL = "sonar-pro"
DEFAULT_BASE_URL = "https://api.perplexity.ai"
DEFAULT_TIMEOUT = 300.0

VALID_MODELS = (
    "sonar-deep-research",
    "sonar-reasoning-pro",
    "sonar-reasoning",
    "sonar-pro",
    "sonar",
)


class ConfigurationError(ValueError):
    """Raised when the server cannot start with the given configuration."""


class FilterAction(str, Enum):
    """What to do with a domain passed to ``domain_filter``."""

    ALLOW = "allow"
    BLOCK = "block"


class RecencyWindow(str, Enum):
    """Trailing time windows accepted by the search API."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @property
    def span(self) -> str:
        """Human wording of the window, as shown in tool output."""
        return {
            RecencyWindow.HOUR: "hour",
            RecencyWindow.DAY: "24 hours",
            RecencyWindow.WEEK: "7 days",
            RecencyWindow.MONTH: "30 days",
        }[self]


class Settings(BaseModel):
    """Process configuration, resolved once at startup."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    api_key: str = Field(..., min_length=1)
    default_model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    log_level: str = "INFO"

    @field_validator("default_model")
    @classmethod
    def validate_default_model(cls, v: str) -> str:
        if v not in VALID_MODELS:
            raise ValueError(
                f"Invalid default model '{v}'. Valid models are: {', '.join(VALID_MODELS)}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{v}'")
        return level

    @classmethod
    def from_env(
        cls,
        model: Optional[str] = None,
        log_level: Optional[str] = None,
    ) -> "Settings":
        """Build settings from the environment (and ``.env``).

        Explicit arguments win over environment variables. A missing API key
        or an unknown default model raises ``ConfigurationError``.
        """
        load_dotenv(find_dotenv(usecwd=True))

        api_key = os.getenv("PERPLEXITY_API_KEY")
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                "PERPLEXITY_API_KEY environment variable is required"
            )

        values = {
            "api_key": api_key,
            "default_model": model or os.getenv("PERPLEXITY_MODEL") or DEFAULT_MODEL,
            "base_url": os.getenv("PERPLEXITY_API_URL") or DEFAULT_BASE_URL,
            "timeout": os.getenv("PERPLEXITY_TIMEOUT") or DEFAULT_TIMEOUT,
            "log_level": log_level or os.getenv("PERPLEXITY_LOG_LEVEL") or "INFO",
        }

        try:
            return cls(**values)
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            raise ConfigurationError(messages) from exc
