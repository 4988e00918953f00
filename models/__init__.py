"""
Data models for the Perplexity Search MCP.

Provides Pydantic models for tool argument validation, the model-selection
records, and the configuration enums and settings.
"""

from models.config import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    VALID_MODELS,
    ConfigurationError,
    FilterAction,
    RecencyWindow,
    Settings,
)
from models.search import (
    DomainFilterInput,
    ModelCriteria,
    ModelInfoInput,
    ModelScore,
    RecencyFilterInput,
    SearchInput,
)

__all__ = [
    # Configuration
    "DEFAULT_BASE_URL",
    "DEFAULT_MODEL",
    "DEFAULT_TIMEOUT",
    "VALID_MODELS",
    "ConfigurationError",
    "FilterAction",
    "RecencyWindow",
    "Settings",
    # Tool inputs
    "SearchInput",
    "DomainFilterInput",
    "RecencyFilterInput",
    "ModelInfoInput",
    # Model selection
    "ModelCriteria",
    "ModelScore",
]
