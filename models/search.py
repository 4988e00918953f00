"""Tool input models and model-selection records for the Perplexity Search MCP."""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.config import VALID_MODELS, FilterAction


class SearchInput(BaseModel):
    """Input model for the ``search`` tool."""

    query: str = Field(..., description="The search query")

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        # Only checked, never rewritten: the query goes upstream verbatim.
        if not v.strip():
            raise ValueError("Query must be a non-empty string")
        return v


class DomainFilterInput(BaseModel):
    """Input model for the ``domain_filter`` tool."""

    model_config = ConfigDict(str_strip_whitespace=True)

    domain: str = Field(
        ...,
        description="Domain name without http:// or https:// (example: wikipedia.org)",
        min_length=1,
    )
    action: FilterAction = Field(
        ..., description="Whether to allow or block this domain"
    )


class RecencyFilterInput(BaseModel):
    """Input model for the ``recency_filter`` tool.

    ``none`` is accepted here and means "disable the recency filter".
    """

    filter: str = Field(
        ...,
        description="Time window for search results (none to disable filtering)",
    )

    @field_validator("filter")
    @classmethod
    def validate_filter(cls, v: str) -> str:
        if v not in ("hour", "day", "week", "month", "none"):
            raise ValueError("Filter must be one of: hour, day, week, month, none")
        return v


class ModelInfoInput(BaseModel):
    """Input model for the ``model_info`` tool."""

    model_config = ConfigDict(protected_namespaces=())

    model: Optional[str] = Field(
        default=None,
        description="Optional: Set a specific model instead of using automatic selection",
    )

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in VALID_MODELS:
            raise ValueError(f"Model must be one of: {', '.join(VALID_MODELS)}")
        return v


class ModelCriteria(BaseModel):
    """Keywords that signal a model, plus its one-line description."""

    model_config = ConfigDict(frozen=True)

    keywords: Tuple[str, ...]
    description: str


class ModelScore(BaseModel):
    """Selector outcome for a single query."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str
    score: int = Field(default=0, ge=0)
    description: str
