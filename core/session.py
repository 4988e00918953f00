"""
Per-session search state.

A ``SearchSession`` owns the domain/recency filters and the model selection
state for one server process, and applies the override policy that decides
which model a search actually runs with.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from core.selector import MODEL_SELECTION_MAP, select_model
from models import DEFAULT_MODEL, VALID_MODELS, FilterAction, RecencyWindow
from utils import clean_domain

__all__ = [
    "MAX_DOMAIN_FILTERS",
    "OVERRIDE_SCORE_THRESHOLD",
    "FilterState",
    "ModelSelectionState",
    "ModelResolution",
    "SearchSession",
]

# Upper bound the search API accepts for search_domain_filter
MAX_DOMAIN_FILTERS = 3

# A pinned model yields to a recommendation scoring at least this much
OVERRIDE_SCORE_THRESHOLD = 2


@dataclass
class FilterState:
    """Allowed/blocked domains and the recency window."""

    allowed_domains: List[str] = field(default_factory=list)
    blocked_domains: List[str] = field(default_factory=list)
    recency_filter: Optional[RecencyWindow] = None

    def allow(self, domain: str) -> None:
        if domain in self.blocked_domains:
            self.blocked_domains.remove(domain)
        if domain not in self.allowed_domains:
            self.allowed_domains.append(domain)

    def block(self, domain: str) -> None:
        if domain in self.allowed_domains:
            self.allowed_domains.remove(domain)
        if domain not in self.blocked_domains:
            self.blocked_domains.append(domain)

    def clear(self) -> None:
        self.allowed_domains = []
        self.blocked_domains = []
        self.recency_filter = None

    def combined_domain_filter(self) -> List[str]:
        """Domain list for the API: allowed first, then ``-blocked``, at most 3."""
        combined = list(self.allowed_domains[:MAX_DOMAIN_FILTERS])
        remaining = MAX_DOMAIN_FILTERS - len(combined)
        combined.extend(f"-{domain}" for domain in self.blocked_domains[:remaining])
        return combined


@dataclass
class ModelSelectionState:
    current_model: str = DEFAULT_MODEL
    auto_selection_enabled: bool = True


@dataclass(frozen=True)
class ModelResolution:
    """The model a single search runs with."""

    model: str
    description: str
    overridden: bool = False


class SearchSession:
    """Mutable filter and model state for one MCP session."""

    def __init__(self, default_model: str = DEFAULT_MODEL):
        if default_model not in VALID_MODELS:
            raise ValueError(
                f"Invalid default model '{default_model}'. "
                f"Valid models are: {', '.join(VALID_MODELS)}"
            )
        self.default_model = default_model
        self.filters = FilterState()
        self.selection = ModelSelectionState(current_model=default_model)

    # ── Domain and recency filters ──────────────────────────────────────────

    def domain_filter(self, domain: str, action: FilterAction) -> str:
        """Allow or block a domain; returns the cleaned domain.

        Raises ``ValueError`` when nothing is left after cleaning.
        """
        cleaned = clean_domain(domain)
        if not cleaned:
            raise ValueError(f"'{domain}' does not contain a domain name")

        if FilterAction(action) is FilterAction.ALLOW:
            self.filters.allow(cleaned)
        else:
            self.filters.block(cleaned)
        return cleaned

    def recency_filter(self, value: str) -> Optional[RecencyWindow]:
        """Set the recency window; ``"none"`` disables it."""
        self.filters.recency_filter = None if value == "none" else RecencyWindow(value)
        return self.filters.recency_filter

    def clear_filters(self) -> None:
        self.filters.clear()

    def list_filters(self) -> str:
        filters = self.filters

        if filters.allowed_domains:
            allowed_text = f"Allowed domains: {', '.join(filters.allowed_domains)}"
        else:
            allowed_text = "No allowed domains configured."

        if filters.blocked_domains:
            blocked_text = f"Blocked domains: {', '.join(filters.blocked_domains)}"
        else:
            blocked_text = "No blocked domains configured."

        if filters.recency_filter:
            recency_text = (
                f"Recency filter: {filters.recency_filter.value} "
                f"(limiting to content from the last {filters.recency_filter.span})"
            )
        else:
            recency_text = "No recency filter configured."

        limit_text = (
            f"Note: Perplexity API supports up to {MAX_DOMAIN_FILTERS} domains total "
            "with priority given to allowed domains."
        )

        return (
            f"Current filters:\n\n{allowed_text}\n{blocked_text}\n{recency_text}"
            f"\n\n{limit_text}"
        )

    # ── Model selection ─────────────────────────────────────────────────────

    def pin_model(self, model: str) -> None:
        if model not in VALID_MODELS:
            raise ValueError(f"Unknown model '{model}'")
        self.selection.current_model = model
        self.selection.auto_selection_enabled = False

    def reset_model(self) -> None:
        self.selection.current_model = self.default_model
        self.selection.auto_selection_enabled = True

    def resolve_model(self, query: str) -> ModelResolution:
        """Decide which model runs ``query``.

        In auto mode the recommendation is adopted and remembered. With a
        pinned model, a recommendation scoring at least
        ``OVERRIDE_SCORE_THRESHOLD`` wins for this call only; the pin stays.
        """
        recommendation = select_model(query, self.default_model)

        if self.selection.auto_selection_enabled:
            self.selection.current_model = recommendation.model
            return ModelResolution(recommendation.model, recommendation.description)

        pinned = self.selection.current_model
        if (
            recommendation.score >= OVERRIDE_SCORE_THRESHOLD
            and recommendation.model != pinned
        ):
            return ModelResolution(
                recommendation.model,
                f"{recommendation.description} (auto-selected based on query intent)",
                overridden=True,
            )

        return ModelResolution(pinned, MODEL_SELECTION_MAP[pinned].description)
