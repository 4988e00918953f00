"""
Core logic for the Perplexity Search MCP.

    Selector       Keyword scoring of queries against the Sonar models
    Session        Domain/recency filters and the model override policy
    Search         Outbound search call and result normalization
    Dispatcher     Tool routing and argument validation
"""

from core.dispatcher import (
    TOOL_NAMES,
    ToolDispatcher,
    invalid_arguments,
    unknown_tool,
)
from core.search import (
    ToolResult,
    run_search,
)
from core.selector import (
    MODEL_SELECTION_MAP,
    score_models,
    select_model,
)
from core.session import (
    MAX_DOMAIN_FILTERS,
    OVERRIDE_SCORE_THRESHOLD,
    FilterState,
    ModelResolution,
    ModelSelectionState,
    SearchSession,
)

__all__ = [
    # Selector
    "MODEL_SELECTION_MAP",
    "score_models",
    "select_model",
    # Session
    "MAX_DOMAIN_FILTERS",
    "OVERRIDE_SCORE_THRESHOLD",
    "FilterState",
    "ModelResolution",
    "ModelSelectionState",
    "SearchSession",
    # Search
    "ToolResult",
    "run_search",
    # Dispatcher
    "TOOL_NAMES",
    "ToolDispatcher",
    "invalid_arguments",
    "unknown_tool",
]
