"""
Search invocation.

Resolves the model for a query, sends it with the session's filters, and
turns the outcome into a ``ToolResult``. Upstream failures come back as
error results instead of exceptions so the MCP session stays usable.
"""

import logging
from dataclasses import dataclass

from api import PerplexityAPIError, PerplexityClient
from core.session import SearchSession

__all__ = [
    "ToolResult",
    "run_search",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResult:
    text: str
    is_error: bool = False


async def run_search(
    client: PerplexityClient, session: SearchSession, query: str
) -> ToolResult:
    """Search the web for ``query`` with the session's model and filters."""
    resolution = session.resolve_model(query)
    if resolution.overridden:
        logger.info(
            "Auto-overriding manual model selection %s -> %s due to strong intent match",
            session.selection.current_model,
            resolution.model,
        )
    recency = session.filters.recency_filter

    try:
        content = await client.search(
            query,
            model=resolution.model,
            domain_filter=session.filters.combined_domain_filter(),
            recency_filter=recency.value if recency else None,
        )
    except PerplexityAPIError as e:
        logger.error("Search failed with model %s: %s", resolution.model, e.message)
        return ToolResult(f"Perplexity API error: {e.message}", is_error=True)

    banner = f"[Using model: {resolution.model} - {resolution.description}]"
    return ToolResult(f"{banner}\n\n{content}")
