#!/usr/bin/env python3
"""
Perplexity Search MCP Server

An MCP server that forwards web-search queries to the Perplexity API and lets
the host tune how searches run for the rest of the session.

Features:
- Web search through Perplexity Sonar models
- Automatic model selection from query intent, with manual pinning
- Domain allow/block filters and a recency window per session
- Upstream API errors reported as tool errors, never as protocol faults
- Bad arguments and unknown tools answered with JSON-RPC errors
"""

import argparse
import inspect
import logging
import sys
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolRequest, CallToolResult, ServerResult, TextContent

from api import PerplexityClient
from core import (
    SearchSession,
    ToolDispatcher,
    ToolResult,
    invalid_arguments,
    unknown_tool,
)
from models import VALID_MODELS, ConfigurationError, Settings
from utils import configure_logging

SERVER_NAME = "perplexity-search-server"

logger = logging.getLogger("perplexity_search_mcp")

ModelName = Literal[
    "sonar-deep-research",
    "sonar-reasoning-pro",
    "sonar-reasoning",
    "sonar-pro",
    "sonar",
]


def to_call_result(result: ToolResult) -> CallToolResult:
    """Wrap a handler result for the MCP wire format."""
    return CallToolResult(
        content=[TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def build_dispatcher(
    settings: Settings, client: Optional[PerplexityClient] = None
) -> ToolDispatcher:
    """Create a dispatcher bound to a fresh session."""
    if client is None:
        client = PerplexityClient(
            settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )
    return ToolDispatcher(SearchSession(default_model=settings.default_model), client)


def create_server(dispatcher: ToolDispatcher) -> FastMCP:
    """Build the FastMCP server and register every tool on ``dispatcher``."""
    mcp = FastMCP(SERVER_NAME)

    # ========================================================================
    # Search
    # ========================================================================

    @mcp.tool(
        name="search",
        annotations={
            "title": "Search the Web with Perplexity",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
        structured_output=False,
    )
    async def search(query: str) -> CallToolResult:
        """
        Search the web using Perplexity AI.

        The model is picked from the query's wording unless one was pinned
        with model_info. The answer starts with a line naming the model used.

        Args:
            query (str): The search query
        """
        return to_call_result(await dispatcher.call("search", {"query": query}))

    # ========================================================================
    # Filters
    # ========================================================================

    @mcp.tool(
        name="domain_filter",
        annotations={
            "title": "Allow or Block a Domain",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        structured_output=False,
    )
    async def domain_filter(
        domain: str, action: Literal["allow", "block"]
    ) -> CallToolResult:
        """
        Add a domain to allow or block in search results (max 3 domains per type).

        Args:
            domain (str): Domain name without http:// or https:// (example: wikipedia.org)
            action (str): Whether to allow or block this domain
        """
        return to_call_result(
            await dispatcher.call(
                "domain_filter", {"domain": domain, "action": action}
            )
        )

    @mcp.tool(
        name="recency_filter",
        annotations={
            "title": "Set Search Recency",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        structured_output=False,
    )
    async def recency_filter(
        filter: Literal["hour", "day", "week", "month", "none"],
    ) -> CallToolResult:
        """
        Set the time recency for search results.

        Args:
            filter (str): Time window for search results (none to disable filtering)
        """
        return to_call_result(
            await dispatcher.call("recency_filter", {"filter": filter})
        )

    @mcp.tool(
        name="clear_filters",
        annotations={
            "title": "Clear Search Filters",
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        structured_output=False,
    )
    async def clear_filters() -> CallToolResult:
        """Clear all domain and recency filters."""
        return to_call_result(await dispatcher.call("clear_filters"))

    @mcp.tool(
        name="list_filters",
        annotations={
            "title": "List Search Filters",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        structured_output=False,
    )
    async def list_filters() -> CallToolResult:
        """List all current domain and recency filters."""
        return to_call_result(await dispatcher.call("list_filters"))

    # ========================================================================
    # Models
    # ========================================================================

    @mcp.tool(
        name="model_info",
        annotations={
            "title": "Show or Set the Search Model",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": False,
        },
        structured_output=False,
    )
    async def model_info(model: Optional[ModelName] = None) -> CallToolResult:
        """
        Get information about available models and optionally set a specific model.

        Calling it without a model resets to the default model and turns
        automatic selection back on.

        Args:
            model (Optional[str]): Set a specific model instead of using automatic selection
        """
        arguments = {} if model is None else {"model": model}
        return to_call_result(await dispatcher.call("model_info", arguments))

    install_call_tool_handler(
        mcp,
        [search, domain_filter, recency_filter, clear_filters, list_filters, model_info],
    )
    return mcp


def install_call_tool_handler(
    mcp: FastMCP, tools: List[Callable[..., Awaitable[CallToolResult]]]
) -> None:
    """
    Answer tools/call without FastMCP's exception wrapping.

    FastMCP reports every exception raised by a tool as an ``isError`` result.
    This handler lets ``McpError`` reach the low-level request loop instead,
    which sends it to the client as a JSON-RPC error with its code intact.
    Upstream failures are still ordinary ``isError`` results.
    """
    by_name: Dict[str, Callable[..., Awaitable[CallToolResult]]] = {
        fn.__name__: fn for fn in tools
    }

    async def handle_call_tool(request: CallToolRequest) -> ServerResult:
        name = request.params.name
        fn = by_name.get(name)
        if fn is None:
            raise unknown_tool(name)

        signature = inspect.signature(fn)
        arguments: Dict[str, Any] = {
            key: value
            for key, value in (request.params.arguments or {}).items()
            if key in signature.parameters
        }
        try:
            bound = signature.bind(**arguments)
        except TypeError as exc:
            raise invalid_arguments(name) from exc

        return ServerResult(await fn(*bound.args, **bound.kwargs))

    mcp._mcp_server.request_handlers[CallToolRequest] = handle_call_tool


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="perplexity-search-mcp",
        description="Perplexity web search exposed as MCP tools over stdio.",
    )
    parser.add_argument(
        "--model",
        choices=VALID_MODELS,
        help="Default model (overrides PERPLEXITY_MODEL)",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (overrides PERPLEXITY_LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = Settings.from_env(model=args.model, log_level=args.log_level)
    except ConfigurationError as e:
        configure_logging("ERROR")
        logger.error("Startup failed: %s", e)
        return 1

    configure_logging(settings.log_level)
    mcp = create_server(build_dispatcher(settings))

    logger.info(
        "Perplexity Search MCP server running on stdio (default model: %s)",
        settings.default_model,
    )
    logger.info("Automatic model selection enabled based on query intent")

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    sys.exit(main())
