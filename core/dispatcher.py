"""
Tool dispatch.

Routes tool calls by name, validates their arguments against the input
models, and formats handler output. Bad arguments and unknown tools are
protocol faults (``McpError``); upstream search failures are not.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Type

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData
from pydantic import BaseModel, ValidationError

from api import PerplexityClient
from core.search import ToolResult, run_search
from core.selector import MODEL_SELECTION_MAP
from core.session import SearchSession
from models import (
    DomainFilterInput,
    FilterAction,
    ModelInfoInput,
    RecencyFilterInput,
    SearchInput,
)

__all__ = [
    "TOOL_NAMES",
    "ToolDispatcher",
    "invalid_arguments",
    "invalid_params",
    "unknown_tool",
]

logger = logging.getLogger(__name__)

TOOL_NAMES = (
    "search",
    "domain_filter",
    "recency_filter",
    "clear_filters",
    "list_filters",
    "model_info",
)

_INVALID_MESSAGES = {
    "search": "Invalid search arguments. Query must be a non-empty string.",
    "domain_filter": (
        "Invalid domain filter arguments. Domain must be a non-empty string "
        'and action must be "allow" or "block".'
    ),
    "recency_filter": (
        "Invalid recency filter argument. "
        "Filter must be one of: hour, day, week, month, none."
    ),
    "model_info": (
        "Invalid model argument. "
        "Model must be one of the valid models or not provided."
    ),
}


def invalid_params(message: str) -> McpError:
    return McpError(ErrorData(code=INVALID_PARAMS, message=message))


def invalid_arguments(tool: str) -> McpError:
    return invalid_params(
        _INVALID_MESSAGES.get(tool, f"Invalid arguments for tool: {tool}")
    )


def unknown_tool(name: str) -> McpError:
    return McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))


def _validate(tool: str, schema: Type[BaseModel], arguments: Mapping[str, Any]):
    try:
        return schema.model_validate(dict(arguments))
    except ValidationError as exc:
        logger.debug("Rejected %s arguments: %s", tool, exc)
        raise invalid_arguments(tool) from exc


class ToolDispatcher:
    """Runs the server's tools against one ``SearchSession``."""

    def __init__(self, session: SearchSession, client: PerplexityClient):
        self.session = session
        self.client = client
        self._handlers: Dict[
            str, Callable[[Mapping[str, Any]], Awaitable[ToolResult]]
        ] = {name: getattr(self, name) for name in TOOL_NAMES}

    async def call(
        self, name: str, arguments: Optional[Mapping[str, Any]] = None
    ) -> ToolResult:
        """Dispatch a tool call.

        Raises:
            McpError: ``METHOD_NOT_FOUND`` for unknown tools, ``INVALID_PARAMS``
                for arguments that fail validation.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise unknown_tool(name)
        return await handler(arguments or {})

    async def search(self, arguments: Mapping[str, Any]) -> ToolResult:
        args = _validate("search", SearchInput, arguments)
        return await run_search(self.client, self.session, args.query)

    async def domain_filter(self, arguments: Mapping[str, Any]) -> ToolResult:
        args = _validate("domain_filter", DomainFilterInput, arguments)
        try:
            domain = self.session.domain_filter(args.domain, args.action)
        except ValueError as exc:
            raise invalid_arguments("domain_filter") from exc

        if args.action is FilterAction.ALLOW:
            return ToolResult(
                f"Added {domain} to allowed domains. "
                "Search results will prioritize this domain."
            )
        return ToolResult(
            f"Added {domain} to blocked domains. "
            "Search results will exclude this domain."
        )

    async def recency_filter(self, arguments: Mapping[str, Any]) -> ToolResult:
        args = _validate("recency_filter", RecencyFilterInput, arguments)
        window = self.session.recency_filter(args.filter)

        if window is None:
            return ToolResult(
                "Recency filter has been disabled. "
                "Searches will include results from any time period."
            )
        return ToolResult(
            f'Recency filter set to "{window.value}". '
            f"Searches will be limited to content from the last {window.span}."
        )

    async def clear_filters(self, arguments: Mapping[str, Any]) -> ToolResult:
        self.session.clear_filters()
        return ToolResult(
            "All domain and recency filters have been cleared. "
            "Searches will use default Perplexity sources."
        )

    async def list_filters(self, arguments: Mapping[str, Any]) -> ToolResult:
        return ToolResult(self.session.list_filters())

    async def model_info(self, arguments: Mapping[str, Any]) -> ToolResult:
        args = _validate("model_info", ModelInfoInput, arguments)
        session = self.session
        lines = []

        if args.model:
            session.pin_model(args.model)
            lines += [
                f"Model has been set to: {session.selection.current_model}",
                "Auto-selection: DISABLED (will only switch if query has strong intent matching)",
                "To re-enable auto-selection, run model_info with no parameters",
                "",
            ]
        else:
            session.reset_model()
            lines += [
                f"Current model: {session.selection.current_model} (reset to default)",
                f"Default model (from environment): {session.default_model}",
                "Auto-selection: ENABLED (model will be selected based on query keywords)",
                "",
            ]

        lines.append("Available models:")
        for model, criteria in MODEL_SELECTION_MAP.items():
            lines.append(f"- {model}: {criteria.description}")
            lines.append(f"  Keywords: {', '.join(criteria.keywords)}")

        lines += [
            "",
            "To use automatic model selection: Call this tool with no parameters",
            'To set a specific model: Use this tool with the "model" parameter',
        ]
        return ToolResult("\n".join(lines))
