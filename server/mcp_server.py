"""MCP server exposing the Grok search pipeline as tools over stdio."""

import json
from typing import Any

import mcp.types as types
import pydantic
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from config.config import Config
from models.errors import GrokSearchError
from orchestrator.search_orchestrator import SearchOrchestrator, create_search_orchestrator
from server.schemas.requests import SearchToolArguments
from server.schemas.responses import HealthResponseDTO, SearchErrorDTO
from tools.definitions import (
    HEALTH_CHECK_TOOL,
    SEARCH_TOOLS,
    TOOL_DEFINITIONS,
    TOOL_SOURCE_KINDS,
)
from utils.logger import get_logger

logger = get_logger(__name__)

SERVER_NAME = "grok-search-mcp"
SERVER_VERSION = "1.0.0"


class ToolCallError(Exception):
    """Tool failure; the MCP layer returns its message as an isError result."""


def _describe_validation_error(error: pydantic.ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
        for err in error.errors()
    )


class GrokSearchServer:
    """Tool handlers on top of a SearchOrchestrator."""

    def __init__(self, orchestrator: SearchOrchestrator | None = None, config: Config | None = None):
        self.orchestrator = orchestrator or create_search_orchestrator(config)

    async def handle_call(self, name: str, arguments: dict[str, Any] | None) -> str:
        if name in SEARCH_TOOLS:
            return await self.handle_search(name, arguments or {})
        if name == HEALTH_CHECK_TOOL:
            return self.handle_health_check()
        raise ToolCallError(f"Unknown tool: {name}")

    async def handle_search(self, tool_name: str, arguments: dict[str, Any]) -> str:
        """
        Run a search tool and return the pretty-printed JSON result.

        Raises:
            ToolCallError: With the JSON failure envelope as its message
        """
        source_kind = TOOL_SOURCE_KINDS.get(tool_name)
        try:
            args = SearchToolArguments.model_validate(arguments)
        except pydantic.ValidationError as e:
            stats = self.orchestrator.stats
            stats.record_request()
            stats.record_error()
            raise self._failure(_describe_validation_error(e), arguments, source_kind) from e

        try:
            result = await self.orchestrator.search(
                args.query,
                source_kind or args.search_type,
                args.max_results,
                args.handles,
                args.from_date,
                args.to_date,
                args.analysis_mode,
            )
        except GrokSearchError as e:
            raise self._failure(e.message, arguments, source_kind) from e

        return json.dumps(result.to_dict(), indent=2)

    def handle_health_check(self) -> str:
        health = HealthResponseDTO.from_diagnostics(
            self.orchestrator.check_health(), self.orchestrator.stats
        )
        return health.model_dump_json(indent=2, by_alias=True)

    @staticmethod
    def _failure(message: str, arguments: dict[str, Any], source_kind) -> ToolCallError:
        search_type = source_kind.value if source_kind else arguments.get("search_type") or "web"
        envelope = SearchErrorDTO(
            error=message,
            query=str(arguments.get("query") or "unknown"),
            search_type=str(search_type),
            analysis_mode=str(arguments.get("analysis_mode") or "basic"),
            from_date=arguments.get("from_date") or None,
            to_date=arguments.get("to_date") or None,
        )
        logger.warning(
            "Tool call failed",
            extra={"extra_fields": {"request_id": envelope.request_id, "error": message}},
        )
        return ToolCallError(envelope.model_dump_json(indent=2))


def create_server(app: GrokSearchServer) -> Server:
    """Register the tool catalogue and handlers on a low-level MCP server."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=definition["name"],
                description=definition["description"],
                inputSchema=definition["inputSchema"],
            )
            for definition in TOOL_DEFINITIONS
        ]

    # SearchToolArguments owns argument validation
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        text = await app.handle_call(name, arguments)
        return [types.TextContent(type="text", text=text)]

    return server


async def run_stdio(app: GrokSearchServer) -> None:
    server = create_server(app)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Grok Search MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())
