#!/usr/bin/env python3
"""Grok Search MCP server entry point."""

import argparse
import asyncio

from dotenv import load_dotenv

load_dotenv()

from config.config import Config  # noqa: E402
from server.mcp_server import SERVER_NAME, SERVER_VERSION, GrokSearchServer, run_stdio  # noqa: E402
from tools.definitions import TOOL_DEFINITIONS  # noqa: E402
from utils.logger import get_logger  # noqa: E402

logger = get_logger(__name__)

DESCRIPTION = """\
MCP server providing comprehensive web search capabilities using xAI's Grok API.
Supports basic search results and comprehensive analysis with timelines, quotes,
and multiple perspectives."""

ENVIRONMENT_HELP = """\
environment variables:
  XAI_API_KEY             Required: your xAI API key from https://console.x.ai/
  GROK_TIMEOUT            Optional: request timeout in ms (default: 30000)
  GROK_MAX_RETRIES        Optional: max retry attempts (default: 3)
  GROK_MODEL              Optional: model name (default: grok-3-latest)
  GROK_CACHE_MAX_SIZE     Optional: cached comprehensive analyses (default: 100)
  GROK_CACHE_TTL_MINUTES  Optional: cache time to live (default: 30)
  LOG_LEVEL               Optional: DEBUG, INFO, WARNING or ERROR (default: INFO)"""


def build_parser() -> argparse.ArgumentParser:
    tools = "\n".join(
        f"  {definition['name']:<22}{definition['description'].split('.')[0]}"
        for definition in TOOL_DEFINITIONS
    )
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description=DESCRIPTION,
        epilog=f"{ENVIRONMENT_HELP}\n\ntools provided:\n{tools}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"Grok Search MCP Server v{SERVER_VERSION}"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    build_parser().parse_args(argv)

    config = Config()
    if not config.validate():
        logger.warning("Starting without XAI_API_KEY; search tools will report the API as unhealthy")

    logger.info(
        "Starting Grok Search MCP server",
        extra={"extra_fields": {"version": SERVER_VERSION, "model": config.get_model_info()}},
    )
    try:
        asyncio.run(run_stdio(GrokSearchServer(config=config)))
    except KeyboardInterrupt:
        logger.info("Grok Search MCP server stopped")


if __name__ == "__main__":
    main()
