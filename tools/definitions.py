"""MCP tool catalogue: names, descriptions and JSON input schemas."""

from typing import Any

from models.search import MAX_RESULTS, MIN_RESULTS, SourceKind

SEARCH_TOOL = "grok_search"
WEB_SEARCH_TOOL = "grok_web_search"
NEWS_SEARCH_TOOL = "grok_news_search"
TWITTER_TOOL = "grok_twitter"
HEALTH_CHECK_TOOL = "health_check"

# Tools whose name fixes the source kind; grok_search takes it from search_type
TOOL_SOURCE_KINDS: dict[str, SourceKind | None] = {
    SEARCH_TOOL: None,
    WEB_SEARCH_TOOL: SourceKind.WEB,
    NEWS_SEARCH_TOOL: SourceKind.NEWS,
    TWITTER_TOOL: SourceKind.SOCIAL,
}

SEARCH_TOOLS = tuple(TOOL_SOURCE_KINDS)

_ANALYSIS_MODE_PROPERTY = {
    "type": "string",
    "enum": ["basic", "comprehensive"],
    "default": "basic",
    "description": (
        "Analysis mode: 'basic' returns simple search results, 'comprehensive' provides "
        "detailed analysis with timelines, quotes, multiple perspectives, and context"
    ),
}


def _date_property(description: str) -> dict[str, Any]:
    return {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}$", "description": description}


def _max_results_property(description: str) -> dict[str, Any]:
    return {
        "type": "number",
        "default": 10,
        "minimum": MIN_RESULTS,
        "maximum": MAX_RESULTS,
        "description": description,
    }


def _search_schema(query_description: str, max_results_description: str, **extra) -> dict[str, Any]:
    properties: dict[str, Any] = {"query": {"type": "string", "description": query_description}}
    properties.update(extra)
    properties["analysis_mode"] = _ANALYSIS_MODE_PROPERTY
    properties["max_results"] = _max_results_property(max_results_description)
    properties["from_date"] = _date_property(
        "Optional start date for search in ISO8601 format (YYYY-MM-DD). "
        "Limits search to content from this date onwards."
    )
    properties["to_date"] = _date_property(
        "Optional end date for search in ISO8601 format (YYYY-MM-DD). "
        "Limits search to content up to this date."
    )
    return {"type": "object", "properties": properties, "required": ["query"]}


TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": SEARCH_TOOL,
        "description": (
            "Search the web using Grok's AI-powered search capabilities. Supports both basic "
            "search results and comprehensive analysis with timelines, quotes, and multiple "
            "perspectives."
        ),
        "inputSchema": _search_schema(
            "The search query to execute",
            "Maximum number of search results to return",
            search_type={
                "type": "string",
                "enum": ["web", "news", "general"],
                "default": "web",
                "description": "Type of search to perform",
            },
        ),
    },
    {
        "name": WEB_SEARCH_TOOL,
        "description": (
            "Search general web content using Grok. Supports comprehensive analysis mode for "
            "detailed insights."
        ),
        "inputSchema": _search_schema(
            "The web search query", "Maximum number of results to return"
        ),
    },
    {
        "name": NEWS_SEARCH_TOOL,
        "description": (
            "Search for recent news using Grok. Comprehensive mode provides timeline analysis, "
            "direct quotes, and multiple perspectives on news events."
        ),
        "inputSchema": _search_schema(
            "The news search query", "Maximum number of news results to return"
        ),
    },
    {
        "name": TWITTER_TOOL,
        "description": (
            "Search Twitter/X posts using Grok's X search capabilities, optionally filtered by "
            "specific handles. Comprehensive mode analyzes social media trends and sentiment."
        ),
        "inputSchema": _search_schema(
            "The search query to find tweets/posts about",
            "Maximum number of tweet results to return",
            handles={
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Optional list of Twitter handles to search from (without @ symbol, "
                    "e.g., ['elonmusk', 'twitter'])"
                ),
            },
        ),
    },
    {
        "name": HEALTH_CHECK_TOOL,
        "description": (
            "Check the health status of the Grok Search MCP server and API connectivity"
        ),
        "inputSchema": {"type": "object", "properties": {}, "required": []},
    },
]
