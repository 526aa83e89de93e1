"""Live search checks against the xAI API. Skipped without XAI_API_KEY."""

import asyncio

import pytest

from api.grok_client import GrokSearchClient
from models.search import BasicResult
from orchestrator.search_orchestrator import SearchOrchestrator

pytestmark = pytest.mark.integration


def test_live_basic_search(api_key):
    orchestrator = SearchOrchestrator(client=GrokSearchClient(api_key=api_key))

    result = asyncio.run(orchestrator.search("latest python release", max_results=3))

    print(f"Results: {result.total_results}, citations: {len(result.citations)}")
    assert isinstance(result, BasicResult)
    assert 1 <= result.total_results <= 3
    assert orchestrator.stats.error_count == 0


def test_live_health(api_key):
    orchestrator = SearchOrchestrator(client=GrokSearchClient(api_key=api_key))
    health = orchestrator.check_health()
    assert health["healthy"] is True
    assert health["has_api_key"] is True
