import json
from datetime import date

import pytest

from models.search import (
    AnalysisMode,
    BasicResult,
    ComprehensiveResult,
    RawProviderResponse,
    SearchQuery,
)
from orchestrator.response_extractor import (
    ParsedPayload,
    ResponseExtractor,
    Unparsed,
    check_shape,
    extract_after_marker,
    extract_brace_span,
    extract_fenced_block,
    extract_stripped,
    parse_payload,
)

BASIC_PAYLOAD = {
    "results": [
        {"title": "One", "snippet": "first", "url": "https://b.com/1", "source": "B"},
        {"title": "Two", "snippet": "second"},
        {"title": "Three", "snippet": "third", "author": "@someone", "likes": 12},
    ],
    "summary": "Three hits",
}


def _basic(max_results: int = 10) -> SearchQuery:
    return SearchQuery(text="rust async", max_results=max_results)


def _comprehensive() -> SearchQuery:
    return SearchQuery(text="rust async", analysis_mode=AnalysisMode.COMPREHENSIVE)


def _extract(content: str, query: SearchQuery, citations: list[str] | None = None):
    return ResponseExtractor().extract(RawProviderResponse(content, citations or []), query)


def test_brace_span_strategy_finds_embedded_object():
    assert extract_brace_span('Here you go: {"a": 1} hope it helps') == {"a": 1}


def test_fenced_block_strategy():
    text = 'Intro {not json}\n```json\n{"a": 2}\n```\nmore {braces'
    assert extract_brace_span(text) is None
    assert extract_fenced_block(text) == {"a": 2}


def test_marker_strategy():
    assert extract_after_marker('response: {"a": 3}') == {"a": 3}
    assert extract_after_marker('{"a": 3}') is None


def test_stripped_strategy():
    assert extract_stripped('noise {"a": 4} trailing') == {"a": 4}
    assert extract_stripped("no braces at all") is None


def test_strategies_only_accept_objects():
    assert parse_payload("[1, 2, 3]") == Unparsed(reason="no_json_object")


def test_parse_payload_reports_first_successful_strategy():
    text = 'Intro {broken\n```json\n{"results": []}\n```'
    outcome = parse_payload(text)
    assert outcome == ParsedPayload(data={"results": []}, strategy="extract_fenced_block")


def test_check_shape_requires_mode_markers():
    parsed = ParsedPayload(data={"results": []}, strategy="extract_brace_span")
    assert check_shape(parsed, AnalysisMode.BASIC) is parsed
    assert check_shape(parsed, AnalysisMode.COMPREHENSIVE) == Unparsed(
        reason="missing_comprehensive_markers"
    )

    comprehensive = ParsedPayload(data={"analysis_mode": "comprehensive"}, strategy="x")
    assert check_shape(comprehensive, AnalysisMode.BASIC) == Unparsed(reason="missing_results_list")


def test_basic_result_with_citation_mapping():
    citations = ["https://a.com/0", "https://b.com/1"]
    result = _extract(json.dumps(BASIC_PAYLOAD), _basic(), citations)

    assert isinstance(result, BasicResult)
    assert result.total_results == 3
    assert result.summary == "Three hits"

    first, second, third = result.results
    # own URL matching a citation
    assert first.url == "https://b.com/1"
    assert first.citation_index == 1
    assert first.citation_metadata.domain == "b.com"
    assert first.source == "B"

    # no URL: positional citation
    assert second.url == "https://b.com/1"
    assert second.citation_index == 1
    assert second.citation_url == "https://b.com/1"

    # position beyond citation list: first citation as URL, index capped
    assert third.url == "https://a.com/0"
    assert third.citation_index == 1
    assert third.author == "@someone"
    assert third.extra == {"likes": 12}
    assert third.source == "web-search"
    assert third.published_date == date.today().isoformat()


def test_own_url_not_in_citations_has_no_citation_fields():
    payload = {"results": [{"title": "t", "snippet": "s", "url": "https://other.com"}]}
    (item,) = _extract(json.dumps(payload), _basic(), ["https://a.com"]).results

    assert item.url == "https://other.com"
    assert item.citation_url is None
    assert item.citation_index is None
    assert item.citation_metadata is None
    assert "citation_index" not in item.to_dict()


def test_basic_without_citations_keeps_provider_urls():
    (item, *_rest) = _extract(json.dumps(BASIC_PAYLOAD), _basic()).results
    assert item.url == "https://b.com/1"
    assert item.has_citation is False


def test_basic_results_are_capped_and_snippets_truncated():
    payload = {"results": [{"title": str(i), "snippet": "x" * 800} for i in range(5)]}
    result = _extract(json.dumps(payload), _basic(max_results=2))
    assert [item.title for item in result.results] == ["0", "1"]
    assert all(len(item.snippet) == 500 for item in result.results)


def test_fallback_for_unparseable_text():
    text = "Grok says: " + "lorem ipsum " * 100
    result = _extract(text, _basic(), ["https://a.com/x"])

    assert isinstance(result, BasicResult)
    assert len(result.results) == 1
    (item,) = result.results
    assert text.startswith(item.snippet)
    assert len(item.snippet) == 500
    assert item.url == "https://a.com/x"
    assert item.citation_index == 0
    assert item.title == "Search results for: rust async"
    assert result.summary


def test_fallback_without_citations_has_no_citation_fields():
    (item,) = _extract("plain words", _basic()).results
    assert item.snippet == "plain words"
    assert item.url is None
    assert item.has_citation is False


@pytest.mark.parametrize("content", ["", "{", '{"summary": "no results list"}'])
def test_fallback_never_raises(content):
    result = _extract(content, _basic())
    assert len(result.results) == 1


def test_comprehensive_fields_default_to_empty():
    payload = {
        "analysis_mode": "comprehensive",
        "comprehensive_analysis": "Deep dive",
        "timeline": [{"date": "2024-01-01", "event": "launch"}],
        "results": [{"title": "r"}],
        "summary": "Exec summary",
    }
    result = _extract(json.dumps(payload), _comprehensive(), ["https://a.com"])

    assert isinstance(result, ComprehensiveResult)
    assert result.is_fallback is False
    assert result.comprehensive_analysis == "Deep dive"
    assert result.timeline == [{"date": "2024-01-01", "event": "launch"}]
    assert result.key_findings == []
    assert result.direct_quotes == []
    assert result.multiple_perspectives == []
    assert result.implications == {}
    assert result.verification_status == {}
    assert result.related_context == ""
    assert result.raw_results == [{"title": "r"}]
    assert result.total_results == 1
    assert result.source == "grok-comprehensive-analysis"
    assert result.to_dict()["citation_metadata"][0]["domain"] == "a.com"


def test_comprehensive_without_markers_falls_back():
    long_text = '{"results": [{"title": "basic shape"}]} ' + "detail " * 30
    result = _extract(long_text, _comprehensive())

    assert isinstance(result, ComprehensiveResult)
    assert result.is_fallback is True
    assert result.source == "grok-comprehensive-analysis-fallback"
    assert result.key_findings == []
    assert result.comprehensive_analysis == long_text
    assert result.verification_status == {
        "confirmed_facts": [],
        "unconfirmed_claims": [],
        "contradictory_information": [],
    }
    assert len(result.raw_results) == 1
    assert result.total_results == 1


def test_short_comprehensive_fallback_explains_itself():
    result = _extract("too short", _comprehensive())
    assert result.comprehensive_analysis == "Unable to extract comprehensive analysis from response"
    assert result.to_dict()["raw_results"][0]["snippet"] == "too short"
