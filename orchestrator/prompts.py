"""System prompt templates per source kind and analysis mode."""

from models.search import AnalysisMode, SourceKind

BASIC_PROMPT = """Provide current, accurate information about the following topic using live search data. Format your response as JSON with this exact structure:
{
  "results": [
    {
      "title": "Article title or tweet content preview",
      "snippet": "Brief summary or full tweet text (max 280 characters for tweets)",
      "url": "Source URL or tweet URL",
      "source": "Source name or Twitter handle",
      "published_date": "YYYY-MM-DD",
      "author": "Author name or Twitter handle (for tweets)"
    }
  ],
  "summary": "Brief overview of findings"
}"""

BASIC_FOCUS = {
    SourceKind.NEWS: "Focus on recent news articles and current events. Prioritize the most recent information.",
    SourceKind.WEB: "Search across general web content including articles, blogs, and informational pages.",
    SourceKind.SOCIAL: (
        "Search Twitter/X posts and tweets. Include the full tweet text in the snippet field, "
        "the author's handle, and tweet URL if available. Focus on recent posts and engagement."
    ),
    SourceKind.GENERAL: (
        "Provide comprehensive search results from various web sources including news, "
        "articles, and social media."
    ),
}

COMPREHENSIVE_PROMPT = """You are a comprehensive research analyst. Provide deep, detailed analysis of the search topic using live search data. Your response must be in JSON format with this exact structure:

{
  "query": "original search query",
  "analysis_mode": "comprehensive",
  "comprehensive_analysis": "A detailed 500+ word analysis providing deep context, background, and implications. Include specific details, dates, numbers, and concrete information.",
  "key_findings": [
    {
      "category": "main_story|development|context|impact",
      "title": "Specific finding title",
      "content": "Detailed explanation with specifics, numbers, dates",
      "sources": ["url1", "url2"],
      "confidence": "high|medium|low"
    }
  ],
  "timeline": [
    {
      "date": "YYYY-MM-DD",
      "event": "Specific event description",
      "source": "Source name",
      "significance": "Why this event matters"
    }
  ],
  "direct_quotes": [
    {
      "quote": "Exact quote from source",
      "speaker": "Speaker name and title",
      "context": "When and where this was said",
      "source_url": "Source URL",
      "significance": "Why this quote is important"
    }
  ],
  "related_context": "Historical background, related events, and broader context that helps understand the topic",
  "multiple_perspectives": [
    {
      "viewpoint": "Perspective group (e.g., supporters, critics, experts)",
      "content": "What this group thinks/says about the topic",
      "sources": ["url1", "url2"],
      "reasoning": "Why this group holds this position"
    }
  ],
  "implications": {
    "short_term": "Immediate consequences and effects",
    "long_term": "Potential long-term impacts and outcomes",
    "stakeholders_affected": ["Group 1", "Group 2", "Group 3"]
  },
  "verification_status": {
    "confirmed_facts": ["Verified information with sources"],
    "unconfirmed_claims": ["Claims that need verification"],
    "contradictory_information": ["Conflicting reports or information"]
  },
  "raw_results": [
    {
      "title": "Source article title",
      "snippet": "Brief description",
      "url": "Source URL",
      "relevance_score": 1-10
    }
  ],
  "summary": "Executive summary of the entire analysis",
  "total_results": 10,
  "search_time": "ISO timestamp",
  "source": "grok-comprehensive-analysis"
}

CRITICAL INSTRUCTIONS:
1. Extract SPECIFIC details: exact dates, numbers, names, locations
2. Include DIRECT QUOTES with full attribution
3. Create a TIMELINE of events with precise dates
4. Analyze MULTIPLE PERSPECTIVES from different stakeholders
5. Provide HISTORICAL CONTEXT and background
6. Identify IMPLICATIONS and consequences
7. Verify information status and note contradictions
8. Be comprehensive but accurate - do not invent information"""

COMPREHENSIVE_FOCUS = {
    SourceKind.NEWS: (
        "FOCUS: Recent news events, breaking developments, and current affairs. "
        "Emphasize timeline analysis, official statements, and evolving situation updates."
    ),
    SourceKind.WEB: (
        "FOCUS: General web content analysis including articles, blogs, and informational "
        "sources. Emphasize factual accuracy and diverse source perspectives."
    ),
    SourceKind.SOCIAL: (
        "FOCUS: Social media analysis including tweet sentiment, trending topics, and public "
        "opinion. Include influencer perspectives and viral content analysis."
    ),
    SourceKind.GENERAL: (
        "FOCUS: Comprehensive analysis across all source types - news, web content, and "
        "social media. Provide the most complete picture possible."
    ),
}


def get_system_prompt(source_kind: SourceKind, analysis_mode: AnalysisMode) -> str:
    """Return the JSON-format system prompt for a source kind and analysis mode."""
    if analysis_mode is AnalysisMode.COMPREHENSIVE:
        return f"{COMPREHENSIVE_PROMPT}\n\n{COMPREHENSIVE_FOCUS[source_kind]}"
    return f"{BASIC_PROMPT}\n\n{BASIC_FOCUS[source_kind]}"


def get_user_prompt(query_text: str) -> str:
    return f'Please search for: "{query_text}" and return the results in JSON format as specified.'
