"""
Web search boundary.

Exports:
  - SearchProvider: Provider protocol
  - TavilySearchProvider, MockSearchProvider: Implementations
  - get_search_provider(): Settings-driven selection

Dependencies: httpx
System role: External knowledge retrieval
"""

from agribot.boundary.search.tavily_client import (
    MockSearchProvider,
    SearchProvider,
    TavilySearchProvider,
    get_search_provider,
)

__all__ = [
    "SearchProvider",
    "TavilySearchProvider",
    "MockSearchProvider",
    "get_search_provider",
]
