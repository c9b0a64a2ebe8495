"""
Web search providers.

TavilySearchProvider posts to the Tavily search API over httpx.
MockSearchProvider returns deterministic agricultural results and is
selected when no API key is configured.

Dependencies: httpx, tenacity, agribot.configs, agribot.models.search
System role: External knowledge retrieval boundary
"""

import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from agribot.configs.search import SearchSettings
from agribot.core.exceptions import SearchProviderError
from agribot.models.search import SearchResponse, SearchResult

logger = logging.getLogger(__name__)


class TavilyHit(BaseModel):
    """One item of the Tavily "results" array."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    url: str | None = None
    content: str | None = None
    snippet: str | None = None
    score: float | None = None


class TavilyBody(BaseModel):
    """Subset of the Tavily response body the chatbot reads."""

    model_config = ConfigDict(extra="ignore")

    results: list[TavilyHit] | None = None
    answer: str | None = None


class SearchProvider(Protocol):
    """Anything that can answer a web search query."""

    async def search(self, query: str, max_results: int) -> SearchResponse:
        ...


class TavilySearchProvider:
    """
    Tavily search API client.

    Usage:
        provider = TavilySearchProvider(settings.search)
        response = await provider.search("wheat price Algeria", max_results=5)
    """

    def __init__(
        self,
        settings: SearchSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            settings: Search settings (API key, endpoint, domains)
            client: Optional preconfigured AsyncClient; one is created per call otherwise
        """
        self._settings = settings
        self._client = client

    def _payload(self, query: str, max_results: int) -> dict:
        return {
            "api_key": self._settings.api_key,
            "query": query,
            "search_depth": self._settings.search_depth,
            "topic": self._settings.topic,
            "max_results": max_results,
            "include_domains": self._settings.include_domains,
            "include_answer": True,
        }

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> dict:
        """POST with retry on transport errors; HTTP status errors are not retried."""
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential_jitter(initial=0.5, max=4, jitter=0.5),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:_post - Retry {retry_state.attempt_number}/"
                f"{self._settings.max_attempts} after transport error"
            ),
            reraise=True,
        ):
            with attempt:
                response = await client.post(
                    self._settings.base_url,
                    json=payload,
                    timeout=self._settings.timeout_seconds,
                )
                response.raise_for_status()
                return response.json()

    async def search(self, query: str, max_results: int) -> SearchResponse:
        """
        Run a search.

        Args:
            query: Search query
            max_results: Maximum number of results

        Returns:
            SearchResponse with results and the provider answer

        Raises:
            SearchProviderError: On transport errors, non-2xx status, bad JSON
                or a body that is not a Tavily result object
        """
        payload = self._payload(query, max_results)
        try:
            if self._client is not None:
                data = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    data = await self._post(client, payload)
        except httpx.HTTPStatusError as e:
            raise SearchProviderError(
                f"Tavily API error: {e.response.status_code}",
                service="tavily",
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise SearchProviderError(
                f"Tavily request failed: {type(e).__name__}: {e}",
                service="tavily",
            ) from e

        try:
            body = TavilyBody.model_validate(data)
        except ValidationError as e:
            raise SearchProviderError(
                f"Unexpected Tavily response shape: {e.error_count()} errors",
                service="tavily",
            ) from e

        results = [
            SearchResult(
                title=hit.title or "",
                url=hit.url or "",
                content=hit.content or "",
                snippet=hit.snippet,
                score=hit.score,
            )
            for hit in body.results or []
        ]
        logger.info(f"{__name__}:search - Tavily returned {len(results)} results")
        return SearchResponse(query=query, results=results, answer=body.answer)


class MockSearchProvider:
    """Deterministic provider for development without a Tavily key."""

    async def search(self, query: str, max_results: int) -> SearchResponse:
        results = [
            SearchResult(
                title=f"Agricultural Information: {query}",
                url="https://example.com/agriculture",
                content=(
                    f"This is a mock search result for: {query}. In production, "
                    "this would contain real web search results."
                ),
                snippet="Mock agricultural data for development purposes.",
                score=0.95,
            ),
            SearchResult(
                title="Algeria Ministry of Agriculture",
                url="https://agriculture.dz",
                content="Official agricultural guidance and resources for Algerian farmers.",
                snippet="Government agricultural resources and best practices.",
                score=0.88,
            ),
            SearchResult(
                title="FAO - Algeria Country Profile",
                url="https://fao.org/algeria",
                content="Food and Agriculture Organization resources for Algeria.",
                snippet="International agricultural standards and recommendations.",
                score=0.82,
            ),
        ]
        return SearchResponse(
            query=query,
            results=results[:max_results],
            answer=f'Based on available information about "{query}", here are relevant agricultural insights.',
            mock=True,
        )


def get_search_provider(settings: SearchSettings) -> SearchProvider:
    """
    Select the search provider for the configured credentials.

    Args:
        settings: Search settings

    Returns:
        TavilySearchProvider when an API key is set, MockSearchProvider otherwise
    """
    if settings.api_key:
        return TavilySearchProvider(settings)
    logger.warning(f"{__name__}:get_search_provider - TAVILY_API_KEY not set, using mock results")
    return MockSearchProvider()
