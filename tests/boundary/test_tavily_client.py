"""
Test suite for web search providers.

Tavily calls go through httpx.MockTransport; no network access.

System role: Verification of the external search boundary
"""

import json

import httpx
import pytest

from agribot.boundary.search.tavily_client import (
    MockSearchProvider,
    TavilySearchProvider,
    get_search_provider,
)
from agribot.configs.search import SearchSettings
from agribot.core.exceptions import SearchProviderError


@pytest.fixture
def settings() -> SearchSettings:
    return SearchSettings(api_key="tvly-test", include_domains=["fao.org"], max_attempts=1)


def client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestTavilySearchProvider:
    """Test suite for TavilySearchProvider.search()."""

    @pytest.mark.asyncio
    async def test_search_should_post_payload_and_parse_results(self, settings: SearchSettings) -> None:
        """Test request body and result mapping."""
        # Arrange
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "answer": "Wheat is around 4500 DZD/q",
                "results": [
                    {"title": "Wheat prices", "url": "https://fao.org/w", "content": "Prices", "score": 0.9},
                    {"title": None, "url": "https://fao.org/x", "content": None},
                ],
            })

        provider = TavilySearchProvider(settings, client=client_for(handler))

        # Act
        response = await provider.search("wheat price Algeria", max_results=2)

        # Assert
        assert captured["url"] == settings.base_url
        assert captured["body"]["api_key"] == "tvly-test"
        assert captured["body"]["max_results"] == 2
        assert captured["body"]["include_domains"] == ["fao.org"]
        assert captured["body"]["include_answer"] is True
        assert response.answer == "Wheat is around 4500 DZD/q"
        assert [r.url for r in response.results] == ["https://fao.org/w", "https://fao.org/x"]
        assert response.results[1].title == ""
        assert response.mock is False

    @pytest.mark.asyncio
    async def test_search_should_raise_on_error_status(self, settings: SearchSettings) -> None:
        """Test non-2xx responses become SearchProviderError."""
        provider = TavilySearchProvider(
            settings, client=client_for(lambda request: httpx.Response(500, json={}))
        )

        with pytest.raises(SearchProviderError, match="Tavily API error: 500"):
            await provider.search("q", max_results=5)

    @pytest.mark.asyncio
    async def test_search_should_raise_on_transport_error(self, settings: SearchSettings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        provider = TavilySearchProvider(settings, client=client_for(handler))

        with pytest.raises(SearchProviderError):
            await provider.search("q", max_results=5)

    @pytest.mark.asyncio
    async def test_search_should_raise_on_invalid_json(self, settings: SearchSettings) -> None:
        provider = TavilySearchProvider(
            settings, client=client_for(lambda request: httpx.Response(200, content=b"<html>"))
        )

        with pytest.raises(SearchProviderError):
            await provider.search("q", max_results=5)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [["unexpected"], {"results": ["not an object"]}, {"results": {"title": "x"}}, "text"],
    )
    async def test_search_should_raise_on_unexpected_body_shape(
        self, settings: SearchSettings, body
    ) -> None:
        """Well-formed JSON that is not a Tavily result object becomes SearchProviderError."""
        # Arrange
        provider = TavilySearchProvider(
            settings, client=client_for(lambda request: httpx.Response(200, json=body))
        )

        # Act & Assert
        with pytest.raises(SearchProviderError, match="Unexpected Tavily response shape"):
            await provider.search("q", max_results=5)


class TestMockSearchProvider:
    """Test suite for MockSearchProvider."""

    @pytest.mark.asyncio
    async def test_mock_should_return_flagged_results(self) -> None:
        response = await MockSearchProvider().search("prix tomate", max_results=2)

        assert response.mock is True
        assert len(response.results) == 2
        assert "prix tomate" in response.answer


class TestGetSearchProvider:
    """Test suite for get_search_provider()."""

    def test_should_select_tavily_with_key(self, settings: SearchSettings) -> None:
        assert isinstance(get_search_provider(settings), TavilySearchProvider)

    def test_should_select_mock_without_key(self) -> None:
        assert isinstance(get_search_provider(SearchSettings(api_key=None)), MockSearchProvider)


class TestTavilyRetry:
    """Test suite for transport error retries."""

    @pytest.mark.asyncio
    async def test_search_should_retry_transport_errors(self) -> None:
        """Test a dropped connection is retried once before succeeding."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json={"results": [{"title": "t", "url": "u", "content": "c"}]})

        settings = SearchSettings(api_key="tvly-test", max_attempts=2)
        provider = TavilySearchProvider(settings, client=client_for(handler))

        response = await provider.search("q", max_results=1)

        assert len(calls) == 2
        assert len(response.results) == 1

    @pytest.mark.asyncio
    async def test_search_should_not_retry_error_status(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429, json={})

        provider = TavilySearchProvider(
            SearchSettings(api_key="tvly-test", max_attempts=3), client=client_for(handler)
        )

        with pytest.raises(SearchProviderError):
            await provider.search("q", max_results=1)

        assert len(calls) == 1
