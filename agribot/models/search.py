"""
Web search models.

Dependencies: pydantic
System role: Search provider and cache payload contracts
"""

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """Single web search hit."""

    title: str = ""
    url: str = ""
    content: str = ""
    snippet: str | None = None
    score: float | None = Field(default=None, description="Provider relevance score")


class SearchResponse(BaseModel):
    """Search outcome as seen by the orchestrator."""

    query: str
    results: list[SearchResult] = Field(default_factory=list)
    answer: str | None = Field(default=None, description="Provider-synthesized answer")
    cached: bool = False
    mock: bool = False
    error: str | None = None
