"""Data models for search requests, results and fetched pages."""

from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

DateFilter = Literal["d", "w", "m", "y"]

MAX_RESULTS_LIMIT = 50
MAX_RESULT_KEYWORDS = 5
MAX_PAGE_KEYWORDS = 8


class SearchQuery(BaseModel):
    """A validated search request."""

    query: str = Field(description="Search query text (possibly site-enhanced)")
    max_results: int | None = Field(
        default=None,
        ge=1,
        le=MAX_RESULTS_LIMIT,
        description="Maximum number of results to return",
    )
    date_filter: DateFilter | None = Field(
        default=None,
        description="Date filter: 'd' (day), 'w' (week), 'm' (month), 'y' (year)",
    )

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        """Strip the query and reject blank input."""
        v = v.strip()
        if not v:
            raise ValueError("Query parameter is required and cannot be empty")
        return v


class SearchResult(BaseModel):
    """A single web search result."""

    title: str = Field(min_length=1, description="Title of the search result")
    url: str = Field(min_length=1, description="URL of the result")
    keywords: list[str] = Field(
        default_factory=list,
        max_length=MAX_RESULT_KEYWORDS,
        description="Top keywords, most frequent first",
    )
    summary: str = Field(description="Short extractive summary of the result")

    @field_validator("url")
    @classmethod
    def url_is_http(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Not an absolute http(s) URL: {v}")
        return v

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"{self.title}\n{self.url}\n{self.summary[:100]}"


class SearchResponse(BaseModel):
    """Search results tagged with the provider that produced them."""

    query: str = Field(description="The original query, with the enhanced form if any")
    total_results: int = Field(ge=0, description="Number of results returned")
    search_provider: str = Field(description="Provider that actually served the results")
    results: list[SearchResult] = Field(default_factory=list)


class FetchMetadata(BaseModel):
    """Metadata about a fetched page."""

    domain: str = Field(description="Host of the fetched URL without 'www.'")
    content_type: str = Field(default="text/html", description="Response content type")
    content_length: int = Field(ge=0, description="Response body length in bytes")
    last_modified: str | None = Field(default=None, description="Last-Modified header, if sent")


class FetchResult(BaseModel):
    """Content extracted from a web page."""

    url: str = Field(description="URL of the fetched page")
    title: str = Field(description="Page title")
    content: str = Field(description="Extracted main content text")
    summary: str = Field(description="Generated summary")
    keywords: list[str] = Field(default_factory=list, max_length=MAX_PAGE_KEYWORDS)
    metadata: FetchMetadata


class PreferredSite(BaseModel):
    """A site preferred for queries mentioning any of its keywords."""

    url: str = Field(description="Site host (e.g., 'stackoverflow.com')")
    keywords: list[str] = Field(default_factory=list, description="Keywords triggering this site")
