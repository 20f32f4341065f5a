"""The two tools websearch exposes: ``web_search`` and ``fetch_webpage``."""

from pydantic import BaseModel, Field

from websearch.models import MAX_RESULTS_LIMIT, DateFilter
from websearch.service import WebSearchService, get_service
from websearch.tools.base import BaseTool, ToolResult, TParams


class _ServiceTool(BaseTool[TParams]):
    """Tool backed by a WebSearchService.

    Without an explicit service the process-wide one is used, resolved on
    first execution so that building a tool never reads configuration.
    """

    def __init__(self, service: WebSearchService | None = None):
        super().__init__()
        self._service = service

    @property
    def service(self) -> WebSearchService:
        if self._service is None:
            self._service = get_service()
        return self._service


class WebSearchParams(BaseModel):
    query: str = Field(description="Search query string")
    max_results: int | None = Field(
        default=None,
        ge=1,
        le=MAX_RESULTS_LIMIT,
        description="Maximum number of results to return",
    )
    date_filter: DateFilter | None = Field(
        default=None,
        description="Only results from the past day ('d'), week ('w'), month ('m') or year ('y')",
    )


class WebSearchTool(_ServiceTool[WebSearchParams]):
    name = "web_search"
    description = (
        "Search the web without an API key. DuckDuckGo is tried first and Brave "
        "takes over while DuckDuckGo is rate limiting. Each result carries a "
        "title, URL, keywords and a short summary."
    )
    parameters_schema = WebSearchParams

    async def execute(self, params: WebSearchParams) -> ToolResult:
        response = await self.service.search(
            query=params.query,
            max_results=params.max_results,
            date_filter=params.date_filter,
        )
        data = response.model_dump()
        if not response.results:
            data["message"] = f"No results found for: {params.query}"
        return ToolResult.success_result(data=data, provider=response.search_provider)


class FetchWebPageParams(BaseModel):
    url: str = Field(description="Absolute http(s) URL of the page")


class FetchWebPageTool(_ServiceTool[FetchWebPageParams]):
    """Download one page and reduce it to readable text.

    Navigation, ads and other page furniture are stripped before the text,
    summary and keywords are computed.
    """

    name = "fetch_webpage"
    description = (
        "Read a web page: returns its title, main text, a summary, keywords "
        "and response metadata. Suited to articles and documentation."
    )
    parameters_schema = FetchWebPageParams

    async def execute(self, params: FetchWebPageParams) -> ToolResult:
        page = await self.service.fetch(params.url)
        return ToolResult.success_result(data=page.model_dump())
