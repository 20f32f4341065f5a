"""Process-wide wiring of the search and fetch components.

One service owns the shared state: a politeness scheduler, the primary
provider's health state and a concurrency cap. Tools and the CLI go through
it rather than building components per request.
"""

import asyncio

import httpx

from websearch.config import Settings, get_settings
from websearch.fetcher import ContentFetcher
from websearch.health import ProviderHealthState
from websearch.logging import get_logger
from websearch.models import FetchResult, SearchResponse
from websearch.orchestrator import SearchOrchestrator
from websearch.politeness import PolitenessScheduler
from websearch.preferred_sites import PreferredSitesManager
from websearch.providers import create_provider

logger = get_logger("websearch.service")


class WebSearchService:
    """Search and fetch entry points sharing one set of process-wide state."""

    def __init__(
        self,
        settings: Settings | None = None,
        scheduler: PolitenessScheduler | None = None,
        health: ProviderHealthState | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Build all components from settings.

        Args:
            settings: Configuration (defaults to the global settings)
            scheduler: Scheduler to use instead of one built from settings
            health: Health state to use instead of a fresh one
            transport: Optional httpx transport for every outbound call
        """
        self.settings = settings or get_settings()
        s = self.settings

        self.scheduler = scheduler or PolitenessScheduler(
            max_requests=s.rate_limit,
            window_seconds=s.rate_limit_window_seconds,
            min_delay_seconds=s.min_request_delay_ms / 1000,
            max_jitter_seconds=s.max_jitter_ms / 1000,
        )
        self.health = health or ProviderHealthState(
            base_duration_seconds=s.suspension_duration_minutes * 60,
            max_multiplier=s.max_suspension_multiplier,
        )
        self.sites = PreferredSitesManager(s.preferred_sites_file)

        provider_options = {
            "timeout": s.search_timeout_seconds,
            "snippet_max_length": s.search_result_max_length,
            "transport": transport,
        }
        self.orchestrator = SearchOrchestrator(
            primary=create_provider(s.provider, self.scheduler, **provider_options),
            secondary=create_provider(s.secondary_provider, self.scheduler, **provider_options),
            health=self.health,
            enhancer=self.sites.enhance_query,
            default_max_results=s.search_results_count,
        )
        self.fetcher = ContentFetcher(
            max_length=s.fetch_result_max_length,
            timeout=s.fetch_timeout_seconds,
            transport=transport,
        )
        self._semaphore = asyncio.Semaphore(s.max_concurrent_requests)

        logger.debug(
            "Search service ready",
            primary=self.orchestrator.primary.name,
            secondary=self.orchestrator.secondary.name,
        )

    async def search(
        self,
        query: str,
        max_results: int | None = None,
        date_filter: str | None = None,
    ) -> SearchResponse:
        """Search the web with primary/secondary fallback."""
        async with self._semaphore:
            return await self.orchestrator.search(query, max_results, date_filter)

    async def fetch(self, url: str) -> FetchResult:
        """Fetch and extract a single page."""
        async with self._semaphore:
            return await self.fetcher.fetch(url)


# Global service instance
_service: WebSearchService | None = None


def get_service() -> WebSearchService:
    """Get the global service instance, creating it on first call."""
    global _service
    if _service is None:
        _service = WebSearchService()
    return _service


def reset_service() -> None:
    """Drop the global service so the next call rebuilds it."""
    global _service
    _service = None
