"""Tests for primary/secondary search orchestration."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from websearch.exceptions import (
    AllProvidersFailedError,
    ProviderError,
    RequestValidationError,
)
from websearch.health import ProviderHealthState
from websearch.models import SearchResult
from websearch.orchestrator import SearchOrchestrator, validate_query


def _result(n: int) -> SearchResult:
    return SearchResult(
        title=f"Result {n}",
        url=f"https://example.com/{n}",
        keywords=["result"],
        summary=f"Summary {n}.",
    )


def _provider(name: str, results=None, error: Exception | None = None) -> MagicMock:
    provider = MagicMock()
    provider.name = name
    if error is not None:
        provider.search = AsyncMock(side_effect=error)
    else:
        provider.search = AsyncMock(return_value=results or [])
    return provider


@pytest.fixture
def health(fake_clock):
    return ProviderHealthState(base_duration_seconds=1200, clock=fake_clock)


class TestSearchOrchestrator:
    """Test provider routing."""

    @pytest.mark.asyncio
    async def test_primary_success(self, health):
        primary = _provider("DuckDuckGo", [_result(1), _result(2)])
        secondary = _provider("Brave")
        orchestrator = SearchOrchestrator(primary, secondary, health)

        response = await orchestrator.search("rust ownership", max_results=5)

        assert response.search_provider == "DuckDuckGo"
        assert response.total_results == 2
        assert response.query == "rust ownership"
        primary.search.assert_awaited_once_with("rust ownership", 5, None)
        secondary.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_default_max_results(self, health):
        primary = _provider("DuckDuckGo", [_result(1)])
        orchestrator = SearchOrchestrator(primary, _provider("Brave"), health, default_max_results=7)

        await orchestrator.search("query", date_filter="w")

        primary.search.assert_awaited_once_with("query", 7, "w")

    @pytest.mark.asyncio
    async def test_primary_failure_falls_back_and_suspends(self, health):
        primary = _provider("DuckDuckGo", error=ProviderError("DuckDuckGo", "HTTP 503", 503))
        secondary = _provider("Brave", [_result(1)])
        orchestrator = SearchOrchestrator(primary, secondary, health)

        response = await orchestrator.search("rust ownership")

        assert response.search_provider == "Brave"
        assert response.total_results == 1
        assert health.is_suspended() is True
        assert health.consecutive_suspensions == 1
        secondary.search.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_suspended_primary_is_skipped(self, health):
        health.record_failure()
        primary = _provider("DuckDuckGo", [_result(1)])
        secondary = _provider("Brave", [_result(2)])
        orchestrator = SearchOrchestrator(primary, secondary, health)

        response = await orchestrator.search("rust ownership")

        assert response.search_provider == "Brave (DuckDuckGo suspended)"
        primary.search.assert_not_called()
        assert health.consecutive_suspensions == 1

    @pytest.mark.asyncio
    async def test_primary_used_again_after_suspension_expires(self, health, fake_clock):
        health.record_failure()
        fake_clock.advance(1200)
        primary = _provider("DuckDuckGo", [_result(1)])
        orchestrator = SearchOrchestrator(primary, _provider("Brave"), health)

        response = await orchestrator.search("rust ownership")

        assert response.search_provider == "DuckDuckGo"
        assert health.consecutive_suspensions == 0

    @pytest.mark.asyncio
    async def test_empty_results_do_not_suspend(self, health):
        primary = _provider("DuckDuckGo", [])
        secondary = _provider("Brave", [_result(1)])
        orchestrator = SearchOrchestrator(primary, secondary, health)

        response = await orchestrator.search("zzqxv nonexistent")

        assert response.search_provider == "DuckDuckGo"
        assert response.total_results == 0
        assert response.results == []
        assert health.is_suspended() is False
        secondary.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_both_providers_fail(self, health):
        primary = _provider("DuckDuckGo", error=ProviderError("DuckDuckGo", "HTTP 503", 503))
        secondary = _provider("Brave", error=ProviderError("Brave", "Request timed out after 15s"))
        orchestrator = SearchOrchestrator(primary, secondary, health)

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await orchestrator.search("rust ownership")

        assert len(exc_info.value.errors) == 2
        assert "DuckDuckGo search failed" in str(exc_info.value)
        assert "Brave search failed" in str(exc_info.value)
        assert health.is_suspended() is True

    @pytest.mark.asyncio
    async def test_secondary_fails_while_suspended(self, health):
        health.record_failure()
        secondary = _provider("Brave", error=ProviderError("Brave", "HTTP 429", 429))
        orchestrator = SearchOrchestrator(_provider("DuckDuckGo"), secondary, health)

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await orchestrator.search("rust ownership")

        assert len(exc_info.value.errors) == 1

    @pytest.mark.asyncio
    async def test_enhanced_query(self, health):
        primary = _provider("DuckDuckGo", [_result(1)])
        orchestrator = SearchOrchestrator(
            primary,
            _provider("Brave"),
            health,
            enhancer=lambda q: f"{q} (site:docs.rs)",
        )

        response = await orchestrator.search("rust serde")

        assert response.query == "rust serde (enhanced: rust serde (site:docs.rs))"
        primary.search.assert_awaited_once_with("rust serde (site:docs.rs)", 10, None)

    @pytest.mark.asyncio
    async def test_invalid_request_makes_no_calls(self, health):
        primary = _provider("DuckDuckGo")
        orchestrator = SearchOrchestrator(primary, _provider("Brave"), health)

        with pytest.raises(RequestValidationError):
            await orchestrator.search("   ")
        with pytest.raises(RequestValidationError):
            await orchestrator.search("query", max_results=51)
        with pytest.raises(RequestValidationError):
            await orchestrator.search("query", date_filter="x")

        primary.search.assert_not_called()


class TestValidateQuery:
    """Test request validation."""

    def test_strips_query(self):
        assert validate_query("  rust  ").query == "rust"

    def test_empty_query_message(self):
        with pytest.raises(RequestValidationError, match="cannot be empty"):
            validate_query("")
