"""Search providers for websearch."""

import httpx

from websearch.politeness import PolitenessScheduler
from websearch.providers.base import SearchProvider
from websearch.providers.brave import BraveProvider
from websearch.providers.duckduckgo import DuckDuckGoProvider

PROVIDERS: dict[str, type[SearchProvider]] = {
    "duckduckgo": DuckDuckGoProvider,
    "brave": BraveProvider,
}


def create_provider(
    name: str,
    scheduler: PolitenessScheduler,
    timeout: float = 15.0,
    snippet_max_length: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SearchProvider:
    """Create a provider by its configuration name.

    Args:
        name: 'duckduckgo' or 'brave'
        scheduler: Politeness scheduler shared by the providers
        timeout: Request timeout in seconds
        snippet_max_length: Optional cap on snippet length
        transport: Optional httpx transport

    Returns:
        SearchProvider: The provider instance

    Raises:
        ValueError: If the name is unknown
    """
    try:
        provider_class = PROVIDERS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown search provider '{name}'. Choose from: {', '.join(PROVIDERS)}"
        ) from None
    return provider_class(
        scheduler,
        timeout=timeout,
        snippet_max_length=snippet_max_length,
        transport=transport,
    )


__all__ = [
    "SearchProvider",
    "DuckDuckGoProvider",
    "BraveProvider",
    "PROVIDERS",
    "create_provider",
]
