"""Preferred-site query enhancement.

Queries mentioning a configured keyword are narrowed to matching sites by
appending a ``(site:a OR site:b)`` group.
"""

from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from websearch.logging import get_logger
from websearch.models import PreferredSite

logger = get_logger("websearch.preferred_sites")

MAX_PREFERRED_SITES = 4

_sites_adapter = TypeAdapter(list[PreferredSite])


class PreferredSitesManager:
    """Loads the keyword-to-site table and rewrites matching queries.

    The JSON file holds an array of ``{"url": ..., "keywords": [...]}``
    objects. A missing or invalid file disables enhancement.
    """

    def __init__(self, path: Path | None = None, sites: list[PreferredSite] | None = None):
        """Initialize the manager.

        Args:
            path: JSON file to load lazily on first use
            sites: Sites to use directly instead of loading a file
        """
        self.path = path
        self._sites: list[PreferredSite] | None = sites

    @property
    def sites(self) -> list[PreferredSite]:
        """Get the loaded sites, loading them on first access."""
        if self._sites is None:
            self._sites = self._load()
        return self._sites

    def _load(self) -> list[PreferredSite]:
        if self.path is None:
            return []
        if not self.path.exists():
            logger.debug(f"Preferred sites file not found: {self.path}")
            return []
        try:
            sites = _sites_adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(f"Failed to load preferred sites: {e}")
            return []
        logger.debug(f"Loaded {len(sites)} preferred sites")
        return sites

    def matching_sites(self, query: str) -> list[str]:
        """Get up to four sites whose keywords occur in the query."""
        query_lower = query.lower()
        matches = [
            site.url
            for site in self.sites
            if any(keyword.lower() in query_lower for keyword in site.keywords)
        ]
        return matches[:MAX_PREFERRED_SITES]

    def enhance_query(self, query: str) -> str:
        """Append a site group for matching preferred sites.

        Args:
            query: Original query

        Returns:
            str: Enhanced query, or the original if nothing matches
        """
        matches = self.matching_sites(query)
        if not matches:
            return query

        enhanced = f"{query} ({' OR '.join(f'site:{site}' for site in matches)})"
        logger.debug("Enhanced query", original=query, enhanced=enhanced)
        return enhanced
