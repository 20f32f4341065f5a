"""websearch - web search aggregation over scrape-based upstreams.

Searches DuckDuckGo with Brave as fallback, paces outbound requests politely
and extracts titles, keywords and summaries from raw HTML.
"""

__version__ = "0.1.0"

from websearch.config import Settings, get_settings, reload_settings

__all__ = ["Settings", "get_settings", "reload_settings", "__version__"]
