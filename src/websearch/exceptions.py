"""Custom exceptions for search and fetch operations."""


class WebSearchError(Exception):
    """Base exception for websearch errors."""

    pass


class RequestValidationError(WebSearchError):
    """Exception raised when a request is rejected before any network call."""

    pass


class UpstreamError(WebSearchError):
    """Exception raised when an upstream request fails.

    Covers non-2xx responses, empty bodies, network failures and timeouts.
    """

    def __init__(self, message: str, source: str, status_code: int | None = None):
        """Initialize with the failing source.

        Args:
            message: Human-readable description of the failure
            source: Provider name or URL that failed
            status_code: HTTP status code, if a response was received
        """
        self.source = source
        self.status_code = status_code
        super().__init__(message)


class ProviderError(UpstreamError):
    """Exception raised when a search provider fails."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        """Initialize with provider name.

        Args:
            provider: Name of the provider that failed
            message: Description reported by the upstream or client
            status_code: HTTP status code, if a response was received
        """
        self.provider = provider
        super().__init__(f"{provider} search failed: {message}", source=provider, status_code=status_code)


class ParseError(WebSearchError):
    """Exception raised when HTML cannot be turned into structured data."""

    pass


class AllProvidersFailedError(WebSearchError):
    """Exception raised when no provider could serve a search."""

    def __init__(self, errors: list[Exception]):
        """Initialize with the underlying errors.

        Args:
            errors: Errors from each attempted provider, in attempt order
        """
        self.errors = errors
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"Search failed on all providers: {details}")
