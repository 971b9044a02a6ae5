"""Custom exceptions for the Notion journal content layer."""


class SourceUnavailable(Exception):
    """Raised when the Notion API cannot complete a call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(SourceUnavailable):
    """Raised when the Notion API returns a 429 rate limit response."""

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message, status_code=429)


class DocumentNotFound(Exception):
    """Raised by page loaders when no published document matches a slug."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"No published document for slug '{slug}'")
