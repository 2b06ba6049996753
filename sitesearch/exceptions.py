"""Exception classes for sitesearch."""


class SiteSearchError(Exception):
    """Base exception for all sitesearch errors."""

    pass


class SearchError(SiteSearchError):
    """Base exception for search-related errors."""

    pass


class InvalidDocumentError(SearchError, TypeError):
    """Raised when a document cannot be indexed."""

    def __init__(self, doc_id, message: str):
        """Initialize with document ID and message."""
        self.doc_id = doc_id
        super().__init__(f"Cannot index document {doc_id!r}: {message}")


class CommandNotFoundError(SearchError, KeyError):
    """Raised when a palette command is not registered."""

    def __init__(self, command_id: str):
        """Initialize with command ID."""
        self.command_id = command_id
        super().__init__(f"Command not found: {command_id}")

    def __str__(self) -> str:
        return self.args[0]


class ManifestError(SiteSearchError):
    """Raised when a search manifest cannot be read or decoded."""

    def __init__(self, message: str, path: str | None = None):
        """Initialize with message and optional manifest path."""
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ConfigError(SiteSearchError, ValueError):
    """Raised when configuration is invalid."""

    pass
