"""Custom exceptions for commonsmeta."""


class CommonsMetadataError(Exception):
    """Base exception for all commonsmeta errors."""

    pass


class ConfigurationError(CommonsMetadataError):
    """Invalid configuration supplied to a component."""

    pass


class ContentProviderError(CommonsMetadataError):
    """Content provider could not deliver data for a file."""

    pass


class CategoriesUnavailableError(ContentProviderError):
    """Categories cannot be read for this file's storage backend."""

    def __init__(self, file_name: str, reason: str | None = None):
        """Initialize exception with file name and reason.

        Args:
            file_name: Name of the file whose categories were requested.
            reason: Optional explanation from the provider.
        """
        self.file_name = file_name
        self.reason = reason
        message = f"Cannot read category data for {file_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
