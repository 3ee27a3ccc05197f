"""Custom exception types for ghprod."""


class GhProdError(Exception):
    """Base exception for all recoverable ghprod errors."""


class ConfigurationError(GhProdError):
    """Raised when runtime configuration values are missing or invalid."""


class ApiError(GhProdError):
    """Raised when a GitHub API request fails or returns an unexpected response."""


class RetrievalError(GhProdError):
    """Raised when the full pull request history could not be retrieved.

    The underlying client failure is always attached as ``__cause__``.
    """
