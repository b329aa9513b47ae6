"""Search-layer exceptions."""


class SearchError(Exception):
    """Base exception for search backend errors."""


class IndexConnectionError(SearchError):
    """Raised when the Solr index cannot be reached."""


class QueryError(SearchError):
    """Raised when a request to the index fails or returns an error status."""


class RecordNotFoundError(SearchError):
    """Raised when a requested record does not exist in the core."""


class ConfigurationError(SearchError):
    """Raised when backend configuration is unusable."""
