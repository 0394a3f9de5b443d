class UniStayError(Exception):
    """Base class for errors raised by the UniStay services."""


class StorageValidationError(UniStayError, ValueError):
    """Upload or delete request rejected locally, before any network call."""


class StorageBackendError(UniStayError):
    """Object storage rejected the request or returned an unusable result."""


class DatabaseInitError(UniStayError):
    """The embedded database could not be opened or seeded."""
