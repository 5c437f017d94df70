"""
Sync Errors

Exception taxonomy shared by the stores, the facade and the HTTP layer.
Request-level errors carry the status code and message rendered to the
client; storage errors never leave the store boundary.
"""
from typing import Optional


class SyncError(Exception):
    """Base class for errors surfaced to the caller as {"error": message}."""
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ConfigurationError(SyncError):
    """The shared secret is not configured."""
    status_code = 500
    message = "API key not configured"


class AuthenticationError(SyncError):
    """Bearer token / key parameter missing or wrong."""
    status_code = 401
    message = "Unauthorized"


class ProjectNotFoundError(SyncError):
    """Unknown project on a read that requires it to exist."""
    status_code = 404
    message = "Project not found"

    def __init__(self, project: str):
        super().__init__()
        self.project = project


class RouteNotFoundError(SyncError):
    status_code = 404
    message = "Not found"


class InvalidPayloadError(SyncError):
    status_code = 400
    message = "Invalid JSON body"


class PayloadTooLargeError(SyncError):
    status_code = 413
    message = "Payload too large"


class StorageError(Exception):
    """Backing medium failure. Recovered by the stores, never rendered."""

    def __init__(self, collection: str, reason: str):
        super().__init__(f"{collection}: {reason}")
        self.collection = collection
        self.reason = reason


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass
