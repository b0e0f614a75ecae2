"""Failure taxonomy raised by the storage, record and lifecycle layers.

The HTTP layer translates these into status codes (see core/errors.py);
nothing below the routes knows about HTTP.
"""


class FileVaultError(Exception):
    """Base class for all domain failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInput(FileVaultError):
    """Malformed, unsafe or oversized input. Always fixable by the caller."""


class QuotaExceeded(InvalidInput):
    """Raised when a file is larger than the allowed maximum."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"File size exceeds maximum limit of {limit // (1024 * 1024)}MB",
        )


class NotFound(FileVaultError):
    """Entity is absent or not visible to the caller.

    Ownership mismatch and true absence raise the same error.
    """


class Unauthorized(FileVaultError):
    """Missing or invalid credentials."""


class Conflict(FileVaultError):
    """Duplicate username or email."""


class StorageError(FileVaultError):
    """Filesystem, object store or database failure not caused by input."""
