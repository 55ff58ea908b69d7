"""Exceptions raised by the nexushub persistence layer."""

from nexushub.models.constants import STORAGE_FULL_MESSAGE


class NexusError(Exception):
    """Base class for nexushub errors."""


class QuotaExceededError(NexusError):
    """A backing key-value store rejected a write because it is out of space.

    Low-level signal. The storage adapter translates it into StorageFullError.
    """


class StorageFullError(NexusError):
    """A write was rejected for lack of space. The message is user-facing."""

    def __init__(self, message: str = STORAGE_FULL_MESSAGE):
        super().__init__(message)
        self.message = message


class DuplicateUserError(NexusError):
    """Registration attempted with an email that already exists."""

    def __init__(self, email: str):
        super().__init__("User already exists")
        self.email = email


class InvalidCredentialsError(NexusError):
    """Login failed. Deliberately carries no credential values."""

    def __init__(self):
        super().__init__("Invalid credentials")


class RemoteApiError(NexusError):
    """The remote REST backend answered with a non-success status."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
