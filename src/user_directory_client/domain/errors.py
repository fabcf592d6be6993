"""Error taxonomy surfaced by the session and mutation boundaries."""

from __future__ import annotations

from collections.abc import Sequence


class DirectoryClientError(Exception):
    """Base class for client errors that carry an operator-facing message."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class AuthError(DirectoryClientError):
    """Raised when login is rejected or its transport fails; session stays unchanged."""

    default_message = "Login failed. Please check your credentials."


class FetchError(DirectoryClientError):
    """Raised when the directory list cannot be loaded; the cache is emptied."""

    default_message = "Failed to load users."


class ValidationError(DirectoryClientError, ValueError):
    """Raised for incomplete drafts before any network call."""

    default_message = "Please fill out all required fields."

    def __init__(self, *, fields: Sequence[str], message: str | None = None) -> None:
        super().__init__(message)
        self.fields = tuple(fields)


class MissingIdError(DirectoryClientError, LookupError):
    """Raised when an update targets a record without a server-assigned id."""

    default_message = "Cannot update user without ID"


class WriteError(DirectoryClientError):
    """Raised when create/update is rejected by the service or its transport fails."""

    default_message = "Failed to save user. Please try again."
