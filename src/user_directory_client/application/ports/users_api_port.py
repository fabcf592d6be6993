"""Port for the remote user-directory service consumed by the client services."""

from __future__ import annotations

from typing import Protocol

from user_directory_client.domain.users import UserRecord


class UsersApiError(RuntimeError):
    """Raised for normalized user-directory service failures."""

    def __init__(self, message: str, *, operation: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code


class UsersApiPort(Protocol):
    """User-directory service contract."""

    async def list_users(self) -> list[UserRecord]:
        """Return every user record in service order."""

    async def create_user(self, *, draft: UserRecord) -> UserRecord:
        """Persist a new user and return it with its server-assigned id."""

    async def update_user(self, *, user_id: str, draft: UserRecord) -> UserRecord:
        """Apply the draft's editable fields to an existing user and return the result."""

    async def login(self, *, email: str, password: str) -> UserRecord:
        """Verify credentials and return the authenticated user's record."""
