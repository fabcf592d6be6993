"""Create/update orchestration against the service with cache and notification follow-up."""

from __future__ import annotations

import logging
from dataclasses import replace

from user_directory_client.application.ports.users_api_port import UsersApiError, UsersApiPort
from user_directory_client.application.services.client_state_store import ClientStateStore
from user_directory_client.application.services.directory_cache import DirectoryCache
from user_directory_client.application.services.notification_scheduler import (
    NotificationScheduler,
)
from user_directory_client.domain.client_state import EditCompleted, UserCreated
from user_directory_client.domain.errors import MissingIdError, WriteError
from user_directory_client.domain.users import UserRecord, validate_draft

logger = logging.getLogger(__name__)


class MutationCoordinator:
    """Turn create/update submissions into remote writes and local state changes."""

    def __init__(
        self,
        *,
        users_api: UsersApiPort,
        store: ClientStateStore,
        directory: DirectoryCache,
        notifications: NotificationScheduler,
    ) -> None:
        self._users_api = users_api
        self._store = store
        self._directory = directory
        self._notifications = notifications

    async def create(self, draft: UserRecord) -> UserRecord:
        """Create a user; success bumps the refresh counter and shows a notification.

        Raises ValidationError before any network call and WriteError when the
        service rejects the write, in which case no state changes.
        """

        validate_draft(draft)
        try:
            created = await self._users_api.create_user(draft=replace(draft, id=None))
        except UsersApiError as error:
            logger.warning("user_create_failed email=%s error=%s", draft.email, error)
            raise WriteError("Failed to create user. Please try again.") from error

        self._store.dispatch(UserCreated(record=created))
        self._notifications.show(f"User {draft.name} has been created successfully!")
        logger.info("user_created user_id=%s email=%s", created.id, created.email)
        return created

    async def update(self, user_id: str | None, draft: UserRecord) -> UserRecord:
        """Update a persisted user; success patches the cache and leaves edit mode.

        On WriteError the edit target stays set so the operator keeps the form.
        """

        validate_draft(draft)
        if user_id is None:
            raise MissingIdError()

        try:
            response = await self._users_api.update_user(user_id=user_id, draft=draft)
        except UsersApiError as error:
            logger.warning("user_update_failed user_id=%s error=%s", user_id, error)
            raise WriteError("Failed to update user. Please try again.") from error

        updated = response if response.id is not None else replace(draft, id=user_id)
        self._directory.apply_update(updated)
        self._store.dispatch(EditCompleted(record=updated))
        self._notifications.show(f"User {updated.name} has been updated successfully!")
        logger.info("user_updated user_id=%s", user_id)
        return updated
