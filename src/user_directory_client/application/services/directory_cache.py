"""Directory cache service: full refreshes from the service and local patches."""

from __future__ import annotations

import logging

from user_directory_client.application.ports.users_api_port import UsersApiError, UsersApiPort
from user_directory_client.application.services.client_state_store import ClientStateStore
from user_directory_client.domain.client_state import (
    ClientState,
    DirectoryLoaded,
    DirectoryLoadFailed,
    RecordPatched,
    needs_directory_refresh,
)
from user_directory_client.domain.errors import FetchError
from user_directory_client.domain.users import UserRecord, identity_of

logger = logging.getLogger(__name__)


class DirectoryCache:
    """Keep the in-memory directory consistent with the service.

    Creations are never patched in locally; they bump the refresh counter and
    the next refresh brings the server-assigned id along with the new record.
    """

    def __init__(self, *, users_api: UsersApiPort, store: ClientStateStore) -> None:
        self._users_api = users_api
        self._store = store
        self._issued_generation = 0

    @property
    def records(self) -> tuple[UserRecord, ...]:
        return self._store.state.directory.records

    async def refresh(self) -> tuple[UserRecord, ...]:
        """Replace the directory wholesale with the service's list.

        On failure the directory is emptied rather than left stale, and
        FetchError is raised without retrying. A result that arrives after the
        session it was issued for has ended is discarded.
        """

        self._issued_generation += 1
        generation = self._issued_generation
        session_epoch = self._store.state.session_epoch
        try:
            users = await self._users_api.list_users()
        except UsersApiError as error:
            if self._is_stale_session(session_epoch, generation):
                return self.records
            self._store.dispatch(DirectoryLoadFailed(generation=generation))
            logger.warning(
                "directory_refresh_failed generation=%s error=%s",
                generation,
                error,
            )
            raise FetchError() from error

        records = tuple(users)
        if self._is_stale_session(session_epoch, generation):
            return self.records
        self._store.dispatch(DirectoryLoaded(records=records, generation=generation))
        logger.info("directory_refreshed generation=%s count=%s", generation, len(records))
        return records

    async def refresh_if_due(self, previous: ClientState) -> bool:
        """Refresh only when the transition from ``previous`` requires a fetch."""

        if not needs_directory_refresh(previous, self._store.state):
            return False
        await self.refresh()
        return True

    def apply_update(self, record: UserRecord) -> tuple[UserRecord, ...]:
        """Patch the matching record in place; a record no longer listed is ignored."""

        self._store.dispatch(RecordPatched(record=record))
        kind, value = identity_of(record)
        logger.info("directory_record_patched identity=%s:%s", kind, value)
        return self.records

    def _is_stale_session(self, session_epoch: int, generation: int) -> bool:
        current_epoch = self._store.state.session_epoch
        if current_epoch == session_epoch:
            return False
        logger.info(
            "directory_refresh_discarded generation=%s issued_epoch=%s current_epoch=%s",
            generation,
            session_epoch,
            current_epoch,
        )
        return True
