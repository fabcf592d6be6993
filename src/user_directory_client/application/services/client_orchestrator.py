"""Composition root for session, directory, mutation and notification services."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from user_directory_client.application.ports.users_api_port import UsersApiPort
from user_directory_client.application.services.client_state_store import (
    ClientStateStore,
    StateListener,
)
from user_directory_client.application.services.directory_cache import DirectoryCache
from user_directory_client.application.services.mutation_coordinator import MutationCoordinator
from user_directory_client.application.services.notification_scheduler import (
    DEFAULT_NOTIFICATION_SECONDS,
    NotificationScheduler,
    SleepCallable,
)
from user_directory_client.application.services.session_gate import SessionGate
from user_directory_client.domain.client_state import (
    ClientState,
    EditCancelled,
    EditStarted,
    Notification,
    NotificationChanged,
    NotificationSeverity,
)
from user_directory_client.domain.errors import DirectoryClientError
from user_directory_client.domain.transitions import InvalidEditTransitionError
from user_directory_client.domain.users import UserRecord
from user_directory_client.domain.view_selector import ClientView, select_view

logger = logging.getLogger(__name__)


class ActionOutcome(StrEnum):
    """Supported outcomes for operator actions."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one operator action as reported to the front end."""

    outcome: ActionOutcome
    error: DirectoryClientError | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is ActionOutcome.SUCCESS


_SUCCESS = ActionResult(outcome=ActionOutcome.SUCCESS)


class ClientOrchestrator:
    """Expose front-end callbacks and keep the directory in step with the session.

    Every callback captures the snapshot it started from so the refresh trigger
    is evaluated against the state transition it caused. Client errors are
    converted into error notifications here and never reach the front end.
    """

    def __init__(
        self,
        *,
        users_api: UsersApiPort,
        notification_seconds: float = DEFAULT_NOTIFICATION_SECONDS,
        sleep: SleepCallable = asyncio.sleep,
    ) -> None:
        self._store = ClientStateStore()
        self._notifications = NotificationScheduler(
            duration_seconds=notification_seconds,
            sleep=sleep,
            on_change=self._on_notification_changed,
        )
        self._directory = DirectoryCache(users_api=users_api, store=self._store)
        self._session = SessionGate(users_api=users_api, store=self._store)
        self._mutations = MutationCoordinator(
            users_api=users_api,
            store=self._store,
            directory=self._directory,
            notifications=self._notifications,
        )

    @property
    def state(self) -> ClientState:
        return self._store.state

    @property
    def notifications(self) -> NotificationScheduler:
        return self._notifications

    def current_view(self) -> ClientView:
        return select_view(self._store.state)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._store.subscribe(listener)

    async def on_login(self, email: str, password: str) -> ActionResult:
        return await self._run(
            "login",
            lambda: self._session.login(email=email, password=password),
        )

    async def on_new_user(self, draft: UserRecord) -> ActionResult:
        return await self._run("create", lambda: self._mutations.create(draft))

    async def on_user_updated(self, draft: UserRecord) -> ActionResult:
        """Submit the edit form; the target id comes from the record being edited."""

        target = self._store.state.edit_target
        user_id = target.id if target is not None else draft.id
        return await self._run("update", lambda: self._mutations.update(user_id, draft))

    def on_select_user(self, record: UserRecord) -> ActionResult:
        try:
            self._store.dispatch(EditStarted(record=record))
        except InvalidEditTransitionError as error:
            logger.warning("edit_select_rejected email=%s error=%s", record.email, error)
            return ActionResult(outcome=ActionOutcome.FAILED)
        return _SUCCESS

    def on_cancel(self) -> ActionResult:
        try:
            self._store.dispatch(EditCancelled())
        except InvalidEditTransitionError as error:
            logger.debug("edit_cancel_ignored error=%s", error)
            return ActionResult(outcome=ActionOutcome.FAILED)
        return _SUCCESS

    def on_logout(self) -> ActionResult:
        self._session.logout()
        return _SUCCESS

    async def close(self) -> None:
        """Cancel the pending notification timer and wait for it to stop."""

        await self._notifications.shutdown()

    async def _run(
        self,
        action: str,
        operation: Callable[[], Awaitable[object]],
    ) -> ActionResult:
        previous = self._store.state
        result = _SUCCESS
        try:
            await operation()
        except DirectoryClientError as error:
            result = self._report(action, error)

        if result.ok:
            try:
                await self._directory.refresh_if_due(previous)
            except DirectoryClientError as error:
                self._report("refresh", error)
        return result

    def _report(self, action: str, error: DirectoryClientError) -> ActionResult:
        logger.warning(
            "action_failed action=%s error_type=%s message=%s",
            action,
            type(error).__name__,
            error.user_message,
        )
        self._notifications.show(error.user_message, severity=NotificationSeverity.ERROR)
        return ActionResult(outcome=ActionOutcome.FAILED, error=error)

    def _on_notification_changed(self, notification: Notification) -> None:
        self._store.dispatch(NotificationChanged(notification=notification))
