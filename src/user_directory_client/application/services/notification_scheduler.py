"""Lifecycle of the single transient notification: show, auto-expire, replace."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from uuid import uuid4

from user_directory_client.domain.client_state import Notification, NotificationSeverity

SleepCallable = Callable[[float], Awaitable[None]]
NotificationListener = Callable[[Notification], None]
DEFAULT_NOTIFICATION_SECONDS = 3.0
logger = logging.getLogger(__name__)


class NotificationScheduler:
    """Own at most one live expiry timer for the current notification.

    Each ``show`` mints a fresh expiry token and cancels the previous timer, so a
    replaced message can never be hidden by the timer of its predecessor.
    """

    def __init__(
        self,
        *,
        duration_seconds: float = DEFAULT_NOTIFICATION_SECONDS,
        sleep: SleepCallable = asyncio.sleep,
        on_change: NotificationListener | None = None,
    ) -> None:
        self._duration_seconds = duration_seconds
        self._sleep = sleep
        self._on_change = on_change
        self._notification = Notification()
        self._timer: asyncio.Task[None] | None = None

    @property
    def current(self) -> Notification:
        return self._notification

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def show(
        self,
        message: str,
        *,
        severity: NotificationSeverity = NotificationSeverity.SUCCESS,
    ) -> Notification:
        """Publish ``message`` and start its expiry timer; requires a running loop."""

        self.cancel()
        token = uuid4().hex
        self._publish(
            Notification(
                message=message,
                visible=True,
                severity=severity,
                expiry_token=token,
            )
        )
        self._timer = asyncio.get_running_loop().create_task(self._expire_after(token))
        logger.info("notification_shown severity=%s message=%s", severity.value, message)
        return self._notification

    def expire(self, token: str) -> bool:
        """Hide the notification if ``token`` still owns it; keep the message text."""

        if token != self._notification.expiry_token or not self._notification.visible:
            logger.debug("notification_expiry_stale token=%s", token)
            return False
        self._publish(replace(self._notification, visible=False))
        return True

    def cancel(self) -> None:
        """Cancel the pending expiry timer, if any, leaving visibility unchanged."""

        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def shutdown(self) -> None:
        """Cancel the pending timer and wait for its task to finish unwinding."""

        timer = self._timer
        self.cancel()
        if timer is not None:
            await asyncio.gather(timer, return_exceptions=True)

    async def wait_until_idle(self) -> None:
        """Wait until no expiry timer is pending, following replacements."""

        while self._timer is not None and not self._timer.done():
            await asyncio.wait({self._timer})

    async def _expire_after(self, token: str) -> None:
        await self._sleep(self._duration_seconds)
        self.expire(token)

    def _publish(self, notification: Notification) -> None:
        self._notification = notification
        if self._on_change is not None:
            self._on_change(notification)
