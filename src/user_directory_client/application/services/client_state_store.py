"""Single-writer holder of the current client state snapshot."""

from __future__ import annotations

import logging
from collections.abc import Callable

from user_directory_client.domain.client_state import ClientEvent, ClientState, reduce

StateListener = Callable[[ClientState], None]
logger = logging.getLogger(__name__)


class ClientStateStore:
    """Apply events through the reducer and fan new snapshots out to listeners."""

    def __init__(self, *, initial: ClientState | None = None) -> None:
        self._state = initial or ClientState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ClientState:
        return self._state

    def dispatch(self, event: ClientEvent) -> ClientState:
        """Reduce ``event`` into a new snapshot and notify listeners when it changed."""

        previous = self._state
        current = reduce(previous, event)
        if current is previous:
            logger.debug("client_event_ignored event=%s", type(event).__name__)
            return current

        self._state = current
        logger.debug(
            "client_event_applied event=%s authenticated=%s records=%s editing=%s",
            type(event).__name__,
            current.session.authenticated,
            len(current.directory.records),
            current.edit_target is not None,
        )
        for listener in list(self._listeners):
            listener(current)
        return current

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
