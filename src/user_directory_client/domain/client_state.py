"""Immutable client state snapshot and the pure per-event reducer."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum

from user_directory_client.domain.edit_phase import EditPhase
from user_directory_client.domain.transitions import (
    InvalidEditTransitionError,
    assert_transition,
)
from user_directory_client.domain.users import (
    UserRecord,
    apply_update,
    contains_identity,
    same_identity,
)


class NotificationSeverity(StrEnum):
    """Severity tag for transient notifications."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """Transient message; ``expiry_token`` names the timer allowed to hide it."""

    message: str = ""
    visible: bool = False
    severity: NotificationSeverity = NotificationSeverity.SUCCESS
    expiry_token: str | None = None


@dataclass(frozen=True)
class Session:
    """Authenticated principal, empty until a login succeeds."""

    principal: UserRecord | None = None
    authenticated: bool = False


@dataclass(frozen=True)
class DirectoryState:
    """Ordered directory records plus the counters that drive refreshes."""

    records: tuple[UserRecord, ...] = ()
    refresh_counter: int = 0
    loaded_generation: int = 0


@dataclass(frozen=True)
class ClientState:
    """Whole client state as one snapshot; replaced, never mutated.

    ``session_epoch`` counts logins and survives logout so work started in an
    earlier session can be told apart from work for the current one.
    """

    session: Session = field(default_factory=Session)
    directory: DirectoryState = field(default_factory=DirectoryState)
    edit_target: UserRecord | None = None
    notification: Notification = field(default_factory=Notification)
    session_epoch: int = 0

    @property
    def edit_phase(self) -> EditPhase:
        return EditPhase.IDLE if self.edit_target is None else EditPhase.EDITING


@dataclass(frozen=True)
class LoggedIn:
    principal: UserRecord


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class DirectoryLoaded:
    records: tuple[UserRecord, ...]
    generation: int


@dataclass(frozen=True)
class DirectoryLoadFailed:
    generation: int


@dataclass(frozen=True)
class UserCreated:
    record: UserRecord


@dataclass(frozen=True)
class RecordPatched:
    record: UserRecord


@dataclass(frozen=True)
class EditStarted:
    record: UserRecord


@dataclass(frozen=True)
class EditCancelled:
    pass


@dataclass(frozen=True)
class EditCompleted:
    record: UserRecord


@dataclass(frozen=True)
class NotificationChanged:
    notification: Notification


ClientEvent = (
    LoggedIn
    | LoggedOut
    | DirectoryLoaded
    | DirectoryLoadFailed
    | UserCreated
    | RecordPatched
    | EditStarted
    | EditCancelled
    | EditCompleted
    | NotificationChanged
)


def reduce(state: ClientState, event: ClientEvent) -> ClientState:
    """Return the snapshot that follows ``state`` after ``event``.

    Raises InvalidEditTransitionError for edit events the lifecycle forbids.
    """

    if isinstance(event, LoggedIn):
        return replace(
            state,
            session=Session(principal=event.principal, authenticated=True),
            session_epoch=state.session_epoch + 1,
        )

    if isinstance(event, LoggedOut):
        return ClientState(
            notification=state.notification,
            session_epoch=state.session_epoch,
        )

    if isinstance(event, DirectoryLoaded | DirectoryLoadFailed):
        if not state.session.authenticated:
            return state
        if event.generation < state.directory.loaded_generation:
            return state
        records = event.records if isinstance(event, DirectoryLoaded) else ()
        return replace(
            state,
            directory=replace(
                state.directory,
                records=records,
                loaded_generation=event.generation,
            ),
        )

    if isinstance(event, UserCreated):
        return replace(
            state,
            directory=replace(
                state.directory,
                refresh_counter=state.directory.refresh_counter + 1,
            ),
        )

    if isinstance(event, RecordPatched):
        return replace(
            state,
            directory=replace(
                state.directory,
                records=apply_update(state.directory.records, event.record),
            ),
        )

    if isinstance(event, EditStarted):
        # EDITING -> EDITING is reserved for a failed update; selection needs IDLE.
        if state.edit_phase is not EditPhase.IDLE:
            raise InvalidEditTransitionError(
                f"Cannot select a record while editing: {state.edit_target.email}"
            )
        assert_transition(state.edit_phase, EditPhase.EDITING)
        if not state.session.authenticated:
            raise InvalidEditTransitionError("Cannot edit while logged out")
        if not contains_identity(state.directory.records, event.record):
            raise InvalidEditTransitionError(
                f"Cannot edit a record missing from the directory: {event.record.email}"
            )
        return replace(state, edit_target=event.record)

    if isinstance(event, EditCancelled):
        assert_transition(state.edit_phase, EditPhase.IDLE)
        return replace(state, edit_target=None)

    if isinstance(event, EditCompleted):
        # A late response for a record no longer being edited leaves the view alone.
        if state.edit_target is None or not same_identity(state.edit_target, event.record):
            return state
        return replace(state, edit_target=None)

    if isinstance(event, NotificationChanged):
        return replace(state, notification=event.notification)

    raise TypeError(f"Unsupported client event: {type(event).__name__}")


def needs_directory_refresh(previous: ClientState, current: ClientState) -> bool:
    """Return whether a full directory fetch must be issued after a transition."""

    if not current.session.authenticated:
        return False
    if not previous.session.authenticated:
        return True
    return previous.directory.refresh_counter != current.directory.refresh_counter
