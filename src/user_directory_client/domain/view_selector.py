"""Pure mapping from a client state snapshot to the single view to render."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from user_directory_client.domain.client_state import ClientState, Notification
from user_directory_client.domain.users import UserRecord


class ViewKind(StrEnum):
    """Views the client can show; exactly one is active at a time."""

    LOGIN = "login"
    EDIT = "edit"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class ClientView:
    """View selection plus the data it is bound to."""

    kind: ViewKind
    notification: Notification
    principal: UserRecord | None = None
    edit_target: UserRecord | None = None
    records: tuple[UserRecord, ...] = ()
    created_count: int = 0


def select_view(state: ClientState) -> ClientView:
    """Select the view for ``state``: login, then edit, then directory."""

    if not state.session.authenticated:
        return ClientView(kind=ViewKind.LOGIN, notification=state.notification)

    if state.edit_target is not None:
        return ClientView(
            kind=ViewKind.EDIT,
            notification=state.notification,
            principal=state.session.principal,
            edit_target=state.edit_target,
        )

    return ClientView(
        kind=ViewKind.DIRECTORY,
        notification=state.notification,
        principal=state.session.principal,
        records=state.directory.records,
        created_count=state.directory.refresh_counter,
    )
