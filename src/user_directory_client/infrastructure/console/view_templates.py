"""Plain-text templates for rendering client views in the console."""

from __future__ import annotations

from user_directory_client.domain.client_state import Notification
from user_directory_client.domain.users import UserRecord
from user_directory_client.domain.view_selector import ClientView, ViewKind

_HELP_LINES = (
    "Commands:",
    "  login <email> <password>",
    "  create name=<name> age=<age> email=<email> [password=<pw>] [phone=<digits>]",
    "  edit <number>",
    "  update <field>=<value> ...   (fields: name, age, email, password, phone)",
    "  cancel",
    "  logout",
    "  help",
    "  quit",
)


def build_help_message() -> str:
    return "\n".join(_HELP_LINES)


def build_notification_line(notification: Notification) -> str | None:
    """Return the banner line for a visible notification, else None."""

    if not notification.visible:
        return None
    return f"[{notification.severity.value}] {notification.message}"


def build_user_line(index: int, user: UserRecord) -> str:
    return f"{index:>3}. {user.name} (Age: {user.age}) {user.email}"


def render_view(view: ClientView) -> str:
    """Render one client view as console text."""

    lines: list[str] = []
    banner = build_notification_line(view.notification)
    if banner is not None:
        lines.append(banner)

    if view.kind is ViewKind.LOGIN:
        lines.append("Please log in: login <email> <password>")
        return "\n".join(lines)

    if view.principal is not None:
        lines.append(f"Welcome, {view.principal.name}!")

    if view.kind is ViewKind.EDIT and view.edit_target is not None:
        lines.extend(_render_edit_form(view.edit_target))
        return "\n".join(lines)

    if view.records:
        lines.extend(build_user_line(index, user) for index, user in enumerate(view.records, 1))
    else:
        lines.append("No users to show.")
    lines.append(f"New users: {view.created_count}")
    return "\n".join(lines)


def _render_edit_form(user: UserRecord) -> list[str]:
    return [
        "Edit User",
        f"  name:     {user.name}",
        f"  age:      {user.age}",
        f"  email:    {user.email}",
        "  password: (leave unchanged)",
        f"  phone:    {user.phone if user.phone is not None else ''}",
        "Submit with: update <field>=<value> ...  or: cancel",
    ]
