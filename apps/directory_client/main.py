"""directory-client console entrypoint."""

from __future__ import annotations

import asyncio
import logging
import shlex
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, replace

from user_directory_client.application.services.client_orchestrator import ClientOrchestrator
from user_directory_client.config.settings import Settings, load_settings
from user_directory_client.domain.client_state import ClientState
from user_directory_client.domain.errors import ValidationError
from user_directory_client.domain.users import UserRecord
from user_directory_client.domain.view_selector import ViewKind
from user_directory_client.infrastructure.console.view_templates import (
    build_help_message,
    render_view,
)
from user_directory_client.infrastructure.logging import configure_logging
from user_directory_client.infrastructure.users_api.http_client import UsersHttpClient

OutputCallable = Callable[[str], None]
ReadLineCallable = Callable[[str], Awaitable[str]]
EDITABLE_FIELDS = frozenset({"name", "age", "email", "password", "phone"})
_PROMPT = "> "
logger = logging.getLogger(__name__)


class CommandError(ValueError):
    """Raised when a console line cannot be parsed into a command."""


@dataclass(frozen=True)
class ConsoleCommand:
    """One parsed console line."""

    name: str
    args: tuple[str, ...] = ()


def parse_command(line: str) -> ConsoleCommand | None:
    """Split a console line into command name and arguments; blank lines yield None."""

    try:
        tokens = shlex.split(line)
    except ValueError as error:
        raise CommandError(f"Could not parse command: {error}") from error
    if not tokens:
        return None
    return ConsoleCommand(name=tokens[0].lower(), args=tuple(tokens[1:]))


def parse_assignments(args: Sequence[str]) -> dict[str, str]:
    """Parse ``field=value`` arguments restricted to editable user fields."""

    fields: dict[str, str] = {}
    for arg in args:
        key, separator, value = arg.partition("=")
        key = key.strip().lower()
        if not separator or key not in EDITABLE_FIELDS:
            raise CommandError(f"Expected <field>=<value> with a known field, got: {arg}")
        fields[key] = value
    return fields


def build_draft(fields: Mapping[str, str], *, base: UserRecord | None = None) -> UserRecord:
    """Overlay parsed fields on ``base`` (or a blank record) to build a submission."""

    draft = base or UserRecord(name="", age=0, email="")
    return replace(
        draft,
        name=fields.get("name", draft.name),
        age=_parse_int(fields, "age", default=draft.age) or 0,
        email=fields.get("email", draft.email),
        password=fields.get("password", ""),
        phone=_parse_int(fields, "phone", default=draft.phone),
    )


def _parse_int(fields: Mapping[str, str], key: str, *, default: int | None) -> int | None:
    if key not in fields:
        return default
    raw = fields[key].strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as error:
        raise ValidationError(
            fields=[key],
            message=f"{key.capitalize()} must be a whole number.",
        ) from error


class DirectoryConsole:
    """Line-command front end that forwards operator input to the orchestrator."""

    def __init__(self, *, orchestrator: ClientOrchestrator, output: OutputCallable = print) -> None:
        self._orchestrator = orchestrator
        self._output = output
        self._banner_visible = orchestrator.state.notification.visible

    def render(self) -> None:
        self._output(render_view(self._orchestrator.current_view()))

    def on_state_changed(self, state: ClientState) -> None:
        """Re-render when the notification banner auto-hides between commands."""

        visible = state.notification.visible
        if self._banner_visible and not visible:
            self.render()
        self._banner_visible = visible

    async def execute(self, command: ConsoleCommand) -> bool:
        """Run one command and re-render; return False when the operator quits."""

        if command.name in {"quit", "exit"}:
            return False
        if command.name == "help":
            self._output(build_help_message())
            return True

        try:
            await self._dispatch(command)
        except (CommandError, ValidationError) as error:
            message = error.user_message if isinstance(error, ValidationError) else str(error)
            self._output(f"[error] {message}")
        self.render()
        return True

    async def _dispatch(self, command: ConsoleCommand) -> None:
        view = self._orchestrator.current_view()
        if command.name == "login":
            if len(command.args) != 2:
                raise CommandError("Usage: login <email> <password>")
            await self._orchestrator.on_login(command.args[0], command.args[1])
        elif command.name == "logout":
            self._orchestrator.on_logout()
        elif command.name == "create":
            self._require_view(view.kind, ViewKind.DIRECTORY)
            draft = build_draft(parse_assignments(command.args))
            await self._orchestrator.on_new_user(draft)
        elif command.name == "edit":
            self._require_view(view.kind, ViewKind.DIRECTORY)
            self._orchestrator.on_select_user(self._pick_record(view.records, command.args))
        elif command.name == "update":
            self._require_view(view.kind, ViewKind.EDIT)
            target = self._orchestrator.state.edit_target
            draft = build_draft(parse_assignments(command.args), base=target)
            await self._orchestrator.on_user_updated(draft)
        elif command.name == "cancel":
            self._require_view(view.kind, ViewKind.EDIT)
            self._orchestrator.on_cancel()
        else:
            raise CommandError(f"Unknown command: {command.name} (try: help)")

    def _require_view(self, current: ViewKind, expected: ViewKind) -> None:
        if current is not expected:
            raise CommandError(f"That command is only available in the {expected.value} view.")

    def _pick_record(
        self,
        records: tuple[UserRecord, ...],
        args: Sequence[str],
    ) -> UserRecord:
        if len(args) != 1 or not args[0].isdigit():
            raise CommandError("Usage: edit <number>")
        position = int(args[0])
        if not 1 <= position <= len(records):
            raise CommandError(f"No user numbered {position}.")
        return records[position - 1]


async def _read_line(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


async def run_console(
    *,
    orchestrator: ClientOrchestrator,
    read_line: ReadLineCallable = _read_line,
    output: OutputCallable = print,
) -> None:
    """Read and execute commands until quit or end of input."""

    console = DirectoryConsole(orchestrator=orchestrator, output=output)
    console.render()
    unsubscribe = orchestrator.subscribe(console.on_state_changed)
    try:
        while True:
            try:
                line = await read_line(_PROMPT)
            except EOFError:
                break
            try:
                command = parse_command(line)
            except CommandError as error:
                output(f"[error] {error}")
                continue
            if command is None:
                continue
            if not await console.execute(command):
                break
    finally:
        unsubscribe()
        await orchestrator.close()


def build_orchestrator(*, settings: Settings) -> ClientOrchestrator:
    """Build the orchestrator wired to the HTTP user-directory adapter."""

    users_api = UsersHttpClient(
        base_url=str(settings.users_api_base_url),
        timeout_seconds=settings.users_api_timeout_seconds,
    )
    return ClientOrchestrator(
        users_api=users_api,
        notification_seconds=settings.notification_duration_seconds,
    )


async def _run_directory_client() -> None:
    settings = load_settings()
    configure_logging(level=settings.log_level, log_file=settings.log_file)
    logger.info(
        "directory_client_starting base_url=%s notification_seconds=%s",
        settings.users_api_base_url,
        settings.notification_duration_seconds,
    )
    await run_console(orchestrator=build_orchestrator(settings=settings))


def main() -> None:
    """Run the interactive directory console."""

    asyncio.run(_run_directory_client())


if __name__ == "__main__":
    main()
