"""Deterministic transition guards for the edit lifecycle."""

from __future__ import annotations

from typing import Final

from user_directory_client.domain.edit_phase import EditPhase


class InvalidEditTransitionError(ValueError):
    """Raised when an attempted edit lifecycle transition is not allowed."""


_ALLOWED_TRANSITIONS: Final[dict[EditPhase, frozenset[EditPhase]]] = {
    EditPhase.IDLE: frozenset({EditPhase.EDITING}),
    # EDITING -> EDITING covers a failed update that keeps the form open.
    EditPhase.EDITING: frozenset({EditPhase.IDLE, EditPhase.EDITING}),
}


def can_transition(from_phase: EditPhase, to_phase: EditPhase) -> bool:
    """Return whether the transition is valid for the edit lifecycle."""

    return to_phase in _ALLOWED_TRANSITIONS[from_phase]


def assert_transition(from_phase: EditPhase, to_phase: EditPhase) -> None:
    """Assert a transition is allowed, else raise deterministic domain error."""

    if not can_transition(from_phase, to_phase):
        raise InvalidEditTransitionError(
            f"Invalid edit transition: {from_phase.value} -> {to_phase.value}"
        )
