from __future__ import annotations

import pytest

from user_directory_client.domain.edit_phase import EditPhase
from user_directory_client.domain.transitions import (
    InvalidEditTransitionError,
    assert_transition,
    can_transition,
)


@pytest.mark.parametrize(
    ("from_phase", "to_phase"),
    [
        (EditPhase.IDLE, EditPhase.EDITING),
        (EditPhase.EDITING, EditPhase.IDLE),
        (EditPhase.EDITING, EditPhase.EDITING),
    ],
)
def test_allowed_transitions_pass(from_phase: EditPhase, to_phase: EditPhase) -> None:
    assert_transition(from_phase, to_phase)


def test_idle_cannot_transition_to_idle() -> None:
    assert not can_transition(EditPhase.IDLE, EditPhase.IDLE)

    with pytest.raises(InvalidEditTransitionError, match="IDLE -> IDLE"):
        assert_transition(EditPhase.IDLE, EditPhase.IDLE)
