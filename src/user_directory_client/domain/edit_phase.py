"""Edit lifecycle phases for the directory view."""

from __future__ import annotations

from enum import StrEnum


class EditPhase(StrEnum):
    """Mutually exclusive phases of the single-record edit lifecycle."""

    IDLE = "IDLE"
    EDITING = "EDITING"
