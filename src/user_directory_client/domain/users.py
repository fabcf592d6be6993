"""User record value type and identity-keyed reconciliation helpers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from user_directory_client.domain.errors import ValidationError

IdentityKey = tuple[str, str]


@dataclass(frozen=True)
class UserRecord:
    """Directory entry as held by the client.

    ``password`` is write-only: records decoded from the service carry an
    empty password and it is only sent when the operator typed one.
    """

    name: str
    age: int
    email: str
    id: str | None = None
    password: str = ""
    phone: int | None = None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def identity_of(record: UserRecord) -> IdentityKey:
    """Return reconciliation identity: server id when present, else normalized email."""

    if record.id is not None:
        return ("id", record.id)
    return ("email", normalize_email(record.email))


def same_identity(left: UserRecord, right: UserRecord) -> bool:
    """Compare two records by identity, accepting an email match for unpersisted drafts."""

    if left.id is not None and right.id is not None:
        return left.id == right.id
    return normalize_email(left.email) == normalize_email(right.email)


def apply_update(
    records: Sequence[UserRecord],
    updated: UserRecord,
) -> tuple[UserRecord, ...]:
    """Replace the record matching ``updated`` by identity, preserving order.

    Returns the input unchanged when nothing matches.
    """

    patched: list[UserRecord] = []
    matched = False
    for record in records:
        if not matched and same_identity(record, updated):
            patched.append(replace(updated, password=""))
            matched = True
        else:
            patched.append(record)
    return tuple(patched)


def contains_identity(records: Sequence[UserRecord], target: UserRecord) -> bool:
    return any(same_identity(record, target) for record in records)


def validate_draft(draft: UserRecord) -> UserRecord:
    """Reject drafts missing required fields before any network call."""

    missing: list[str] = []
    if not draft.name.strip():
        missing.append("name")
    if not draft.age:
        missing.append("age")
    if not draft.email.strip():
        missing.append("email")
    if missing:
        raise ValidationError(fields=missing)
    if draft.age < 0:
        raise ValidationError(fields=["age"], message="Age must be a non-negative number.")
    return draft
