"""Pydantic models for the user-directory service wire contracts."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter

from user_directory_client.domain.users import UserRecord


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class UserPayload(BaseModel):
    """User document as returned by the service; unknown fields are ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: str
    age: int = Field(ge=0)
    email: str
    phone: int | None = None

    def to_record(self) -> UserRecord:
        """Convert to the client record, dropping any password the service echoed."""

        return UserRecord(
            id=self.id,
            name=self.name,
            age=self.age,
            email=self.email,
            phone=self.phone,
        )


class CreateUserRequest(StrictModel):
    """POST body for a new user; never carries an id."""

    name: str = Field(min_length=1)
    age: int = Field(ge=0)
    email: str = Field(min_length=1)
    password: str = ""
    phone: int | None = None

    @classmethod
    def from_record(cls, record: UserRecord) -> CreateUserRequest:
        return cls(
            name=record.name,
            age=record.age,
            email=record.email,
            password=record.password,
            phone=record.phone,
        )


class UpdateUserRequest(StrictModel):
    """PUT body carrying only the fields the operator may change."""

    name: str | None = None
    age: int | None = Field(default=None, ge=0)
    email: str | None = None
    password: str | None = None
    phone: int | None = None

    @classmethod
    def from_record(cls, record: UserRecord) -> UpdateUserRequest:
        return cls(
            name=record.name,
            age=record.age,
            email=record.email,
            password=record.password or None,
            phone=record.phone,
        )


class LoginRequest(StrictModel):
    """POST body for the login endpoint."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


# Rows are validated one by one so a single bad row does not hide the rest.
USER_ROWS_ADAPTER: TypeAdapter[list[dict[str, object]]] = TypeAdapter(list[dict[str, object]])
