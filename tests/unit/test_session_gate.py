from __future__ import annotations

import pytest

from user_directory_client.application.ports.users_api_port import UsersApiError
from user_directory_client.application.services.client_state_store import ClientStateStore
from user_directory_client.application.services.session_gate import SessionGate
from user_directory_client.domain.client_state import Session
from user_directory_client.domain.errors import AuthError
from user_directory_client.domain.users import UserRecord

ANN = UserRecord(id="1", name="Ann", age=30, email="a@x.com")


class FakeUsersApi:
    def __init__(self, result: UserRecord | Exception) -> None:
        self._result = result
        self.login_calls: list[tuple[str, str]] = []

    async def login(self, *, email: str, password: str) -> UserRecord:
        self.login_calls.append((email, password))
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


@pytest.mark.asyncio
async def test_login_success_authenticates_with_returned_principal() -> None:
    store = ClientStateStore()
    api = FakeUsersApi(ANN)
    gate = SessionGate(users_api=api, store=store)

    session = await gate.login(email=" a@x.com ", password="pw")

    assert session == Session(principal=ANN, authenticated=True)
    assert gate.is_authenticated is True
    assert gate.principal == ANN
    assert api.login_calls == [("a@x.com", "pw")]


@pytest.mark.asyncio
async def test_rejected_login_raises_auth_error_and_keeps_session() -> None:
    store = ClientStateStore()
    api = FakeUsersApi(UsersApiError("denied", operation="login", status_code=401))
    gate = SessionGate(users_api=api, store=store)

    with pytest.raises(AuthError) as exc_info:
        await gate.login(email="a@x.com", password="wrong")

    assert exc_info.value.user_message == "Login failed. Please check your credentials."
    assert gate.session == Session()
    assert len(api.login_calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(("email", "password"), [("", "pw"), ("  ", "pw"), ("a@x.com", "")])
async def test_blank_credentials_fail_without_network_call(email: str, password: str) -> None:
    api = FakeUsersApi(ANN)
    gate = SessionGate(users_api=api, store=ClientStateStore())

    with pytest.raises(AuthError):
        await gate.login(email=email, password=password)

    assert api.login_calls == []


@pytest.mark.asyncio
async def test_logout_resets_session() -> None:
    gate = SessionGate(users_api=FakeUsersApi(ANN), store=ClientStateStore())
    await gate.login(email="a@x.com", password="pw")

    session = gate.logout()

    assert session == Session()
    assert gate.principal is None
