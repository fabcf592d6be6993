from __future__ import annotations

import json
from dataclasses import dataclass

import pytest

from user_directory_client.application.ports.users_api_port import UsersApiError
from user_directory_client.domain.users import UserRecord
from user_directory_client.infrastructure.users_api.http_client import (
    UsersHttpClient,
    UsersHttpResponse,
)


@dataclass
class _QueuedTransport:
    responses: list[UsersHttpResponse]
    error: Exception | None = None

    def __post_init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    async def request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> UsersHttpResponse:
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "body": body,
                "timeout_seconds": timeout_seconds,
            }
        )
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def _client(transport: _QueuedTransport) -> UsersHttpClient:
    return UsersHttpClient(
        base_url="http://localhost:3000/",
        transport=transport,
        timeout_seconds=5.0,
    )


def _json_response(payload: object, *, status_code: int = 200) -> UsersHttpResponse:
    return UsersHttpResponse(status_code=status_code, body_bytes=json.dumps(payload).encode())


@pytest.mark.asyncio
async def test_list_users_decodes_records_and_drops_passwords() -> None:
    transport = _QueuedTransport(
        responses=[
            _json_response(
                [
                    {
                        "_id": "1",
                        "name": "Ann",
                        "age": 30,
                        "email": "a@x.com",
                        "password": "hashed",
                        "__v": 0,
                    },
                    {"_id": "2", "name": "Bo", "age": 25, "email": "b@x.com", "phone": 555},
                ]
            )
        ]
    )

    users = await _client(transport).list_users()

    assert users == [
        UserRecord(id="1", name="Ann", age=30, email="a@x.com"),
        UserRecord(id="2", name="Bo", age=25, email="b@x.com", phone=555),
    ]
    call = transport.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "http://localhost:3000/api/Users"
    assert call["body"] is None
    assert call["timeout_seconds"] == 5.0


@pytest.mark.asyncio
async def test_create_user_posts_record_without_id() -> None:
    transport = _QueuedTransport(
        responses=[
            _json_response(
                {"_id": "2", "name": "Bo", "age": 25, "email": "b@x.com"},
                status_code=201,
            )
        ]
    )

    created = await _client(transport).create_user(
        draft=UserRecord(name="Bo", age=25, email="b@x.com", password="pw")
    )

    assert created == UserRecord(id="2", name="Bo", age=25, email="b@x.com")
    call = transport.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://localhost:3000/api/Users"
    headers = call["headers"]
    assert isinstance(headers, dict)
    assert headers["Content-Type"] == "application/json"
    payload = json.loads(call["body"] or b"")  # type: ignore[arg-type]
    assert payload == {"name": "Bo", "age": 25, "email": "b@x.com", "password": "pw"}


@pytest.mark.asyncio
async def test_update_user_puts_partial_body_to_encoded_id_path() -> None:
    transport = _QueuedTransport(
        responses=[_json_response({"_id": "a/1", "name": "Ann", "age": 31, "email": "a@x.com"})]
    )

    updated = await _client(transport).update_user(
        user_id="a/1",
        draft=UserRecord(id="a/1", name="Ann", age=31, email="a@x.com", phone=12),
    )

    assert updated.age == 31
    call = transport.calls[0]
    assert call["method"] == "PUT"
    assert call["url"] == "http://localhost:3000/api/Users/a%2F1"
    payload = json.loads(call["body"] or b"")  # type: ignore[arg-type]
    assert payload == {"name": "Ann", "age": 31, "email": "a@x.com", "phone": 12}


@pytest.mark.asyncio
async def test_login_posts_credentials() -> None:
    transport = _QueuedTransport(
        responses=[_json_response({"_id": "1", "name": "Ann", "age": 30, "email": "a@x.com"})]
    )

    principal = await _client(transport).login(email="a@x.com", password="pw")

    assert principal.id == "1"
    call = transport.calls[0]
    assert call["url"] == "http://localhost:3000/api/Users/login"
    payload = json.loads(call["body"] or b"")  # type: ignore[arg-type]
    assert payload == {"email": "a@x.com", "password": "pw"}


@pytest.mark.asyncio
async def test_update_rejects_created_status() -> None:
    transport = _QueuedTransport(responses=[_json_response({}, status_code=201)])

    with pytest.raises(UsersApiError) as exc_info:
        await _client(transport).update_user(
            user_id="1",
            draft=UserRecord(name="Ann", age=31, email="a@x.com"),
        )

    assert exc_info.value.status_code == 201


@pytest.mark.asyncio
async def test_non_success_status_raises_normalized_error() -> None:
    transport = _QueuedTransport(
        responses=[UsersHttpResponse(status_code=401, body_bytes=b'{"message":"bad"}')]
    )

    with pytest.raises(UsersApiError) as exc_info:
        await _client(transport).login(email="a@x.com", password="nope")

    assert exc_info.value.operation == "login"
    assert exc_info.value.status_code == 401
    assert "login failed with status 401" in str(exc_info.value)


@pytest.mark.asyncio
async def test_transport_exception_raises_normalized_error() -> None:
    transport = _QueuedTransport(responses=[], error=RuntimeError("connection refused"))

    with pytest.raises(UsersApiError) as exc_info:
        await _client(transport).list_users()

    assert "list_users transport failure" in str(exc_info.value)
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_invalid_json_raises_normalized_error() -> None:
    transport = _QueuedTransport(responses=[UsersHttpResponse(status_code=200, body_bytes=b"<")])

    with pytest.raises(UsersApiError, match="invalid JSON"):
        await _client(transport).list_users()


@pytest.mark.asyncio
async def test_non_list_payload_raises_normalized_error() -> None:
    transport = _QueuedTransport(responses=[_json_response({"users": []})])

    with pytest.raises(UsersApiError, match="invalid user payload"):
        await _client(transport).list_users()


@pytest.mark.asyncio
async def test_list_users_skips_malformed_rows_and_keeps_valid_ones() -> None:
    transport = _QueuedTransport(
        responses=[
            _json_response(
                [
                    {"_id": "1", "name": "Ann", "age": 30, "email": "a@x.com"},
                    {"_id": "2", "name": "Bo"},
                    {"_id": "3", "name": "Cy", "age": 41, "email": "c@x.com"},
                ]
            )
        ]
    )

    users = await _client(transport).list_users()

    assert [(user.id, user.name) for user in users] == [("1", "Ann"), ("3", "Cy")]
