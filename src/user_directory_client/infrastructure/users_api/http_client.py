"""Concrete HTTP adapter for the user-directory REST service."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Collection
from dataclasses import dataclass
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from user_directory_client.application.dto.user_models import (
    USER_ROWS_ADAPTER,
    CreateUserRequest,
    LoginRequest,
    UpdateUserRequest,
    UserPayload,
)
from user_directory_client.application.ports.users_api_port import UsersApiError
from user_directory_client.domain.users import UserRecord

_USERS_PATH = "/api/Users"
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsersHttpResponse:
    """Normalized HTTP response data returned by transport implementations."""

    status_code: int
    body_bytes: bytes


class UsersHttpTransportPort(Protocol):
    """Transport protocol used by the user-directory HTTP adapter."""

    async def request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> UsersHttpResponse:
        """Execute one HTTP request and return normalized response data."""


class UrllibUsersHttpTransport:
    """urllib-based async transport implementation for user-directory calls."""

    async def request(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> UsersHttpResponse:
        """Execute HTTP request in a worker thread and normalize HTTP errors."""

        return await asyncio.to_thread(
            self._request_sync,
            method=method,
            url=url,
            headers=headers,
            body=body,
            timeout_seconds=timeout_seconds,
        )

    def _request_sync(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        timeout_seconds: float,
    ) -> UsersHttpResponse:
        request = Request(url=url, data=body, headers=headers, method=method)
        try:
            with urlopen(request, timeout=timeout_seconds) as response:
                return UsersHttpResponse(
                    status_code=int(response.getcode()),
                    body_bytes=response.read(),
                )
        except HTTPError as error:
            return UsersHttpResponse(status_code=int(error.code), body_bytes=error.read())
        except URLError as error:
            raise UsersApiError(
                f"transport connection failure: {error}",
                operation="request",
            ) from error


class UsersHttpClient:
    """User-directory REST adapter implementing list/create/update/login."""

    def __init__(
        self,
        *,
        base_url: str,
        transport: UsersHttpTransportPort | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._transport = transport or UrllibUsersHttpTransport()
        self._timeout_seconds = timeout_seconds

    async def list_users(self) -> list[UserRecord]:
        """Fetch the full directory."""

        decoded = await self._request_json(
            operation="list_users",
            method="GET",
            path=_USERS_PATH,
            payload=None,
            accepted_statuses={200},
        )
        try:
            rows = USER_ROWS_ADAPTER.validate_python(decoded)
        except PydanticValidationError as error:
            raise UsersApiError(
                "list_users returned invalid user payload",
                operation="list_users",
            ) from error

        records: list[UserRecord] = []
        for index, row in enumerate(rows):
            try:
                records.append(UserPayload.model_validate(row).to_record())
            except PydanticValidationError as error:
                logger.warning(
                    "list_users_row_skipped index=%s id=%s error_count=%s",
                    index,
                    row.get("_id", row.get("id")),
                    error.error_count(),
                )
        return records

    async def create_user(self, *, draft: UserRecord) -> UserRecord:
        """Create one user and return the persisted record."""

        decoded = await self._request_json(
            operation="create_user",
            method="POST",
            path=_USERS_PATH,
            payload=CreateUserRequest.from_record(draft),
            accepted_statuses={200, 201},
        )
        return _parse_user(decoded, operation="create_user")

    async def update_user(self, *, user_id: str, draft: UserRecord) -> UserRecord:
        """Update one user by id and return the service's view of it."""

        decoded = await self._request_json(
            operation="update_user",
            method="PUT",
            path=f"{_USERS_PATH}/{quote(user_id, safe='')}",
            payload=UpdateUserRequest.from_record(draft),
            accepted_statuses={200},
        )
        return _parse_user(decoded, operation="update_user")

    async def login(self, *, email: str, password: str) -> UserRecord:
        """Exchange credentials for the authenticated user's record."""

        decoded = await self._request_json(
            operation="login",
            method="POST",
            path=f"{_USERS_PATH}/login",
            payload=LoginRequest(email=email, password=password),
            accepted_statuses={200},
        )
        return _parse_user(decoded, operation="login")

    async def _request_json(
        self,
        *,
        operation: str,
        method: str,
        path: str,
        payload: BaseModel | None,
        accepted_statuses: Collection[int],
    ) -> object:
        body = (
            json.dumps(payload.model_dump(exclude_none=True), ensure_ascii=False).encode("utf-8")
            if payload is not None
            else None
        )
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"

        url = f"{self._base_url}{path}"
        try:
            response = await self._transport.request(
                method=method,
                url=url,
                headers=headers,
                body=body,
                timeout_seconds=self._timeout_seconds,
            )
        except Exception as error:  # noqa: BLE001
            raise UsersApiError(f"{operation} transport failure", operation=operation) from error

        if response.status_code not in accepted_statuses:
            details = _decode_error_payload(response.body_bytes)
            logger.debug(
                "users_api_rejected operation=%s status=%s details=%s",
                operation,
                response.status_code,
                details,
            )
            raise UsersApiError(
                f"{operation} failed with status {response.status_code}: {details}",
                operation=operation,
                status_code=response.status_code,
            )

        try:
            return json.loads(response.body_bytes.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as error:
            raise UsersApiError(
                f"{operation} returned invalid JSON payload",
                operation=operation,
                status_code=response.status_code,
            ) from error


def _parse_user(decoded: object, *, operation: str) -> UserRecord:
    try:
        return UserPayload.model_validate(decoded).to_record()
    except PydanticValidationError as error:
        raise UsersApiError(
            f"{operation} returned invalid user payload",
            operation=operation,
        ) from error


def _decode_error_payload(payload: bytes) -> str:
    if not payload:
        return "empty response body"
    try:
        decoded = payload.decode("utf-8")
    except UnicodeDecodeError:
        return "<binary>"
    return decoded[:200]
