"""Session gate: unauthenticated to authenticated, holding the current principal."""

from __future__ import annotations

import logging

from user_directory_client.application.ports.users_api_port import UsersApiError, UsersApiPort
from user_directory_client.application.services.client_state_store import ClientStateStore
from user_directory_client.domain.client_state import LoggedIn, LoggedOut, Session
from user_directory_client.domain.errors import AuthError
from user_directory_client.domain.users import UserRecord

logger = logging.getLogger(__name__)


class SessionGate:
    """Authenticate the operator and expose the resulting session."""

    def __init__(self, *, users_api: UsersApiPort, store: ClientStateStore) -> None:
        self._users_api = users_api
        self._store = store

    @property
    def session(self) -> Session:
        return self._store.state.session

    @property
    def is_authenticated(self) -> bool:
        return self.session.authenticated

    @property
    def principal(self) -> UserRecord | None:
        return self.session.principal

    async def login(self, *, email: str, password: str) -> Session:
        """Log in with credentials; raise AuthError and keep the session on failure."""

        if not email.strip() or not password:
            raise AuthError("Please enter your email and password.")

        try:
            principal = await self._users_api.login(email=email.strip(), password=password)
        except UsersApiError as error:
            logger.warning(
                "login_failed email=%s status=%s error=%s",
                email,
                error.status_code,
                error,
            )
            raise AuthError() from error

        self._store.dispatch(LoggedIn(principal=principal))
        logger.info("login_success email=%s user_id=%s", principal.email, principal.id)
        return self.session

    def logout(self) -> Session:
        """Reset session, directory and edit target to their initial state."""

        self._store.dispatch(LoggedOut())
        logger.info("logout")
        return self.session
