import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

import httpx

from todoapp.client.errors import BackendError
from todoapp.client.http import send

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
INITIAL_SESSION = "INITIAL_SESSION"


@dataclass
class AuthUser:
    id: str
    email: str


@dataclass
class Session:
    access_token: str
    user: Optional[AuthUser] = None
    expires_at: Optional[datetime] = None


AuthStateHandler = Callable[[str, Optional[Session]], Awaitable[None]]


class Subscription:
    def __init__(self, handlers: list, handler: AuthStateHandler):
        self._handlers = handlers
        self._handler = handler

    @property
    def active(self) -> bool:
        return self._handler in self._handlers

    def unsubscribe(self) -> None:
        if self._handler in self._handlers:
            self._handlers.remove(self._handler)


class AuthClient:
    """Holds the current session and tells subscribers when it changes."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http
        self._session: Optional[Session] = None
        self._handlers: list[AuthStateHandler] = []

    @property
    def access_token(self) -> Optional[str]:
        return self._session.access_token if self._session else None

    def on_auth_state_change(self, handler: AuthStateHandler) -> Subscription:
        self._handlers.append(handler)
        return Subscription(self._handlers, handler)

    async def _emit(self, event: str, session: Optional[Session]) -> None:
        for handler in list(self._handlers):
            await handler(event, session)

    def set_session(self, access_token: str) -> None:
        """Adopt a token obtained elsewhere (e.g. a browser cookie). Checked on get_session()."""
        self._session = Session(access_token=access_token)

    async def sign_up(self, email: str, password: str) -> AuthUser:
        data = await send(self._http, "POST", "/auth/register", json={"email": email, "password": password})
        return AuthUser(id=data["id"], email=data["email"])

    async def sign_in(self, email: str, password: str) -> Session:
        data = await send(self._http, "POST", "/auth/login", json={"email": email, "password": password})
        session = Session(
            access_token=data["token"],
            user=AuthUser(id=data["user"]["id"], email=data["user"]["email"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )
        self._session = session
        await self._emit(SIGNED_IN, session)
        return session

    async def get_session(self) -> Optional[Session]:
        """Return the current session if the backend still accepts its token, else None."""
        if self._session is None:
            return None
        try:
            data = await send(self._http, "GET", "/auth/session", token=self._session.access_token)
        except BackendError as exc:
            if exc.status_code != 401:
                raise
            logger.info("stored session rejected: %s", exc.message)
            self._session = None
            return None
        self._session.user = AuthUser(id=data["id"], email=data["email"])
        return self._session

    async def sign_out(self) -> None:
        session = self._session
        try:
            if session is not None:
                await send(self._http, "POST", "/auth/logout", token=session.access_token)
        except BackendError as exc:
            # the local session goes away regardless; the token just expires on its own
            logger.warning("remote sign-out failed: %s", exc.message)
        finally:
            self._session = None
        await self._emit(SIGNED_OUT, None)
