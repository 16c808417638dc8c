from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable

from jobboard.config import Settings
from jobboard.errors import AuthOperationFailure, InitializationFailure, JobBoardError
from jobboard.utils.jwt_handler import identity_from_token


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    uid: str
    is_anonymous: bool


SessionListener = Callable[[Session | None], Awaitable[None]]


class IdentityProvider(ABC):
    """Issues sessions and broadcasts every session change to its listeners.

    ``on_session_change`` calls the new listener once with the current session
    before returning, then again after every change.
    """

    def __init__(self) -> None:
        self._current: Session | None = None
        self._listeners: list[SessionListener] = []

    @abstractmethod
    async def start_anonymous_session(self) -> Session:
        ...

    @abstractmethod
    async def start_session_with_token(self, token: str) -> Session:
        ...

    async def sign_out(self) -> None:
        await self._set_session(None)

    async def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)
        await listener(self._current)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def _set_session(self, session: Session | None) -> None:
        self._current = session
        for listener in list(self._listeners):
            await listener(session)


class LocalIdentityProvider(IdentityProvider):
    """Identity provider backed by this process.

    Anonymous sessions get a random uid; custom tokens are HS256 JWTs signed
    with ``JWT_SECRET`` whose ``sub`` (or ``uid``) claim is the identity.
    Anything unexpected raised while starting a session surfaces as
    ``InitializationFailure``, and while signing out as ``AuthOperationFailure``.
    """

    def __init__(self, settings: Settings, uid_factory: Callable[[], str] | None = None) -> None:
        super().__init__()
        self._settings = settings
        self._uid_factory = uid_factory or (lambda: uuid.uuid4().hex)

    async def start_anonymous_session(self) -> Session:
        try:
            session = Session(uid=self._uid_factory(), is_anonymous=True)
            logger.info("identity.anonymous_session uid=%s", session.uid)
            await self._set_session(session)
        except JobBoardError:
            raise
        except Exception as exc:
            raise InitializationFailure(f"anonymous session failed: {exc}") from exc
        return session

    async def start_session_with_token(self, token: str) -> Session:
        if not token:
            raise AuthOperationFailure("Missing token")
        if not self._settings.jwt_secret:
            raise InitializationFailure("JWT_SECRET is not configured; custom tokens cannot be verified")
        try:
            session = Session(uid=identity_from_token(token, self._settings), is_anonymous=False)
            logger.info("identity.token_session uid=%s", session.uid)
            await self._set_session(session)
        except JobBoardError:
            raise
        except Exception as exc:
            raise InitializationFailure(f"token session failed: {exc}") from exc
        return session

    async def sign_out(self) -> None:
        previous = self._current.uid if self._current else None
        try:
            await super().sign_out()
        except JobBoardError:
            raise
        except Exception as exc:
            raise AuthOperationFailure(f"sign out failed: {exc}") from exc
        logger.info("identity.sign_out uid=%s", previous)
