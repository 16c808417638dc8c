from __future__ import annotations

import logging
from typing import Callable

from jobboard.errors import AuthOperationFailure, JobBoardError
from jobboard.schemas.profile import UserProfile
from jobboard.services.identity_provider import IdentityProvider, Session
from jobboard.services.presenter import UIPresenter
from jobboard.services.profile_sync import ProfileSynchronizer
from jobboard.services.session_store import SessionState, SessionStore


logger = logging.getLogger(__name__)

FATAL_BACKEND_MESSAGE = "FATAL: Could not connect to the backend services."


class SessionController:
    """Owns the current identity and drives profile sync from provider events."""

    def __init__(
        self,
        provider: IdentityProvider,
        synchronizer: ProfileSynchronizer,
        store: SessionStore,
        presenter: UIPresenter,
    ) -> None:
        self._provider = provider
        self._synchronizer = synchronizer
        self._store = store
        self._presenter = presenter
        self._stop_listening: Callable[[], None] | None = None

    @property
    def state(self) -> SessionState:
        return self._store.state

    async def start(self, initial_token: str | None = None) -> bool:
        """Acquire the first session and follow provider changes from then on.

        Returns False when the backend could not be reached; the controller then
        stays degraded for the rest of the process and never retries.
        """
        if self._stop_listening is not None:
            return True
        if self._store.state.degraded:
            return False
        try:
            if initial_token:
                await self._provider.start_session_with_token(initial_token)
            else:
                await self._provider.start_anonymous_session()
            self._stop_listening = await self._provider.on_session_change(self._handle_session_change)
        except JobBoardError:
            logger.exception("session.initialization_failed")
            await self._synchronizer.unsubscribe()
            self._store.update(identity=None, status="unauthenticated", profile=None, degraded=True)
            self._presenter.show_message(FATAL_BACKEND_MESSAGE, is_error=True)
            return False
        logger.info("session.started identity=%s", self._store.state.identity)
        return True

    async def stop(self) -> None:
        if self._stop_listening is not None:
            self._stop_listening()
            self._stop_listening = None
        await self._synchronizer.unsubscribe()

    async def sign_out(self) -> bool:
        if self._store.state.degraded:
            self._presenter.show_message(FATAL_BACKEND_MESSAGE, is_error=True)
            return False
        try:
            await self._provider.sign_out()
        except AuthOperationFailure:
            # State is left alone; the next provider notification decides it.
            logger.exception("session.sign_out_failed identity=%s", self._store.state.identity)
            self._presenter.show_message("Logout failed. Please try again.", is_error=True)
            return False
        self._presenter.show_message("You have been successfully logged out.", is_error=False)
        self._presenter.show_page(self._presenter.landing_page)
        return True

    def cache_profile(self, identity: str, profile: UserProfile) -> bool:
        """Store a profile read for ``identity``; ignored once the session has moved on."""
        if identity != self._store.state.identity:
            logger.info("session.stale_profile_dropped identity=%s current=%s", identity, self._store.state.identity)
            return False
        self._store.update(profile=profile)
        return True

    async def _handle_session_change(self, session: Session | None) -> None:
        if session is None:
            logger.info("session.signed_out identity=%s", self._store.state.identity)
            await self._synchronizer.unsubscribe()
            self._store.update(identity=None, status="unauthenticated", profile=None)
            return

        previous = self._store.state
        keep_profile = previous.identity == session.uid
        self._store.update(
            identity=session.uid,
            status="authenticated",
            profile=previous.profile if keep_profile else None,
        )
        logger.info("session.authenticated identity=%s anonymous=%s", session.uid, session.is_anonymous)
        await self._synchronizer.subscribe(session.uid)
