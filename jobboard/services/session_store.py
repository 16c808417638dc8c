"""Single-threaded reactive store for the session/profile state.

State is an immutable snapshot; every update swaps the snapshot and calls the
subscribers synchronously, in the order they subscribed. The session
controller and the profile synchronizer write to the store, everything else
only reads ``state`` or subscribes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Literal

from jobboard.schemas.profile import UserProfile


logger = logging.getLogger(__name__)

SessionStatus = Literal["unauthenticated", "authenticated"]
SessionPhase = Literal["unauthenticated", "authenticated", "authenticated_with_profile"]
StateListener = Callable[["SessionState"], None]


@dataclass(frozen=True)
class SessionState:
    identity: str | None = None
    status: SessionStatus = "unauthenticated"
    profile: UserProfile | None = None
    degraded: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.status == "authenticated"

    @property
    def phase(self) -> SessionPhase:
        if not self.is_authenticated:
            return "unauthenticated"
        if self.profile is None:
            return "authenticated"
        return "authenticated_with_profile"


class SessionStore:
    def __init__(self, initial: SessionState | None = None) -> None:
        self._state = initial or SessionState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> SessionState:
        self._state = replace(self._state, **changes)
        logger.debug("session_store.update phase=%s identity=%s", self._state.phase, self._state.identity)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state
