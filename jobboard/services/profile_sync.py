from __future__ import annotations

import logging
from functools import partial

from pydantic import ValidationError

from jobboard.config import Settings
from jobboard.db.documents import Document, DocumentGateway, SubscriptionHandle
from jobboard.schemas.profile import UserProfile
from jobboard.services.paths import profile_document_path
from jobboard.services.session_store import SessionStore


logger = logging.getLogger(__name__)


class ProfileSynchronizer:
    """Keeps the cached profile in the store in step with the profile document.

    Holds at most one live subscription. Callbacks carry the identity and the
    generation they were opened for; anything delivered for a superseded
    subscription, or for an identity that is no longer the session's, is
    dropped.
    """

    def __init__(self, gateway: DocumentGateway, store: SessionStore, settings: Settings) -> None:
        self._gateway = gateway
        self._store = store
        self._settings = settings
        self._handle: SubscriptionHandle | None = None
        self._identity: str | None = None
        self._generation = 0

    @property
    def identity(self) -> str | None:
        return self._identity

    @property
    def is_subscribed(self) -> bool:
        return self._handle is not None and self._handle.active

    async def subscribe(self, identity: str) -> None:
        await self.unsubscribe()
        self._generation += 1
        generation = self._generation
        self._identity = identity
        path = profile_document_path(self._settings, identity)
        handle = await self._gateway.subscribe_document(
            path,
            on_change=partial(self._on_change, identity, generation),
            on_error=partial(self._on_error, identity, generation),
        )
        if generation != self._generation:
            # Another subscribe/unsubscribe ran while this one was opening.
            handle.close()
            return
        if not handle.active:
            # Failed while opening; the error callback already cleared the profile.
            return
        self._handle = handle
        logger.info("profile_sync.subscribed identity=%s", identity)

    async def unsubscribe(self) -> None:
        self._generation += 1
        handle, self._handle = self._handle, None
        self._identity = None
        if handle is not None:
            handle.close()
            logger.info("profile_sync.unsubscribed path=%s", handle.path)

    def _is_current(self, identity: str, generation: int) -> bool:
        return generation == self._generation and identity == self._store.state.identity

    def _on_change(self, identity: str, generation: int, document: Document | None) -> None:
        if not self._is_current(identity, generation):
            logger.debug("profile_sync.stale_notification identity=%s generation=%s", identity, generation)
            return
        if document is None:
            logger.info("profile_sync.no_profile identity=%s", identity)
            self._store.update(profile=None)
            return
        try:
            profile = UserProfile.model_validate(document)
        except ValidationError as exc:
            logger.error("profile_sync.invalid_profile identity=%s error=%s", identity, exc)
            self._store.update(profile=None)
            return
        self._store.update(profile=profile)

    def _on_error(self, identity: str, generation: int, exc: Exception) -> None:
        if not self._is_current(identity, generation):
            logger.debug("profile_sync.stale_error identity=%s error=%s", identity, exc)
            return
        logger.error("profile_sync.subscription_error identity=%s error=%s", identity, exc)
        self._handle = None
        self._store.update(profile=None)
