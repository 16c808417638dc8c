from __future__ import annotations

from dataclasses import dataclass

from jobboard.config import Settings
from jobboard.database import SessionLocal
from jobboard.db.documents import DocumentGateway, SqlDocumentGateway
from jobboard.services.identity_provider import IdentityProvider, LocalIdentityProvider
from jobboard.services.intake_service import FormIntakeService
from jobboard.services.presenter import UIPresenter
from jobboard.services.profile_sync import ProfileSynchronizer
from jobboard.services.session_controller import SessionController
from jobboard.services.session_store import SessionStore


@dataclass
class AppContext:
    settings: Settings
    gateway: DocumentGateway
    identity_provider: IdentityProvider
    store: SessionStore
    presenter: UIPresenter
    synchronizer: ProfileSynchronizer
    controller: SessionController
    intake: FormIntakeService


def build_app_context(
    settings: Settings,
    *,
    gateway: DocumentGateway | None = None,
    identity_provider: IdentityProvider | None = None,
) -> AppContext:
    gateway = gateway or SqlDocumentGateway(SessionLocal)
    identity_provider = identity_provider or LocalIdentityProvider(settings)
    store = SessionStore()
    presenter = UIPresenter(
        landing_page=settings.landing_page,
        auth_page=settings.auth_page,
        message_ttl_seconds=settings.message_ttl_seconds,
    )
    # Every state transition re-renders the navigation.
    store.subscribe(presenter.render)
    synchronizer = ProfileSynchronizer(gateway, store, settings)
    controller = SessionController(identity_provider, synchronizer, store, presenter)
    intake = FormIntakeService(gateway, controller, presenter, settings)
    return AppContext(
        settings=settings,
        gateway=gateway,
        identity_provider=identity_provider,
        store=store,
        presenter=presenter,
        synchronizer=synchronizer,
        controller=controller,
        intake=intake,
    )
