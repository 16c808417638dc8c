# main.py
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Ensure repo-root .env is loaded for the running server process.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from jobboard.config import Settings, build_sqlalchemy_db_url, get_settings
from jobboard.database import Base, engine
from jobboard.db.documents import DocumentGateway
from jobboard.models import DocumentRecord  # noqa: F401  # registers the documents table
from jobboard.api.routes.health import router as health_router
from jobboard.routers import forms, session, ui
from jobboard.services.context import build_app_context
from jobboard.services.identity_provider import IdentityProvider


def create_app(
    settings: Settings | None = None,
    *,
    gateway: DocumentGateway | None = None,
    identity_provider: IdentityProvider | None = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        context = build_app_context(settings, gateway=gateway, identity_provider=identity_provider)
        app.state.context = context
        # A failed start leaves the context degraded; the app still serves its UI state.
        await context.controller.start(settings.initial_auth_token)
        try:
            yield
        finally:
            await context.controller.stop()

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Form-Error"],
    )

    application.include_router(health_router)
    application.include_router(session.router, prefix="/session", tags=["session"])
    application.include_router(forms.router, prefix="/forms", tags=["forms"])
    application.include_router(ui.router, prefix="/ui", tags=["ui"])

    # For local/test sqlite usage, auto-create the documents table.
    if build_sqlalchemy_db_url(settings).startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
