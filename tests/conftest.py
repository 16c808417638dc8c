from __future__ import annotations

import os
from typing import Any, Mapping

import pytest
from fastapi.testclient import TestClient


def pytest_configure() -> None:
    # Point the module-level engine at a throwaway sqlite file and pin the token secret.
    os.environ["ORM_DB_URL"] = "sqlite:///./test.db"
    os.environ["ENVIRONMENT"] = "test"
    os.environ["JWT_SECRET"] = "test-secret"
    os.environ.pop("INITIAL_AUTH_TOKEN", None)


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def settings():
    from jobboard.config import get_settings

    return get_settings()


@pytest.fixture()
def session_factory():
    from sqlalchemy.orm import sessionmaker

    from jobboard.database import Base, build_engine
    import jobboard.models  # noqa: F401

    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)
    engine.dispose()


def make_recording_gateway(
    session_factory,
    *,
    fail_appends: bool = False,
    fail_reads: bool = False,
    fail_writes: bool = False,
):
    from jobboard.db.documents import DocumentStoreError, SqlDocumentGateway

    class RecordingGateway(SqlDocumentGateway):
        def __init__(self) -> None:
            super().__init__(session_factory)
            self.writes: list[tuple[str, dict[str, Any], bool]] = []
            self.appends: list[tuple[str, dict[str, Any]]] = []

        async def read_document(self, path: str):
            if fail_reads:
                raise DocumentStoreError(f"read failed for {path}: unreachable")
            return await super().read_document(path)

        async def write_document(self, path: str, data: Mapping[str, Any], merge: bool = False) -> None:
            self.writes.append((path, dict(data), merge))
            if fail_writes:
                raise DocumentStoreError(f"write failed for {path}: connection reset")
            await super().write_document(path, data, merge)

        async def append_document(self, collection_path: str, data: Mapping[str, Any]) -> str:
            self.appends.append((collection_path, dict(data)))
            if fail_appends:
                raise DocumentStoreError(f"write failed for {collection_path}: quota exceeded")
            return await super().append_document(collection_path, data)

        @property
        def write_count(self) -> int:
            return len(self.writes) + len(self.appends)

    return RecordingGateway()


@pytest.fixture()
def gateway(session_factory):
    return make_recording_gateway(session_factory)


@pytest.fixture()
def identity_provider(settings):
    from jobboard.services.identity_provider import LocalIdentityProvider

    counter = iter(range(1, 1000))
    return LocalIdentityProvider(settings, uid_factory=lambda: f"anon-{next(counter)}")


@pytest.fixture()
def context(settings, gateway, identity_provider):
    from jobboard.services.context import build_app_context

    return build_app_context(settings, gateway=gateway, identity_provider=identity_provider)


def documents_in(session_factory, collection_path: str) -> list[dict[str, Any]]:
    from jobboard.models.document import DocumentRecord

    with session_factory() as db:
        rows = db.query(DocumentRecord).filter(DocumentRecord.collection_path == collection_path).all()
        return [dict(row.data) for row in rows]


@pytest.fixture()
def client(gateway, identity_provider) -> Any:
    from jobboard.main import create_app

    app = create_app(gateway=gateway, identity_provider=identity_provider)
    with TestClient(app) as c:
        yield c
