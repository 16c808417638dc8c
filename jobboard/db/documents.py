"""Document store gateway.

Documents live at slash-separated paths: a collection path followed by the
document id. Each document is a JSON mapping persisted in the ``documents``
table. Point reads, replace/merge writes, appends with generated ids and live
per-document subscriptions are supported.

Blocking SQLAlchemy work runs in the threadpool; subscribers are always
notified back on the event loop, after the write has been committed.
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from copy import deepcopy
from typing import Any, Callable, Mapping

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from jobboard.errors import SubscriptionFailure, WriteFailure
from jobboard.models.document import DocumentRecord


logger = logging.getLogger(__name__)

Document = dict[str, Any]
ChangeCallback = Callable[[Document | None], None]
ErrorCallback = Callable[[Exception], None]


class DocumentStoreError(WriteFailure):
    pass


def split_document_path(path: str) -> tuple[str, str]:
    collection_path, sep, document_id = (path or "").strip("/").rpartition("/")
    if not sep or not collection_path or not document_id:
        raise ValueError(f"not a document path: {path!r}")
    return collection_path, document_id


def deep_merge(base: Mapping[str, Any] | None, updates: Mapping[str, Any]) -> Document:
    """Merge ``updates`` into a copy of ``base``; nested mappings merge key by key."""
    merged: Document = deepcopy(dict(base or {}))
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


class SubscriptionHandle:
    def __init__(
        self,
        path: str,
        on_change: ChangeCallback,
        on_error: ErrorCallback,
        release: Callable[["SubscriptionHandle"], None],
    ) -> None:
        self.path = path
        self._on_change = on_change
        self._on_error = on_error
        self._release = release
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def deliver(self, document: Document | None) -> None:
        if not self._active:
            return
        try:
            self._on_change(deepcopy(document) if document is not None else None)
        except Exception as exc:  # noqa: BLE001 - a broken listener must not break the writer
            logger.exception("documents.listener_failed path=%s", self.path)
            self.fail(exc)

    def fail(self, exc: Exception) -> None:
        if not self._active:
            return
        # A failed subscription is dead, same as a remote listener after an error event.
        self.close()
        self._on_error(exc)

    def close(self) -> None:
        if not self._active:
            return
        self._active = False
        self._release(self)


class DocumentGateway(ABC):
    """Persistence interface the session and form layers are written against."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[SubscriptionHandle]] = {}

    @abstractmethod
    async def read_document(self, path: str) -> Document | None:
        """Return the document at ``path`` or None when it does not exist."""

    @abstractmethod
    async def write_document(self, path: str, data: Mapping[str, Any], merge: bool = False) -> None:
        """Replace the document, or merge into it (creating it when missing)."""

    @abstractmethod
    async def append_document(self, collection_path: str, data: Mapping[str, Any]) -> str:
        """Add a new document with a generated id and return that id."""

    async def subscribe_document(
        self,
        path: str,
        on_change: ChangeCallback,
        on_error: ErrorCallback,
    ) -> SubscriptionHandle:
        split_document_path(path)
        handle = SubscriptionHandle(path, on_change, on_error, self._release)
        self._listeners.setdefault(path, []).append(handle)
        try:
            snapshot = await self.read_document(path)
        except WriteFailure as exc:
            logger.error("documents.subscribe_failed path=%s error=%s", path, exc)
            handle.fail(SubscriptionFailure(str(exc)))
            return handle
        handle.deliver(snapshot)
        return handle

    def active_subscriptions(self, path: str | None = None) -> int:
        if path is not None:
            return len(self._listeners.get(path, ()))
        return sum(len(handles) for handles in self._listeners.values())

    def _release(self, handle: SubscriptionHandle) -> None:
        handles = self._listeners.get(handle.path)
        if not handles:
            return
        if handle in handles:
            handles.remove(handle)
        if not handles:
            self._listeners.pop(handle.path, None)

    def _notify(self, path: str, document: Document | None) -> None:
        for handle in list(self._listeners.get(path, ())):
            handle.deliver(document)


class SqlDocumentGateway(DocumentGateway):
    def __init__(self, session_factory: sessionmaker) -> None:
        super().__init__()
        self._session_factory = session_factory

    async def read_document(self, path: str) -> Document | None:
        return await run_in_threadpool(self._read, path)

    async def write_document(self, path: str, data: Mapping[str, Any], merge: bool = False) -> None:
        document = await run_in_threadpool(self._write, path, dict(data), merge)
        logger.debug("documents.write path=%s merge=%s", path, merge)
        self._notify(path, document)

    async def append_document(self, collection_path: str, data: Mapping[str, Any]) -> str:
        document_id = uuid.uuid4().hex
        path = f"{collection_path.strip('/')}/{document_id}"
        document = await run_in_threadpool(self._write, path, dict(data), False)
        logger.debug("documents.append path=%s", path)
        self._notify(path, document)
        return document_id

    def _find(self, db: Session, path: str) -> DocumentRecord | None:
        collection_path, document_id = split_document_path(path)
        return (
            db.query(DocumentRecord)
            .filter(DocumentRecord.collection_path == collection_path)
            .filter(DocumentRecord.document_id == document_id)
            .one_or_none()
        )

    def _read(self, path: str) -> Document | None:
        try:
            with self._session_factory() as db:
                record = self._find(db, path)
                return deepcopy(record.data) if record is not None else None
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"read failed for {path}: {exc}") from exc

    def _write(self, path: str, data: Document, merge: bool) -> Document:
        collection_path, document_id = split_document_path(path)
        try:
            with self._session_factory() as db:
                try:
                    record = self._find(db, path)
                    if record is None:
                        record = DocumentRecord(collection_path=collection_path, document_id=document_id, data=deepcopy(data))
                        db.add(record)
                    elif merge:
                        record.data = deep_merge(record.data, data)
                    else:
                        record.data = deepcopy(data)
                    db.commit()
                    db.refresh(record)
                    return deepcopy(record.data)
                except SQLAlchemyError:
                    db.rollback()
                    raise
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"write failed for {path}: {exc}") from exc
