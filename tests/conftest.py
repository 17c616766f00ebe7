"""Pytest fixtures for DemandFlow tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from demandflow.application.dto.audit_record import AuditRecord
from demandflow.application.services.approval_state_machine import ApprovalStateMachine
from demandflow.application.services.version_store import VersionStore
from demandflow.application.use_cases.document_coordinator import DocumentCoordinator
from demandflow.domain.entities import Document, TransitionEvent, VersionSnapshot
from demandflow.domain.exceptions import ConflictError
from demandflow.domain.value_objects import Actor, ActorRole, LetterState, TransitionEventType


# --- Shared in-memory database ---


class FakeStore:
    """Committed state shared by all units of work of one test.

    ``fail_updates`` makes the next N document updates raise ConflictError,
    as a stale ``lock_version`` would in PostgreSQL.
    """

    def __init__(self) -> None:
        self.documents: dict[UUID, Document] = {}
        self.versions: dict[UUID, dict[int, VersionSnapshot]] = {}
        self.transitions: list[TransitionEvent] = []
        self.commits = 0
        self.rollbacks = 0
        self.fail_updates = 0
        self._locks: dict[UUID, asyncio.Lock] = {}

    def lock_for(self, document_id: UUID) -> asyncio.Lock:
        return self._locks.setdefault(document_id, asyncio.Lock())

    def snapshots(self, document_id: UUID) -> list[int]:
        """Stored version numbers, ascending."""
        return sorted(self.versions.get(document_id, {}))


# --- Fake repositories ---


class FakeDocumentRepository:
    """In-memory document repository with row locks and optimistic checks."""

    def __init__(self, store: FakeStore, uow: FakeUnitOfWork) -> None:
        self._store = store
        self._uow = uow

    async def get_by_id(self, document_id: UUID) -> Document | None:
        doc = self._store.documents.get(document_id)
        return replace(doc) if doc else None

    async def get_for_update(self, document_id: UUID) -> Document | None:
        lock = self._store.lock_for(document_id)
        await lock.acquire()
        self._uow.held_locks.append(lock)
        # Let concurrent callers reach the lock before this one proceeds.
        await asyncio.sleep(0)
        return await self.get_by_id(document_id)

    async def create(self, document: Document) -> Document:
        self._store.documents[document.id] = replace(document)
        self._uow.journal.append(lambda: self._store.documents.pop(document.id, None))
        return document

    async def update(self, document: Document) -> Document:
        if self._store.fail_updates > 0:
            self._store.fail_updates -= 1
            raise ConflictError(f"Document {document.id} was modified concurrently")
        stored = self._store.documents.get(document.id)
        if stored is None or stored.lock_version != document.lock_version:
            raise ConflictError(f"Document {document.id} was modified concurrently")
        document.lock_version += 1
        self._store.documents[document.id] = replace(document)
        self._uow.journal.append(
            lambda: self._store.documents.__setitem__(document.id, stored)
        )
        return document

    async def delete(self, document_id: UUID) -> None:
        doc = self._store.documents.pop(document_id, None)
        versions = self._store.versions.pop(document_id, None)
        kept = [e for e in self._store.transitions if e.document_id != document_id]
        before = self._store.transitions
        self._store.transitions = kept

        def restore() -> None:
            if doc is not None:
                self._store.documents[document_id] = doc
            if versions is not None:
                self._store.versions[document_id] = versions
            self._store.transitions = before

        self._uow.journal.append(restore)


class FakeVersionRepository:
    """In-memory snapshot repository keyed by (document, version)."""

    def __init__(self, store: FakeStore, uow: FakeUnitOfWork) -> None:
        self._store = store
        self._uow = uow

    async def get(self, document_id: UUID, version_number: int) -> VersionSnapshot | None:
        return self._store.versions.get(document_id, {}).get(version_number)

    async def list_by_document(self, document_id: UUID) -> list[VersionSnapshot]:
        by_number = self._store.versions.get(document_id, {})
        return [by_number[n] for n in sorted(by_number, reverse=True)]

    async def latest_number(self, document_id: UUID) -> int:
        return max(self._store.versions.get(document_id, {}), default=0)

    async def create(self, snapshot: VersionSnapshot) -> VersionSnapshot:
        by_number = self._store.versions.setdefault(snapshot.document_id, {})
        if snapshot.version_number in by_number:
            raise ConflictError(
                f"Version {snapshot.version_number} of {snapshot.document_id} already exists"
            )
        by_number[snapshot.version_number] = snapshot
        self._uow.journal.append(lambda: by_number.pop(snapshot.version_number, None))
        return snapshot

    async def delete_after(self, document_id: UUID, version_number: int) -> int:
        by_number = self._store.versions.get(document_id, {})
        dropped = {n: s for n, s in by_number.items() if n > version_number}
        for n in dropped:
            del by_number[n]
        self._uow.journal.append(lambda: by_number.update(dropped))
        return len(dropped)


class FakeTransitionRepository:
    """In-memory append-only event log."""

    def __init__(self, store: FakeStore, uow: FakeUnitOfWork) -> None:
        self._store = store
        self._uow = uow

    async def append(self, event: TransitionEvent) -> TransitionEvent:
        self._store.transitions.append(event)
        self._uow.journal.append(lambda: self._store.transitions.remove(event))
        return event

    async def list_by_document(self, document_id: UUID) -> list[TransitionEvent]:
        events = [e for e in self._store.transitions if e.document_id == document_id]
        return sorted(events, key=lambda e: e.created_at)

    async def latest(
        self, document_id: UUID, event_type: TransitionEventType
    ) -> TransitionEvent | None:
        events = await self.list_by_document(document_id)
        matching = [e for e in events if e.event_type == event_type]
        return matching[-1] if matching else None


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work; rollback replays the undo journal."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store
        self.journal: list[Callable[[], object]] = []
        self.held_locks: list[asyncio.Lock] = []
        self.documents = FakeDocumentRepository(store, self)
        self.versions = FakeVersionRepository(store, self)
        self.transitions = FakeTransitionRepository(store, self)

    async def commit(self) -> None:
        self.journal.clear()
        self._store.commits += 1

    async def rollback(self) -> None:
        while self.journal:
            self.journal.pop()()
        self._store.rollbacks += 1

    def release_locks(self) -> None:
        while self.held_locks:
            self.held_locks.pop().release()


def make_uow_factory(store: FakeStore):
    """Factory behaving like the PostgreSQL one: commit on success, else roll back."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        uow = FakeUnitOfWork(store)
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise
        finally:
            uow.release_locks()

    return _factory


class RecordingAuditSink:
    """Audit sink that keeps published records."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    async def publish(self, record: AuditRecord) -> None:
        self.records.append(record)

    def kinds(self) -> list[str]:
        return [r.kind for r in self.records]


class FailingAuditSink:
    """Audit sink whose delivery always fails."""

    async def publish(self, record: AuditRecord) -> None:
        raise RuntimeError("audit backend unavailable")


# --- Helpers ---


def seed_document(
    store: FakeStore,
    content: str = "Dear debtor,\nPlease pay.",
    compliance_score: float = 85.0,
    state: LetterState = LetterState.DRAFT,
    *,
    with_snapshot: bool = True,
) -> Document:
    """Insert a committed letter at version 1, optionally without its snapshot."""
    now = datetime.now(UTC)
    document = Document(
        id=uuid4(),
        state=state,
        current_version=1,
        content=content,
        compliance_score=compliance_score,
        created_at=now,
        updated_at=now,
        created_by="author-1",
    )
    store.documents[document.id] = replace(document)
    if with_snapshot:
        store.versions[document.id] = {
            1: VersionSnapshot(
                document_id=document.id,
                version_number=1,
                content=content,
                compliance_score=compliance_score,
                created_at=now,
                created_by="author-1",
            )
        }
    return document


def make_actor(role: ActorRole, actor_id: str | None = None) -> Actor:
    return Actor(
        actor_id=actor_id or f"{role.lower()}-1",
        role=role,
        ip_address="203.0.113.7",
        user_agent="pytest",
    )


# --- Fixtures ---


@pytest.fixture
def store() -> FakeStore:
    """Fresh in-memory database for each test."""
    return FakeStore()


@pytest.fixture
def uow_factory(store: FakeStore):
    """Factory returning async context manager with FakeUnitOfWork."""
    return make_uow_factory(store)


@pytest.fixture
def audit_sink() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture
def coordinator(uow_factory, audit_sink: RecordingAuditSink) -> DocumentCoordinator:
    """Coordinator wired to the fakes with default workflow settings."""
    return DocumentCoordinator(
        unit_of_work_factory=uow_factory,
        version_store=VersionStore(),
        state_machine=ApprovalStateMachine(),
        audit_sink=audit_sink,
    )


@pytest.fixture
def paralegal() -> Actor:
    return make_actor(ActorRole.PARALEGAL)


@pytest.fixture
def attorney() -> Actor:
    return make_actor(ActorRole.ATTORNEY)


@pytest.fixture
def debtor() -> Actor:
    return make_actor(ActorRole.DEBTOR)
