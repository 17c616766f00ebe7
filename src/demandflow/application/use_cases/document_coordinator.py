"""Document coordinator - the single entry point for letter operations.

Each mutating operation runs in one unit of work that first locks the
letter row, so captures, undo/redo and transitions on the same letter are
serialized and their snapshot/pointer or state/event writes commit together.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TypeVar
from uuid import UUID, uuid4

from demandflow.application.dto.audit_record import AuditRecord
from demandflow.application.dto.document_dto import DocumentCreateInput
from demandflow.application.dto.version_dto import (
    CaptureInput,
    DiffResult,
    VersionNavigation,
    VersionSummary,
)
from demandflow.application.dto.workflow_dto import TransitionResult, WorkflowHistory
from demandflow.application.ports import AuditSink, UnitOfWork, UnitOfWorkFactory
from demandflow.application.services.approval_state_machine import ApprovalStateMachine
from demandflow.application.services.version_store import VersionStore
from demandflow.domain.entities import Document, TransitionEvent, VersionSnapshot
from demandflow.domain.exceptions import ConflictError, NotFound, PermissionDenied
from demandflow.domain.value_objects import (
    Actor,
    Capability,
    ComplianceScore,
    LetterState,
    WorkflowAction,
)
from demandflow.domain.value_objects.actor_role import has_capability

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[UnitOfWork, Document], Awaitable[T]]


class DocumentCoordinator:
    """Serializes version and workflow operations per letter."""

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        version_store: VersionStore,
        state_machine: ApprovalStateMachine,
        audit_sink: AuditSink | None = None,
        *,
        conflict_retries: int = 1,
        timeout_seconds: float | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._versions = version_store
        self._workflow = state_machine
        self._audit = audit_sink
        self._conflict_retries = conflict_retries
        self._timeout = timeout_seconds

    # --- Document ---

    async def create_document(self, actor: Actor, data: DocumentCreateInput) -> Document:
        """Create a DRAFT letter with its content stored as version 1."""
        if not has_capability(actor.role, Capability.EDITOR):
            raise PermissionDenied(f"Role {actor.role} cannot create letters")
        score = ComplianceScore.parse(data.compliance_score).value
        now = datetime.now(UTC)
        document = Document(
            id=uuid4(),
            state=LetterState.DRAFT,
            current_version=1,
            content=data.content,
            compliance_score=score,
            created_at=now,
            updated_at=now,
            created_by=actor.actor_id,
        )
        async with self._bounded():
            async with self._uow_factory() as uow:
                await uow.documents.create(document)
                await self._versions.record(
                    uow, document.id, 1, document.content, score, created_by=actor.actor_id
                )
        logger.info("Letter %s created by %s", document.id, actor.actor_id)
        await self._publish(self._record("document_created", document.id, actor))
        return document

    async def get_document(self, document_id: UUID) -> Document:
        async with self._read() as uow:
            return await self._load(uow, document_id)

    async def delete_document(self, document_id: UUID, actor: Actor) -> None:
        """Delete a letter together with its snapshots and events."""
        if not has_capability(actor.role, Capability.APPROVER):
            raise PermissionDenied(f"Role {actor.role} cannot delete letters")

        async def operation(uow: UnitOfWork, document: Document) -> None:
            await uow.documents.delete(document.id)

        await self._mutate(document_id, operation)
        logger.info("Letter %s deleted by %s", document_id, actor.actor_id)
        await self._publish(self._record("document_deleted", document_id, actor))

    # --- Versions ---

    async def capture(
        self, document_id: UUID, data: CaptureInput, actor: Actor
    ) -> VersionNavigation:
        """Record new content (manual edit or refinement) as the next version."""
        data = CaptureInput(
            content=data.content,
            compliance_score=ComplianceScore.parse(data.compliance_score).value,
            origin_instruction=data.origin_instruction,
        )

        async def operation(uow: UnitOfWork, document: Document) -> VersionNavigation:
            return await self._versions.capture(uow, document, data, actor)

        result = await self._mutate(document_id, operation)
        logger.info(
            "Letter %s captured v%d by %s", document_id, result.current_version, actor.actor_id
        )
        await self._publish(
            self._record(
                "version_captured",
                document_id,
                actor,
                version_number=result.current_version,
                origin_instruction=data.origin_instruction,
                compliance_score=data.compliance_score,
            )
        )
        return result

    async def undo(self, document_id: UUID, actor: Actor) -> VersionNavigation:
        async def operation(uow: UnitOfWork, document: Document) -> VersionNavigation:
            return await self._versions.undo(uow, document, actor)

        result = await self._mutate(document_id, operation)
        await self._publish(
            self._record("version_undone", document_id, actor, version_number=result.current_version)
        )
        return result

    async def redo(self, document_id: UUID, actor: Actor) -> VersionNavigation:
        async def operation(uow: UnitOfWork, document: Document) -> VersionNavigation:
            return await self._versions.redo(uow, document, actor)

        result = await self._mutate(document_id, operation)
        await self._publish(
            self._record("version_redone", document_id, actor, version_number=result.current_version)
        )
        return result

    async def list_versions(self, document_id: UUID) -> list[VersionSummary]:
        async with self._read() as uow:
            document = await self._load(uow, document_id)
            return await self._versions.list_versions(uow, document)

    async def get_version(self, document_id: UUID, version_number: int) -> VersionSnapshot:
        async with self._read() as uow:
            await self._load(uow, document_id)
            return await self._versions.get_version(uow, document_id, version_number)

    async def diff_between(self, document_id: UUID, v1: int, v2: int) -> DiffResult:
        async with self._read() as uow:
            await self._load(uow, document_id)
            return await self._versions.diff_between(uow, document_id, v1, v2)

    # --- Workflow ---

    async def transition(
        self,
        document_id: UUID,
        action: WorkflowAction,
        actor: Actor,
        *,
        signature: str | None = None,
        reason: str | None = None,
    ) -> TransitionResult:
        """Apply a workflow action to the freshly locked letter."""

        async def operation(uow: UnitOfWork, document: Document) -> TransitionResult:
            return await self._workflow.apply(
                uow, document, action, actor, signature=signature, reason=reason
            )

        result = await self._mutate(document_id, operation)
        await self._publish(self._event_record(result.event))
        return result

    async def submit_for_review(self, document_id: UUID, actor: Actor) -> TransitionResult:
        return await self.transition(document_id, WorkflowAction.SUBMIT_FOR_REVIEW, actor)

    async def approve(
        self, document_id: UUID, actor: Actor, signature: str | None = None
    ) -> TransitionResult:
        return await self.transition(
            document_id, WorkflowAction.APPROVE, actor, signature=signature
        )

    async def reject(self, document_id: UUID, actor: Actor, reason: str | None) -> TransitionResult:
        return await self.transition(document_id, WorkflowAction.REJECT, actor, reason=reason)

    async def prepare_for_sending(self, document_id: UUID, actor: Actor) -> TransitionResult:
        return await self.transition(document_id, WorkflowAction.PREPARE_FOR_SENDING, actor)

    async def mark_as_sent(self, document_id: UUID, actor: Actor) -> TransitionResult:
        return await self.transition(document_id, WorkflowAction.MARK_AS_SENT, actor)

    async def get_history(self, document_id: UUID) -> WorkflowHistory:
        async with self._read() as uow:
            document = await self._load(uow, document_id)
            return await self._workflow.get_history(uow, document)

    async def get_latest_approval(self, document_id: UUID) -> TransitionEvent | None:
        async with self._read() as uow:
            await self._load(uow, document_id)
            return await self._workflow.get_latest_approval(uow, document_id)

    # --- Internals ---

    async def _mutate(self, document_id: UUID, operation: Operation[T]) -> T:
        """Run ``operation`` on the locked letter; retry on ConflictError."""
        attempt = 0
        while True:
            try:
                async with self._bounded():
                    async with self._uow_factory() as uow:
                        document = await uow.documents.get_for_update(document_id)
                        if document is None:
                            raise NotFound("Document", str(document_id))
                        return await operation(uow, document)
            except ConflictError:
                if attempt >= self._conflict_retries:
                    raise
                attempt += 1
                logger.warning(
                    "Conflict on letter %s, retrying (%d/%d)",
                    document_id,
                    attempt,
                    self._conflict_retries,
                )

    def _bounded(self):
        return asyncio.timeout(self._timeout)

    @asynccontextmanager
    async def _read(self) -> AsyncIterator[UnitOfWork]:
        """Unit of work for a read, under the same timeout as mutations."""
        async with self._bounded():
            async with self._uow_factory() as uow:
                yield uow

    @staticmethod
    async def _load(uow: UnitOfWork, document_id: UUID) -> Document:
        document = await uow.documents.get_by_id(document_id)
        if document is None:
            raise NotFound("Document", str(document_id))
        return document

    async def _publish(self, record: AuditRecord) -> None:
        if self._audit is None:
            return
        try:
            await self._audit.publish(record)
        except Exception:
            logger.exception("Audit delivery failed for %s on %s", record.kind, record.document_id)

    @staticmethod
    def _record(kind: str, document_id: UUID, actor: Actor, **details: object) -> AuditRecord:
        return AuditRecord(
            kind=kind,
            document_id=document_id,
            actor_id=actor.actor_id,
            actor_role=str(actor.role),
            ip_address=actor.ip_address,
            user_agent=actor.user_agent,
            occurred_at=datetime.now(UTC),
            details=dict(details),
        )

    @staticmethod
    def _event_record(event: TransitionEvent) -> AuditRecord:
        return AuditRecord(
            kind="transition",
            document_id=event.document_id,
            actor_id=event.actor_id,
            actor_role=str(event.actor_role),
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            occurred_at=event.created_at,
            details={
                "event_id": str(event.id),
                "event_type": str(event.event_type),
                "from_state": str(event.from_state),
                "to_state": str(event.to_state),
                "payload": event.payload,
            },
        )
