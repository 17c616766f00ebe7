"""Version store - immutable snapshots and the current-version pointer.

Every method runs inside the caller's unit of work against a document row
the caller has already locked. Nothing here commits.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from demandflow.application.dto.version_dto import (
    CaptureInput,
    DiffResult,
    VersionNavigation,
    VersionSummary,
)
from demandflow.application.ports import UnitOfWork
from demandflow.domain.entities import Document, VersionSnapshot
from demandflow.domain.exceptions import (
    ContentLockedError,
    NoNextVersionError,
    NoPriorVersionError,
    NotFound,
    PermissionDenied,
)
from demandflow.domain.services import diff_engine
from demandflow.domain.value_objects import Actor, Capability
from demandflow.domain.value_objects.actor_role import has_capability

logger = logging.getLogger(__name__)


class VersionStore:
    """Linear version history with undo/redo for a letter."""

    async def record(
        self,
        uow: UnitOfWork,
        document_id: UUID,
        version_number: int,
        content: str,
        compliance_score: float,
        created_by: str | None,
        origin_instruction: str | None = None,
    ) -> VersionSnapshot:
        """Store a snapshot at ``version_number``; returns the existing one if present."""
        existing = await uow.versions.get(document_id, version_number)
        if existing is not None:
            return existing
        snapshot = VersionSnapshot(
            document_id=document_id,
            version_number=version_number,
            content=content,
            compliance_score=compliance_score,
            created_at=datetime.now(UTC),
            created_by=created_by,
            origin_instruction=origin_instruction,
        )
        return await uow.versions.create(snapshot)

    async def capture(
        self, uow: UnitOfWork, document: Document, data: CaptureInput, actor: Actor
    ) -> VersionNavigation:
        """Append ``data`` as the next version and move the pointer to it.

        Content that was never snapshotted at the current version is
        recorded first. Versions above the pointer (reachable by redo) are
        discarded: a new edit after undo replaces the old future.
        """
        self._require_editable(document, "capture", actor)

        await self.record(
            uow,
            document.id,
            document.current_version,
            document.content,
            document.compliance_score,
            created_by=document.created_by,
        )
        dropped = await uow.versions.delete_after(document.id, document.current_version)
        if dropped:
            logger.info(
                "Discarded %d redo version(s) of document %s above v%d",
                dropped,
                document.id,
                document.current_version,
            )

        snapshot = await self.record(
            uow,
            document.id,
            document.current_version + 1,
            data.content,
            data.compliance_score,
            created_by=actor.actor_id,
            origin_instruction=data.origin_instruction,
        )
        await self._move_to(uow, document, snapshot)
        return VersionNavigation(
            snapshot=snapshot,
            current_version=snapshot.version_number,
            total_versions=snapshot.version_number,
        )

    async def undo(self, uow: UnitOfWork, document: Document, actor: Actor) -> VersionNavigation:
        """Move the pointer one version back."""
        self._require_editable(document, "undo", actor)
        if document.current_version <= 1:
            raise NoPriorVersionError("Already at the first version")
        snapshot = await self._get_or_raise(uow, document.id, document.current_version - 1)
        await self._move_to(uow, document, snapshot)
        return VersionNavigation(
            snapshot=snapshot,
            current_version=snapshot.version_number,
            total_versions=await uow.versions.latest_number(document.id),
        )

    async def redo(self, uow: UnitOfWork, document: Document, actor: Actor) -> VersionNavigation:
        """Move the pointer one version forward."""
        self._require_editable(document, "redo", actor)
        snapshot = await uow.versions.get(document.id, document.current_version + 1)
        if snapshot is None:
            raise NoNextVersionError("Already at the latest version")
        await self._move_to(uow, document, snapshot)
        return VersionNavigation(
            snapshot=snapshot,
            current_version=snapshot.version_number,
            total_versions=await uow.versions.latest_number(document.id),
        )

    async def get_version(
        self, uow: UnitOfWork, document_id: UUID, version_number: int
    ) -> VersionSnapshot:
        return await self._get_or_raise(uow, document_id, version_number)

    async def diff_between(
        self, uow: UnitOfWork, document_id: UUID, v1: int, v2: int
    ) -> DiffResult:
        """Diff two versions, older one first regardless of argument order."""
        old_number, new_number = min(v1, v2), max(v1, v2)
        old = await self._get_or_raise(uow, document_id, old_number)
        new = await self._get_or_raise(uow, document_id, new_number)
        lines = diff_engine.diff(old.content, new.content)
        return DiffResult(
            old_version=old_number,
            new_version=new_number,
            stats=diff_engine.stats(lines),
            lines=lines,
            similarity=diff_engine.similarity(lines),
        )

    async def list_versions(self, uow: UnitOfWork, document: Document) -> list[VersionSummary]:
        """Snapshot metadata, newest first."""
        snapshots = await uow.versions.list_by_document(document.id)
        return [
            VersionSummary(
                version_number=s.version_number,
                origin_instruction=s.origin_instruction,
                compliance_score=s.compliance_score,
                created_by=s.created_by,
                created_at=s.created_at,
                is_current=s.version_number == document.current_version,
            )
            for s in snapshots
        ]

    async def _get_or_raise(
        self, uow: UnitOfWork, document_id: UUID, version_number: int
    ) -> VersionSnapshot:
        snapshot = await uow.versions.get(document_id, version_number)
        if snapshot is None:
            raise NotFound("Version", f"{document_id}/v{version_number}")
        return snapshot

    async def _move_to(
        self, uow: UnitOfWork, document: Document, snapshot: VersionSnapshot
    ) -> None:
        document.current_version = snapshot.version_number
        document.content = snapshot.content
        document.compliance_score = snapshot.compliance_score
        document.updated_at = datetime.now(UTC)
        await uow.documents.update(document)

    @staticmethod
    def _require_editable(document: Document, operation: str, actor: Actor) -> None:
        if not document.is_editable:
            raise ContentLockedError(operation, document.state)
        if not has_capability(actor.role, Capability.EDITOR):
            raise PermissionDenied(f"Role {actor.role} cannot edit letter content")
