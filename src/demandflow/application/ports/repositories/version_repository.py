"""Version snapshot repository port."""

from typing import Protocol
from uuid import UUID

from demandflow.domain.entities import VersionSnapshot


class VersionRepository(Protocol):
    """Port for version snapshot persistence."""

    async def get(self, document_id: UUID, version_number: int) -> VersionSnapshot | None: ...

    async def list_by_document(self, document_id: UUID) -> list[VersionSnapshot]:
        """Snapshots ordered by version number, newest first."""
        ...

    async def latest_number(self, document_id: UUID) -> int:
        """Highest stored version number, 0 when none."""
        ...

    async def create(self, snapshot: VersionSnapshot) -> VersionSnapshot:
        """Insert; a duplicate (document, version) raises ConflictError."""
        ...

    async def delete_after(self, document_id: UUID, version_number: int) -> int:
        """Drop snapshots above ``version_number``; returns the count removed."""
        ...
