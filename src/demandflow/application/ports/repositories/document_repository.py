"""Document repository port."""

from typing import Protocol
from uuid import UUID

from demandflow.domain.entities import Document


class DocumentRepository(Protocol):
    """Port for document persistence."""

    async def get_by_id(self, document_id: UUID) -> Document | None: ...

    async def get_for_update(self, document_id: UUID) -> Document | None:
        """Read the row and hold an exclusive lock until the transaction ends."""
        ...

    async def create(self, document: Document) -> Document: ...

    async def update(self, document: Document) -> Document:
        """Write if ``lock_version`` still matches, then bump it; else ConflictError."""
        ...

    async def delete(self, document_id: UUID) -> None: ...
