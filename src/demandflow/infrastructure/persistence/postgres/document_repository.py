"""PostgreSQL document repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from demandflow.domain.entities import Document
from demandflow.domain.exceptions import ConflictError
from demandflow.domain.value_objects import LetterState

_COLUMNS = (
    "id, state, current_version, content, compliance_score, created_at, updated_at, "
    "created_by, sent_at, lock_version"
)


def _row_to_document(r: tuple) -> Document:
    return Document(
        id=r[0],
        state=LetterState(r[1]),
        current_version=r[2],
        content=r[3],
        compliance_score=float(r[4]),
        created_at=r[5],
        updated_at=r[6],
        created_by=r[7],
        sent_at=r[8],
        lock_version=r[9],
    )


class PostgresDocumentRepository:
    """Document repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, document_id: UUID) -> Document | None:
        """Get document by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document WHERE id = %s", (document_id,)
        )
        r = await cur.fetchone()
        return _row_to_document(r) if r else None

    async def get_for_update(self, document_id: UUID) -> Document | None:
        """Get document by id and lock the row for the rest of the transaction."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM document WHERE id = %s FOR UPDATE", (document_id,)
        )
        r = await cur.fetchone()
        return _row_to_document(r) if r else None

    async def create(self, document: Document) -> Document:
        """Create document."""
        await self._conn.execute(
            f"INSERT INTO document ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                document.id,
                str(document.state),
                document.current_version,
                document.content,
                document.compliance_score,
                document.created_at,
                document.updated_at,
                document.created_by,
                document.sent_at,
                document.lock_version,
            ),
        )
        return document

    async def update(self, document: Document) -> Document:
        """Update document if nobody wrote it since it was read."""
        cur = await self._conn.execute(
            "UPDATE document SET state=%s, current_version=%s, content=%s, compliance_score=%s, "
            "updated_at=%s, sent_at=%s, lock_version = lock_version + 1 "
            "WHERE id=%s AND lock_version=%s",
            (
                str(document.state),
                document.current_version,
                document.content,
                document.compliance_score,
                document.updated_at,
                document.sent_at,
                document.id,
                document.lock_version,
            ),
        )
        if cur.rowcount != 1:
            raise ConflictError(f"Document {document.id} was modified concurrently")
        document.lock_version += 1
        return document

    async def delete(self, document_id: UUID) -> None:
        """Delete document; snapshots and events cascade."""
        await self._conn.execute("DELETE FROM document WHERE id = %s", (document_id,))
