"""PostgreSQL version snapshot repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation

from demandflow.domain.entities import VersionSnapshot
from demandflow.domain.exceptions import ConflictError

_COLUMNS = (
    "document_id, version_number, content, compliance_score, created_at, created_by, "
    "origin_instruction"
)


def _row_to_snapshot(r: tuple) -> VersionSnapshot:
    return VersionSnapshot(
        document_id=r[0],
        version_number=r[1],
        content=r[2],
        compliance_score=float(r[3]),
        created_at=r[4],
        created_by=r[5],
        origin_instruction=r[6],
    )


class PostgresVersionRepository:
    """Version snapshot repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, document_id: UUID, version_number: int) -> VersionSnapshot | None:
        """Get snapshot by document and version number."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM version_snapshot "
            "WHERE document_id = %s AND version_number = %s",
            (document_id, version_number),
        )
        r = await cur.fetchone()
        return _row_to_snapshot(r) if r else None

    async def list_by_document(self, document_id: UUID) -> list[VersionSnapshot]:
        """List snapshots newest first."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM version_snapshot WHERE document_id = %s "
            "ORDER BY version_number DESC",
            (document_id,),
        )
        rows = await cur.fetchall()
        return [_row_to_snapshot(r) for r in rows]

    async def latest_number(self, document_id: UUID) -> int:
        """Highest version number, 0 if none."""
        cur = await self._conn.execute(
            "SELECT COALESCE(MAX(version_number), 0) FROM version_snapshot WHERE document_id = %s",
            (document_id,),
        )
        r = await cur.fetchone()
        return r[0]

    async def create(self, snapshot: VersionSnapshot) -> VersionSnapshot:
        """Insert snapshot."""
        try:
            await self._conn.execute(
                f"INSERT INTO version_snapshot ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s)",
                (
                    snapshot.document_id,
                    snapshot.version_number,
                    snapshot.content,
                    snapshot.compliance_score,
                    snapshot.created_at,
                    snapshot.created_by,
                    snapshot.origin_instruction,
                ),
            )
        except UniqueViolation as e:
            raise ConflictError(
                f"Version {snapshot.version_number} of {snapshot.document_id} already exists"
            ) from e
        return snapshot

    async def delete_after(self, document_id: UUID, version_number: int) -> int:
        """Delete snapshots above version_number."""
        cur = await self._conn.execute(
            "DELETE FROM version_snapshot WHERE document_id = %s AND version_number > %s",
            (document_id, version_number),
        )
        return cur.rowcount
