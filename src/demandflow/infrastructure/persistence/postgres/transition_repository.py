"""PostgreSQL transition event repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from demandflow.domain.entities import TransitionEvent
from demandflow.domain.value_objects import ActorRole, LetterState, TransitionEventType

_COLUMNS = (
    "id, document_id, event_type, from_state, to_state, actor_id, actor_role, created_at, "
    "ip_address, user_agent, payload"
)


def _row_to_event(r: tuple) -> TransitionEvent:
    return TransitionEvent(
        id=r[0],
        document_id=r[1],
        event_type=TransitionEventType(r[2]),
        from_state=LetterState(r[3]),
        to_state=LetterState(r[4]),
        actor_id=r[5],
        actor_role=ActorRole(r[6]),
        created_at=r[7],
        ip_address=r[8],
        user_agent=r[9],
        payload=r[10] or {},
    )


class PostgresTransitionRepository:
    """Append-only transition event repository."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def append(self, event: TransitionEvent) -> TransitionEvent:
        """Insert event."""
        await self._conn.execute(
            f"INSERT INTO transition_event ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                event.id,
                event.document_id,
                str(event.event_type),
                str(event.from_state),
                str(event.to_state),
                event.actor_id,
                str(event.actor_role),
                event.created_at,
                event.ip_address,
                event.user_agent,
                Jsonb(event.payload),
            ),
        )
        return event

    async def list_by_document(self, document_id: UUID) -> list[TransitionEvent]:
        """List events oldest first."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM transition_event WHERE document_id = %s "
            "ORDER BY created_at, seq",
            (document_id,),
        )
        rows = await cur.fetchall()
        return [_row_to_event(r) for r in rows]

    async def latest(
        self, document_id: UUID, event_type: TransitionEventType
    ) -> TransitionEvent | None:
        """Most recent event of a type."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM transition_event "
            "WHERE document_id = %s AND event_type = %s ORDER BY created_at DESC, seq DESC LIMIT 1",
            (document_id, str(event_type)),
        )
        r = await cur.fetchone()
        return _row_to_event(r) if r else None
