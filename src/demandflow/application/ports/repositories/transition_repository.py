"""Transition event repository port."""

from typing import Protocol
from uuid import UUID

from demandflow.domain.entities import TransitionEvent
from demandflow.domain.value_objects import TransitionEventType


class TransitionRepository(Protocol):
    """Port for the append-only transition log."""

    async def append(self, event: TransitionEvent) -> TransitionEvent: ...

    async def list_by_document(self, document_id: UUID) -> list[TransitionEvent]:
        """Events in timestamp order, oldest first."""
        ...

    async def latest(
        self, document_id: UUID, event_type: TransitionEventType
    ) -> TransitionEvent | None: ...
