"""Demand letter document entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from demandflow.domain.value_objects import EDITABLE_STATES, LetterState


@dataclass
class Document:
    """Mutable envelope: lifecycle state, current version pointer and content.

    ``lock_version`` is the optimistic concurrency token; every persisted
    write increments it and a write against a stale token is rejected.
    """

    id: UUID
    state: LetterState
    current_version: int
    content: str
    compliance_score: float
    created_at: datetime
    updated_at: datetime
    created_by: str | None = None
    sent_at: datetime | None = None
    lock_version: int = 0

    @property
    def is_editable(self) -> bool:
        return self.state in EDITABLE_STATES
