"""Transition event entity - audit record of one lifecycle change."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from demandflow.domain.value_objects import ActorRole, LetterState, TransitionEventType


@dataclass(frozen=True)
class TransitionEvent:
    """Append-only record: who moved the letter, when, from where, and why."""

    id: UUID
    document_id: UUID
    event_type: TransitionEventType
    from_state: LetterState
    to_state: LetterState
    actor_id: str
    actor_role: ActorRole
    created_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)
