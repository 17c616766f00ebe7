"""Workflow DTOs."""

from dataclasses import dataclass
from uuid import UUID

from demandflow.domain.entities import TransitionEvent
from demandflow.domain.value_objects import LetterState


@dataclass
class TransitionResult:
    """New state and the event recorded for it."""

    state: LetterState
    event: TransitionEvent

    @property
    def approval_id(self) -> UUID:
        """Identifier of the approval record, used to render the signed PDF."""
        return self.event.id


@dataclass
class WorkflowHistory:
    """Current state plus the full, ordered transition log."""

    state: LetterState
    events: list[TransitionEvent]
