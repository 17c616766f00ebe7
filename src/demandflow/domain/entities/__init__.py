"""Domain entities."""

from demandflow.domain.entities.document import Document
from demandflow.domain.entities.transition_event import TransitionEvent
from demandflow.domain.entities.version_snapshot import VersionSnapshot

__all__ = [
    "Document",
    "TransitionEvent",
    "VersionSnapshot",
]
