"""Domain value objects."""

from demandflow.domain.value_objects.actor import Actor
from demandflow.domain.value_objects.actor_role import ActorRole, Capability
from demandflow.domain.value_objects.compliance_score import ComplianceScore
from demandflow.domain.value_objects.letter_state import EDITABLE_STATES, LetterState
from demandflow.domain.value_objects.workflow_action import (
    TransitionEventType,
    WorkflowAction,
)

__all__ = [
    "Actor",
    "ActorRole",
    "Capability",
    "ComplianceScore",
    "EDITABLE_STATES",
    "LetterState",
    "TransitionEventType",
    "WorkflowAction",
]
