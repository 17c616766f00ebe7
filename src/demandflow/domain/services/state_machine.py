"""Approval workflow transition table.

The table is the single source of truth for which action is legal from
which state, which state it leads to, which audit event it records and
which capability the actor needs. Pairs missing from the table are illegal.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from demandflow.domain.exceptions import InvalidTransitionError
from demandflow.domain.value_objects import (
    Capability,
    LetterState,
    TransitionEventType,
    WorkflowAction,
)


@dataclass(frozen=True)
class Transition:
    """Outcome of a legal (state, action) pair."""

    action: WorkflowAction
    source: LetterState
    target: LetterState
    event_type: TransitionEventType
    capability: Capability


TRANSITIONS: dict[tuple[LetterState, WorkflowAction], Transition] = {
    (t.source, t.action): t
    for t in (
        Transition(
            WorkflowAction.SUBMIT_FOR_REVIEW,
            LetterState.DRAFT,
            LetterState.PENDING_REVIEW,
            TransitionEventType.SUBMITTED_FOR_REVIEW,
            Capability.EDITOR,
        ),
        Transition(
            WorkflowAction.APPROVE,
            LetterState.PENDING_REVIEW,
            LetterState.APPROVED,
            TransitionEventType.APPROVED,
            Capability.APPROVER,
        ),
        Transition(
            WorkflowAction.REJECT,
            LetterState.PENDING_REVIEW,
            LetterState.DRAFT,
            TransitionEventType.REJECTED,
            Capability.APPROVER,
        ),
        Transition(
            WorkflowAction.PREPARE_FOR_SENDING,
            LetterState.APPROVED,
            LetterState.READY_TO_SEND,
            TransitionEventType.PREPARED_FOR_SENDING,
            Capability.EDITOR,
        ),
        Transition(
            WorkflowAction.MARK_AS_SENT,
            LetterState.READY_TO_SEND,
            LetterState.SENT,
            TransitionEventType.SENT,
            Capability.EDITOR,
        ),
    )
}

_BY_EVENT: dict[TransitionEventType, Transition] = {
    t.event_type: t for t in TRANSITIONS.values()
}

INITIAL_STATE = LetterState.DRAFT
TERMINAL_STATES: frozenset[LetterState] = frozenset(
    state
    for state in LetterState
    if not any(source == state for source, _ in TRANSITIONS)
)


def resolve(state: LetterState, action: WorkflowAction) -> Transition:
    """Look up the transition for ``action`` from ``state``."""
    transition = TRANSITIONS.get((state, action))
    if transition is None:
        raise InvalidTransitionError(action, state)
    return transition


def allowed_actions(state: LetterState) -> list[WorkflowAction]:
    """Actions legal from ``state`` in table order."""
    return [action for source, action in TRANSITIONS if source == state]


def replay(event_types: Iterable[TransitionEventType]) -> LetterState:
    """Rebuild the state reached by applying recorded events from DRAFT."""
    state = INITIAL_STATE
    for event_type in event_types:
        transition = _BY_EVENT[event_type]
        if transition.source != state:
            raise InvalidTransitionError(transition.action, state)
        state = transition.target
    return state
