"""Lifecycle state of a demand letter."""

from enum import StrEnum


class LetterState(StrEnum):
    """Persisted letter states. Rejection is an event that lands in DRAFT."""

    DRAFT = "DRAFT"
    PENDING_REVIEW = "PENDING_REVIEW"
    APPROVED = "APPROVED"
    READY_TO_SEND = "READY_TO_SEND"
    SENT = "SENT"


EDITABLE_STATES: frozenset[LetterState] = frozenset({LetterState.DRAFT})
