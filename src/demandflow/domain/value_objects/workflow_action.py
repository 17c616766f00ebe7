"""Workflow actions and the audit event types they produce."""

from enum import StrEnum


class WorkflowAction(StrEnum):
    """Actions that move a letter between lifecycle states."""

    SUBMIT_FOR_REVIEW = "submit_for_review"
    APPROVE = "approve"
    REJECT = "reject"
    PREPARE_FOR_SENDING = "prepare_for_sending"
    MARK_AS_SENT = "mark_as_sent"


class TransitionEventType(StrEnum):
    """Recorded outcome of a workflow action."""

    SUBMITTED_FOR_REVIEW = "SUBMITTED_FOR_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PREPARED_FOR_SENDING = "PREPARED_FOR_SENDING"
    SENT = "SENT"
