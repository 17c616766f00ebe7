"""Unit tests for domain exceptions."""

import pytest

from demandflow.domain.exceptions import (
    ComplianceBelowThresholdError,
    ConflictError,
    ContentLockedError,
    DemandFlowError,
    InvalidTransitionError,
    MissingReasonError,
    NoNextVersionError,
    NoPriorVersionError,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from demandflow.domain.value_objects import LetterState, WorkflowAction


@pytest.mark.parametrize(
    "exc_type",
    [
        PermissionDenied,
        NotFound,
        ValidationError,
        InvalidTransitionError,
        ComplianceBelowThresholdError,
        MissingReasonError,
        NoPriorVersionError,
        NoNextVersionError,
        ConflictError,
    ],
)
def test_inherits_demandflow_error(exc_type: type) -> None:
    assert issubclass(exc_type, DemandFlowError)


def test_content_locked_is_invalid_transition() -> None:
    """Callers handling InvalidTransitionError also catch content locks."""
    with pytest.raises(InvalidTransitionError) as exc_info:
        raise ContentLockedError("capture", LetterState.APPROVED)
    assert exc_info.value.state == LetterState.APPROVED
    assert exc_info.value.action == "capture"
    assert "APPROVED" in str(exc_info.value)


def test_invalid_transition_carries_action_and_state() -> None:
    ex = InvalidTransitionError(WorkflowAction.APPROVE, LetterState.DRAFT)
    assert ex.action == WorkflowAction.APPROVE
    assert ex.state == LetterState.DRAFT
    assert str(ex) == "Cannot approve a letter in DRAFT state"


def test_compliance_error_exposes_score_and_threshold() -> None:
    ex = ComplianceBelowThresholdError(65, 70.0)
    assert ex.score == 65
    assert ex.threshold == 70.0
    assert str(ex) == "Compliance score 65 is below the required threshold 70"


def test_missing_reason_exposes_min_length() -> None:
    ex = MissingReasonError(10)
    assert ex.min_length == 10
    assert "10" in str(ex)


def test_not_found_message() -> None:
    ex = NotFound("Document", "123")
    assert str(ex) == "Document 123 not found"
    assert ex.resource == "Document"
    assert ex.identifier == "123"


def test_exception_message_preserved() -> None:
    msg = "Role DEBTOR cannot approve"
    with pytest.raises(PermissionDenied, match=msg):
        raise PermissionDenied(msg)
