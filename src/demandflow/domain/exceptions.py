"""Domain exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from demandflow.domain.value_objects import LetterState


class DemandFlowError(Exception):
    """Base exception for DemandFlow."""

    pass


class PermissionDenied(DemandFlowError):
    """Actor lacks the capability required for the requested action."""

    pass


class NotFound(DemandFlowError):
    """Requested resource was not found."""

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(f"{resource} {identifier} not found")
        self.resource = resource
        self.identifier = identifier


class ValidationError(DemandFlowError):
    """Validation failed for input data."""

    pass


class InvalidTransitionError(DemandFlowError):
    """Action is not legal from the document's current state."""

    def __init__(self, action: str, state: LetterState, message: str | None = None) -> None:
        super().__init__(message or f"Cannot {action} a letter in {state} state")
        self.action = action
        self.state = state


class ContentLockedError(InvalidTransitionError):
    """Content mutation attempted outside the editable states."""

    def __init__(self, operation: str, state: LetterState) -> None:
        super().__init__(
            operation, state, f"Letter content cannot be changed in {state} state"
        )


class ComplianceBelowThresholdError(DemandFlowError):
    """Compliance score too low to submit for review."""

    def __init__(self, score: float, threshold: float) -> None:
        super().__init__(
            f"Compliance score {score:g} is below the required threshold {threshold:g}"
        )
        self.score = score
        self.threshold = threshold


class MissingReasonError(DemandFlowError):
    """Rejection reason missing or shorter than the minimum length."""

    def __init__(self, min_length: int) -> None:
        super().__init__(f"Rejection reason must be at least {min_length} characters")
        self.min_length = min_length


class NoPriorVersionError(DemandFlowError):
    """Undo requested at the first version."""

    pass


class NoNextVersionError(DemandFlowError):
    """Redo requested at the latest version."""

    pass


class ConflictError(DemandFlowError):
    """Concurrent modification detected for the same document."""

    pass
