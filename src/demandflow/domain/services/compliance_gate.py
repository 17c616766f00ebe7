"""Compliance gate for the submit-for-review transition."""

DEFAULT_COMPLIANCE_THRESHOLD = 70.0


def is_satisfied(score: float, threshold: float = DEFAULT_COMPLIANCE_THRESHOLD) -> bool:
    """Non-strict comparison: a score equal to the threshold passes."""
    return score >= threshold
