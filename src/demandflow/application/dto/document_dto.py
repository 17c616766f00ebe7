"""Document DTOs."""

from dataclasses import dataclass


@dataclass
class DocumentCreateInput:
    """Input for creating a letter from generated content."""

    content: str
    compliance_score: float
