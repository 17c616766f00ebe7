"""Version snapshot entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class VersionSnapshot:
    """Full copy of letter content at one version number."""

    document_id: UUID
    version_number: int
    content: str
    compliance_score: float
    created_at: datetime
    created_by: str | None = None
    origin_instruction: str | None = None
