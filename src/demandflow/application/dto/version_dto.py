"""Version history DTOs."""

from dataclasses import dataclass
from datetime import datetime

from demandflow.domain.entities import VersionSnapshot
from demandflow.domain.services.diff_engine import DiffLine, DiffStats


@dataclass
class CaptureInput:
    """New content from an editor or the refinement service."""

    content: str
    compliance_score: float
    origin_instruction: str | None = None


@dataclass
class VersionSummary:
    """Snapshot metadata for the history list."""

    version_number: int
    origin_instruction: str | None
    compliance_score: float
    created_by: str | None
    created_at: datetime
    is_current: bool


@dataclass
class VersionNavigation:
    """Result of capture, undo or redo."""

    snapshot: VersionSnapshot
    current_version: int
    total_versions: int


@dataclass
class DiffResult:
    """Comparison of two snapshots, always old -> new."""

    old_version: int
    new_version: int
    stats: DiffStats
    lines: list[DiffLine]
    similarity: int
