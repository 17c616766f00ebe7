"""Repository ports."""

from demandflow.application.ports.repositories.document_repository import (
    DocumentRepository,
)
from demandflow.application.ports.repositories.transition_repository import (
    TransitionRepository,
)
from demandflow.application.ports.repositories.version_repository import (
    VersionRepository,
)

__all__ = [
    "DocumentRepository",
    "TransitionRepository",
    "VersionRepository",
]
