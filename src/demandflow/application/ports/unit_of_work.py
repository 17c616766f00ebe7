"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from demandflow.application.ports.repositories.document_repository import (
    DocumentRepository,
)
from demandflow.application.ports.repositories.transition_repository import (
    TransitionRepository,
)
from demandflow.application.ports.repositories.version_repository import (
    VersionRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def documents(self) -> DocumentRepository: ...

    @property
    def versions(self) -> VersionRepository: ...

    @property
    def transitions(self) -> TransitionRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances.

    Used as ``async with factory() as uow``; commits on clean exit and rolls
    back on any exception, including cancellation.
    """

    def __call__(self) -> AsyncIterator[UnitOfWork]: ...
