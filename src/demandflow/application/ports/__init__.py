"""Application ports - interfaces for external adapters."""

from demandflow.application.ports.audit_sink import AuditSink
from demandflow.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "AuditSink",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
