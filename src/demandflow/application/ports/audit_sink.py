"""Audit sink port - receives copies of captures and transitions."""

from typing import Protocol

from demandflow.application.dto.audit_record import AuditRecord


class AuditSink(Protocol):
    """Compliance logging collaborator. Delivery is best effort."""

    async def publish(self, record: AuditRecord) -> None: ...
