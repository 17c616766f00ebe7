"""Audit sink that writes structured records to the audit logger."""

import json
import logging

from demandflow.application.dto.audit_record import AuditRecord

audit_logger = logging.getLogger("demandflow.audit")


class LoggingAuditSink:
    """Emit each audit record as one JSON line on ``demandflow.audit``."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or audit_logger

    async def publish(self, record: AuditRecord) -> None:
        self._logger.info(
            json.dumps(record.to_dict(), ensure_ascii=False, default=str),
            extra={"audit_kind": record.kind, "document_id": str(record.document_id)},
        )
