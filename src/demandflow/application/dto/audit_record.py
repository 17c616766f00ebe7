"""Audit record DTO - plain structured copy sent to the audit sink."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class AuditRecord:
    """One capture, navigation or transition as seen by compliance logging."""

    kind: str
    document_id: UUID
    actor_id: str | None
    occurred_at: datetime
    actor_role: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "document_id": str(self.document_id),
            "actor_id": self.actor_id,
            "actor_role": self.actor_role,
            "occurred_at": self.occurred_at.isoformat(),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "details": self.details,
        }
