"""Approval workflow - applies table transitions with guards and audit events."""

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from demandflow.application.dto.workflow_dto import TransitionResult, WorkflowHistory
from demandflow.application.ports import UnitOfWork
from demandflow.domain.entities import Document, TransitionEvent
from demandflow.domain.exceptions import (
    ComplianceBelowThresholdError,
    MissingReasonError,
    PermissionDenied,
    ValidationError,
)
from demandflow.domain.services import compliance_gate, state_machine
from demandflow.domain.services.signature import signature_hash
from demandflow.domain.value_objects import Actor, TransitionEventType, WorkflowAction
from demandflow.domain.value_objects.actor_role import has_capability

logger = logging.getLogger(__name__)

DEFAULT_MIN_REASON_LENGTH = 10


class ApprovalStateMachine:
    """Lifecycle transitions of a letter.

    Checks run in a fixed order: the (state, action) pair must be in the
    transition table, the actor must hold the required capability, then the
    action's own guard must pass. State update and event append share the
    caller's unit of work.
    """

    def __init__(
        self,
        compliance_threshold: float = compliance_gate.DEFAULT_COMPLIANCE_THRESHOLD,
        min_reason_length: int = DEFAULT_MIN_REASON_LENGTH,
    ) -> None:
        self._threshold = compliance_threshold
        self._min_reason_length = min_reason_length

    @property
    def compliance_threshold(self) -> float:
        return self._threshold

    async def submit_for_review(
        self, uow: UnitOfWork, document: Document, actor: Actor
    ) -> TransitionResult:
        transition = self._authorize(document, WorkflowAction.SUBMIT_FOR_REVIEW, actor)
        if not compliance_gate.is_satisfied(document.compliance_score, self._threshold):
            raise ComplianceBelowThresholdError(document.compliance_score, self._threshold)
        return await self._apply(uow, document, transition, actor)

    async def approve(
        self,
        uow: UnitOfWork,
        document: Document,
        actor: Actor,
        signature: str | None = None,
    ) -> TransitionResult:
        """Approve; ``signature`` is stored verbatim next to an integrity hash."""
        transition = self._authorize(document, WorkflowAction.APPROVE, actor)
        now = datetime.now(UTC)
        signed_at = now.isoformat()
        payload: dict[str, Any] = {
            "signed_at": signed_at,
            "signature_hash": signature_hash(
                document.id, actor.actor_id, signed_at, actor.ip_address
            ),
        }
        if signature is not None:
            payload["signature"] = signature
        return await self._apply(uow, document, transition, actor, payload, now=now)

    async def reject(
        self, uow: UnitOfWork, document: Document, actor: Actor, reason: str | None
    ) -> TransitionResult:
        transition = self._authorize(document, WorkflowAction.REJECT, actor)
        cleaned = (reason or "").strip()
        if len(cleaned) < self._min_reason_length:
            raise MissingReasonError(self._min_reason_length)
        return await self._apply(uow, document, transition, actor, {"reason": cleaned})

    async def prepare_for_sending(
        self, uow: UnitOfWork, document: Document, actor: Actor
    ) -> TransitionResult:
        transition = self._authorize(document, WorkflowAction.PREPARE_FOR_SENDING, actor)
        return await self._apply(uow, document, transition, actor)

    async def mark_as_sent(
        self, uow: UnitOfWork, document: Document, actor: Actor
    ) -> TransitionResult:
        transition = self._authorize(document, WorkflowAction.MARK_AS_SENT, actor)
        now = datetime.now(UTC)
        document.sent_at = now
        return await self._apply(uow, document, transition, actor, now=now)

    async def apply(
        self,
        uow: UnitOfWork,
        document: Document,
        action: WorkflowAction,
        actor: Actor,
        *,
        signature: str | None = None,
        reason: str | None = None,
    ) -> TransitionResult:
        """Dispatch ``action`` to its handler."""
        handlers = {
            WorkflowAction.SUBMIT_FOR_REVIEW: lambda: self.submit_for_review(uow, document, actor),
            WorkflowAction.APPROVE: lambda: self.approve(uow, document, actor, signature),
            WorkflowAction.REJECT: lambda: self.reject(uow, document, actor, reason),
            WorkflowAction.PREPARE_FOR_SENDING: lambda: self.prepare_for_sending(
                uow, document, actor
            ),
            WorkflowAction.MARK_AS_SENT: lambda: self.mark_as_sent(uow, document, actor),
        }
        handler = handlers.get(action)
        if handler is None:
            raise ValidationError(f"Unknown workflow action: {action}")
        return await handler()

    async def get_history(self, uow: UnitOfWork, document: Document) -> WorkflowHistory:
        events = await uow.transitions.list_by_document(document.id)
        return WorkflowHistory(state=document.state, events=events)

    async def get_latest_approval(
        self, uow: UnitOfWork, document_id: UUID
    ) -> TransitionEvent | None:
        return await uow.transitions.latest(document_id, TransitionEventType.APPROVED)

    def _authorize(
        self, document: Document, action: WorkflowAction, actor: Actor
    ) -> state_machine.Transition:
        transition = state_machine.resolve(document.state, action)
        if not has_capability(actor.role, transition.capability):
            raise PermissionDenied(f"Role {actor.role} cannot {action}")
        return transition

    async def _apply(
        self,
        uow: UnitOfWork,
        document: Document,
        transition: state_machine.Transition,
        actor: Actor,
        payload: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> TransitionResult:
        now = now or datetime.now(UTC)
        document.state = transition.target
        document.updated_at = now
        await uow.documents.update(document)
        event = TransitionEvent(
            id=uuid4(),
            document_id=document.id,
            event_type=transition.event_type,
            from_state=transition.source,
            to_state=transition.target,
            actor_id=actor.actor_id,
            actor_role=actor.role,
            created_at=now,
            ip_address=actor.ip_address,
            user_agent=actor.user_agent,
            payload=payload or {},
        )
        await uow.transitions.append(event)
        logger.info(
            "Letter %s: %s -> %s (%s by %s)",
            document.id,
            transition.source,
            transition.target,
            transition.event_type,
            actor.actor_id,
        )
        return TransitionResult(state=document.state, event=event)
