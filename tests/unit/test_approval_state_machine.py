"""Unit tests for ApprovalStateMachine."""

from datetime import datetime

import pytest

from demandflow.application.services.approval_state_machine import ApprovalStateMachine
from demandflow.domain.exceptions import (
    ComplianceBelowThresholdError,
    InvalidTransitionError,
    MissingReasonError,
    PermissionDenied,
    ValidationError,
)
from demandflow.domain.services import state_machine
from demandflow.domain.services.signature import verify_signature_hash
from demandflow.domain.value_objects import (
    ActorRole,
    LetterState,
    TransitionEventType,
    WorkflowAction,
)

from tests.conftest import make_actor, seed_document


@pytest.mark.asyncio
async def test_full_lifecycle(store, uow_factory, paralegal, attorney) -> None:
    """Submit, approve, prepare and send; every step leaves an attributed event."""
    workflow = ApprovalStateMachine()
    doc = seed_document(store, compliance_score=85)

    async with uow_factory() as uow:
        submitted = await workflow.submit_for_review(uow, doc, paralegal)
        approved = await workflow.approve(uow, doc, attorney, signature="sig-blob")
        prepared = await workflow.prepare_for_sending(uow, doc, paralegal)
        sent = await workflow.mark_as_sent(uow, doc, paralegal)

    assert submitted.state == LetterState.PENDING_REVIEW
    assert approved.state == LetterState.APPROVED
    assert prepared.state == LetterState.READY_TO_SEND
    assert sent.state == LetterState.SENT
    assert store.documents[doc.id].state == LetterState.SENT
    assert store.documents[doc.id].sent_at is not None

    events = [e for e in store.transitions if e.document_id == doc.id]
    assert [e.event_type for e in events] == [
        TransitionEventType.SUBMITTED_FOR_REVIEW,
        TransitionEventType.APPROVED,
        TransitionEventType.PREPARED_FOR_SENDING,
        TransitionEventType.SENT,
    ]
    assert events[1].actor_id == attorney.actor_id
    assert events[1].actor_role == ActorRole.ATTORNEY
    assert events[1].ip_address == attorney.ip_address
    assert state_machine.replay(e.event_type for e in events) == LetterState.SENT


@pytest.mark.asyncio
async def test_submit_below_threshold(store, uow_factory, paralegal) -> None:
    doc = seed_document(store, compliance_score=65)
    with pytest.raises(ComplianceBelowThresholdError) as exc_info:
        async with uow_factory() as uow:
            await ApprovalStateMachine().submit_for_review(uow, doc, paralegal)

    assert exc_info.value.score == 65
    assert exc_info.value.threshold == 70
    assert store.documents[doc.id].state == LetterState.DRAFT
    assert store.transitions == []


@pytest.mark.asyncio
async def test_submit_at_threshold_passes(store, uow_factory, paralegal) -> None:
    doc = seed_document(store, compliance_score=70)
    async with uow_factory() as uow:
        result = await ApprovalStateMachine().submit_for_review(uow, doc, paralegal)
    assert result.state == LetterState.PENDING_REVIEW


@pytest.mark.asyncio
async def test_configured_threshold(store, uow_factory, paralegal) -> None:
    doc = seed_document(store, compliance_score=85)
    with pytest.raises(ComplianceBelowThresholdError):
        async with uow_factory() as uow:
            await ApprovalStateMachine(compliance_threshold=90).submit_for_review(
                uow, doc, paralegal
            )


@pytest.mark.asyncio
async def test_reject_requires_reason(store, uow_factory, attorney) -> None:
    doc = seed_document(store, state=LetterState.PENDING_REVIEW)
    workflow = ApprovalStateMachine()

    for reason in (None, "", "   short   "):
        with pytest.raises(MissingReasonError) as exc_info:
            async with uow_factory() as uow:
                await workflow.reject(uow, doc, attorney, reason)
        assert exc_info.value.min_length == 10
    assert store.documents[doc.id].state == LetterState.PENDING_REVIEW

    async with uow_factory() as uow:
        result = await workflow.reject(uow, doc, attorney, "  Amount is wrong  ")
    assert result.state == LetterState.DRAFT
    assert result.event.event_type == TransitionEventType.REJECTED
    assert result.event.payload == {"reason": "Amount is wrong"}


@pytest.mark.asyncio
async def test_paralegal_cannot_approve(store, uow_factory, paralegal) -> None:
    doc = seed_document(store, state=LetterState.PENDING_REVIEW)
    with pytest.raises(PermissionDenied):
        async with uow_factory() as uow:
            await ApprovalStateMachine().approve(uow, doc, paralegal)
    assert store.documents[doc.id].state == LetterState.PENDING_REVIEW


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [ActorRole.DEBTOR, ActorRole.PUBLIC_DEFENDER])
async def test_outside_roles_cannot_submit(store, uow_factory, role) -> None:
    doc = seed_document(store)
    with pytest.raises(PermissionDenied):
        async with uow_factory() as uow:
            await ApprovalStateMachine().submit_for_review(uow, doc, make_actor(role))


@pytest.mark.asyncio
async def test_state_checked_before_capability(store, uow_factory, debtor) -> None:
    """An illegal pair reports the state even for an unprivileged actor."""
    doc = seed_document(store, state=LetterState.SENT)
    with pytest.raises(InvalidTransitionError):
        async with uow_factory() as uow:
            await ApprovalStateMachine().approve(uow, doc, debtor)


@pytest.mark.asyncio
async def test_capability_checked_before_guard(store, uow_factory, debtor) -> None:
    doc = seed_document(store, compliance_score=10)
    with pytest.raises(PermissionDenied):
        async with uow_factory() as uow:
            await ApprovalStateMachine().submit_for_review(uow, doc, debtor)


@pytest.mark.asyncio
async def test_approve_payload(store, uow_factory, attorney) -> None:
    doc = seed_document(store, state=LetterState.PENDING_REVIEW)
    async with uow_factory() as uow:
        result = await ApprovalStateMachine().approve(uow, doc, attorney, signature="data:image/png;base64,AAA")

    payload = result.event.payload
    assert result.approval_id == result.event.id
    assert payload["signature"] == "data:image/png;base64,AAA"
    assert datetime.fromisoformat(payload["signed_at"]) == result.event.created_at
    assert verify_signature_hash(
        doc.id, attorney.actor_id, payload["signed_at"], attorney.ip_address, payload["signature_hash"]
    )


@pytest.mark.asyncio
async def test_approve_without_signature(store, uow_factory, attorney) -> None:
    doc = seed_document(store, state=LetterState.PENDING_REVIEW)
    async with uow_factory() as uow:
        result = await ApprovalStateMachine().approve(uow, doc, attorney)
    assert "signature" not in result.event.payload
    assert "signature_hash" in result.event.payload


@pytest.mark.asyncio
async def test_mark_as_sent_only_from_ready_to_send(store, uow_factory, paralegal) -> None:
    doc = seed_document(store, state=LetterState.APPROVED)
    with pytest.raises(InvalidTransitionError):
        async with uow_factory() as uow:
            await ApprovalStateMachine().mark_as_sent(uow, doc, paralegal)


@pytest.mark.asyncio
async def test_apply_dispatches_by_action(store, uow_factory, attorney) -> None:
    doc = seed_document(store, state=LetterState.PENDING_REVIEW)
    async with uow_factory() as uow:
        result = await ApprovalStateMachine().apply(
            uow, doc, WorkflowAction.REJECT, attorney, reason="Wrong debtor address"
        )
    assert result.state == LetterState.DRAFT


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "transition", list(state_machine.TRANSITIONS.values()), ids=lambda t: str(t.action)
)
async def test_apply_routes_every_action_to_its_own_handler(
    store, uow_factory, attorney, transition
) -> None:
    doc = seed_document(store, compliance_score=90, state=transition.source)
    async with uow_factory() as uow:
        result = await ApprovalStateMachine().apply(
            uow, doc, transition.action, attorney, reason="Wrong debtor address"
        )
    assert result.state == transition.target
    assert result.event.event_type == transition.event_type


@pytest.mark.asyncio
async def test_apply_rejects_unknown_action(store, uow_factory, attorney) -> None:
    doc = seed_document(store, state=LetterState.READY_TO_SEND)
    with pytest.raises(ValidationError):
        async with uow_factory() as uow:
            await ApprovalStateMachine().apply(uow, doc, "send_twice", attorney)
    assert store.documents[doc.id].state == LetterState.READY_TO_SEND


@pytest.mark.asyncio
async def test_history_and_latest_approval(store, uow_factory, paralegal, attorney) -> None:
    workflow = ApprovalStateMachine()
    doc = seed_document(store)
    async with uow_factory() as uow:
        await workflow.submit_for_review(uow, doc, paralegal)
        approval = await workflow.approve(uow, doc, attorney)

    async with uow_factory() as uow:
        history = await workflow.get_history(uow, doc)
        latest = await workflow.get_latest_approval(uow, doc.id)

    assert history.state == LetterState.APPROVED
    assert [e.to_state for e in history.events] == [LetterState.PENDING_REVIEW, LetterState.APPROVED]
    assert latest == approval.event
