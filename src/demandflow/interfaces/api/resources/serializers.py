"""JSON shapes returned by the letter API."""

from typing import Any

from demandflow.application.dto.version_dto import DiffResult, VersionNavigation, VersionSummary
from demandflow.application.dto.workflow_dto import TransitionResult, WorkflowHistory
from demandflow.domain.entities import Document, TransitionEvent, VersionSnapshot
from demandflow.domain.services.diff_engine import DiffLine, side_by_side
from demandflow.domain.services.state_machine import allowed_actions
from demandflow.domain.value_objects import TransitionEventType


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def document_to_dict(document: Document) -> dict[str, Any]:
    return {
        "id": str(document.id),
        "state": str(document.state),
        "current_version": document.current_version,
        "content": document.content,
        "compliance_score": document.compliance_score,
        "editable": document.is_editable,
        "allowed_actions": [str(a) for a in allowed_actions(document.state)],
        "created_by": document.created_by,
        "created_at": _iso(document.created_at),
        "updated_at": _iso(document.updated_at),
        "sent_at": _iso(document.sent_at),
    }


def snapshot_to_dict(snapshot: VersionSnapshot) -> dict[str, Any]:
    return {
        "version_number": snapshot.version_number,
        "content": snapshot.content,
        "compliance_score": snapshot.compliance_score,
        "origin_instruction": snapshot.origin_instruction,
        "created_by": snapshot.created_by,
        "created_at": _iso(snapshot.created_at),
    }


def summary_to_dict(summary: VersionSummary) -> dict[str, Any]:
    return {
        "version_number": summary.version_number,
        "origin_instruction": summary.origin_instruction,
        "compliance_score": summary.compliance_score,
        "created_by": summary.created_by,
        "created_at": _iso(summary.created_at),
        "is_current": summary.is_current,
    }


def navigation_to_dict(result: VersionNavigation) -> dict[str, Any]:
    return {
        "content": result.snapshot.content,
        "compliance_score": result.snapshot.compliance_score,
        "current_version": result.current_version,
        "total_versions": result.total_versions,
    }


def _line_to_dict(line: DiffLine | None) -> dict[str, Any] | None:
    if line is None:
        return None
    return {
        "type": str(line.kind),
        "content": line.content,
        "old_line_number": line.old_line_number,
        "new_line_number": line.new_line_number,
    }


def diff_to_dict(result: DiffResult, view: str = "unified") -> dict[str, Any]:
    body: dict[str, Any] = {
        "old_version": result.old_version,
        "new_version": result.new_version,
        "stats": {"additions": result.stats.additions, "deletions": result.stats.deletions},
        "similarity": result.similarity,
    }
    if view == "side-by-side":
        body["rows"] = [
            {"left": _line_to_dict(row.left), "right": _line_to_dict(row.right)}
            for row in side_by_side(result.lines)
        ]
    else:
        body["lines"] = [_line_to_dict(line) for line in result.lines]
    return body


def event_to_dict(event: TransitionEvent) -> dict[str, Any]:
    return {
        "id": str(event.id),
        "action": str(event.event_type),
        "from_state": str(event.from_state),
        "to_state": str(event.to_state),
        "actor_id": event.actor_id,
        "actor_role": str(event.actor_role),
        "created_at": _iso(event.created_at),
        "ip_address": event.ip_address,
        "user_agent": event.user_agent,
        "payload": event.payload,
    }


def transition_to_dict(result: TransitionResult) -> dict[str, Any]:
    body = {"state": str(result.state), "event": event_to_dict(result.event)}
    if result.event.event_type == TransitionEventType.APPROVED:
        body["approval_id"] = str(result.approval_id)
    return body


def history_to_dict(history: WorkflowHistory) -> dict[str, Any]:
    return {
        "state": str(history.state),
        "items": [event_to_dict(e) for e in history.events],
    }
