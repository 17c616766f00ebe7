"""Approval workflow API resources."""

from uuid import UUID

import falcon
import falcon.asgi

from demandflow.application.use_cases.document_coordinator import DocumentCoordinator
from demandflow.domain.value_objects import WorkflowAction
from demandflow.interfaces.api.request_context import actor_from_request
from demandflow.interfaces.api.resources.serializers import (
    event_to_dict,
    history_to_dict,
    transition_to_dict,
)


class WorkflowActionResource:
    """POST /v1/letters/{letter_id}/workflow/{action}.

    ``approve`` accepts an optional ``signature``; ``reject`` requires a
    ``reason``.
    """

    def __init__(self, coordinator: DocumentCoordinator) -> None:
        self._coordinator = coordinator

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        letter_id: UUID,
        action: str,
    ) -> None:
        actor = actor_from_request(req)
        try:
            workflow_action = WorkflowAction(action)
        except ValueError:
            raise falcon.HTTPNotFound(description=f"Unknown workflow action: {action}") from None

        body = await req.get_media(default_when_empty={}) or {}
        if not isinstance(body, dict):
            raise falcon.HTTPBadRequest(title="Invalid body", description="Expected a JSON object")
        signature = body.get("signature")
        reason = body.get("reason")
        if signature is not None and not isinstance(signature, str):
            raise falcon.HTTPBadRequest(title="Invalid signature", description="Expected a string")
        if reason is not None and not isinstance(reason, str):
            raise falcon.HTTPBadRequest(title="Invalid reason", description="Expected a string")

        result = await self._coordinator.transition(
            letter_id, workflow_action, actor, signature=signature, reason=reason
        )
        resp.media = transition_to_dict(result)


class HistoryResource:
    """GET /v1/letters/{letter_id}/history - approval timeline."""

    def __init__(self, coordinator: DocumentCoordinator) -> None:
        self._coordinator = coordinator

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        actor_from_request(req)
        history = await self._coordinator.get_history(letter_id)
        resp.media = history_to_dict(history)

    async def on_get_approval(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        """GET /v1/letters/{letter_id}/approval - latest signed approval."""
        actor_from_request(req)
        event = await self._coordinator.get_latest_approval(letter_id)
        if event is None:
            raise falcon.HTTPNotFound(description="Letter has not been approved")
        resp.media = event_to_dict(event)
