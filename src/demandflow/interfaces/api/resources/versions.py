"""Version history API resources."""

from uuid import UUID

import falcon
import falcon.asgi

from demandflow.application.dto.version_dto import CaptureInput
from demandflow.application.use_cases.document_coordinator import DocumentCoordinator
from demandflow.interfaces.api.request_context import actor_from_request
from demandflow.interfaces.api.resources.serializers import (
    diff_to_dict,
    navigation_to_dict,
    snapshot_to_dict,
    summary_to_dict,
)


class VersionsResource:
    """GET/POST /v1/letters/{letter_id}/versions - list and capture versions."""

    def __init__(self, coordinator: DocumentCoordinator) -> None:
        self._coordinator = coordinator

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        """Versions newest first."""
        actor_from_request(req)
        versions = await self._coordinator.list_versions(letter_id)
        resp.media = {"items": [summary_to_dict(v) for v in versions]}

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        """Record a manual edit or a refinement as the next version."""
        actor = actor_from_request(req)
        try:
            body = await req.get_media()
            content = body["content"]
            score = body["compliance_score"]
            instruction = body.get("instruction")
            if not isinstance(content, str):
                raise ValueError("content must be a string")
            if instruction is not None and not isinstance(instruction, str):
                raise ValueError("instruction must be a string")
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "validation_error", "message": str(e)}
            return

        result = await self._coordinator.capture(
            letter_id,
            CaptureInput(content=content, compliance_score=score, origin_instruction=instruction),
            actor,
        )
        resp.media = navigation_to_dict(result)
        resp.status = falcon.HTTP_201


class VersionResource:
    """GET /v1/letters/{letter_id}/versions/{version_number} - one snapshot."""

    def __init__(self, coordinator: DocumentCoordinator) -> None:
        self._coordinator = coordinator

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        letter_id: UUID,
        version_number: int,
    ) -> None:
        actor_from_request(req)
        snapshot = await self._coordinator.get_version(letter_id, version_number)
        resp.media = snapshot_to_dict(snapshot)


class VersionNavigationResource:
    """POST /v1/letters/{letter_id}/undo and /redo."""

    def __init__(self, coordinator: DocumentCoordinator) -> None:
        self._coordinator = coordinator

    async def on_post_undo(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        actor = actor_from_request(req)
        resp.media = navigation_to_dict(await self._coordinator.undo(letter_id, actor))

    async def on_post_redo(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        actor = actor_from_request(req)
        resp.media = navigation_to_dict(await self._coordinator.redo(letter_id, actor))


class DiffResource:
    """GET /v1/letters/{letter_id}/diff?from=&to=&view=unified|side-by-side."""

    def __init__(self, coordinator: DocumentCoordinator) -> None:
        self._coordinator = coordinator

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        actor_from_request(req)
        v1 = req.get_param_as_int("from", required=True, min_value=1)
        v2 = req.get_param_as_int("to", required=True, min_value=1)
        view = req.get_param("view", default="unified")
        if view not in ("unified", "side-by-side"):
            raise falcon.HTTPBadRequest(
                title="Invalid view", description="view must be unified or side-by-side"
            )
        result = await self._coordinator.diff_between(letter_id, v1, v2)
        resp.media = diff_to_dict(result, view)
