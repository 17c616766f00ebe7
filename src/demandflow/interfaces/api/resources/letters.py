"""Letter API resources."""

from uuid import UUID

import falcon
import falcon.asgi

from demandflow.application.dto.document_dto import DocumentCreateInput
from demandflow.application.use_cases.document_coordinator import DocumentCoordinator
from demandflow.interfaces.api.request_context import actor_from_request
from demandflow.interfaces.api.resources.serializers import document_to_dict


class LettersResource:
    """POST /v1/letters - create a letter from generated content."""

    def __init__(self, coordinator: DocumentCoordinator) -> None:
        self._coordinator = coordinator

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        actor = actor_from_request(req)
        try:
            body = await req.get_media()
            content = body["content"]
            score = body["compliance_score"]
            if not isinstance(content, str):
                raise ValueError("content must be a string")
        except (KeyError, TypeError, ValueError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "validation_error", "message": str(e)}
            return

        document = await self._coordinator.create_document(
            actor, DocumentCreateInput(content=content, compliance_score=score)
        )
        resp.media = document_to_dict(document)
        resp.status = falcon.HTTP_201


class LetterResource:
    """GET/DELETE /v1/letters/{letter_id}."""

    def __init__(self, coordinator: DocumentCoordinator) -> None:
        self._coordinator = coordinator

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        actor_from_request(req)
        document = await self._coordinator.get_document(letter_id)
        resp.media = document_to_dict(document)

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, letter_id: UUID
    ) -> None:
        actor = actor_from_request(req)
        await self._coordinator.delete_document(letter_id, actor)
        resp.status = falcon.HTTP_204
