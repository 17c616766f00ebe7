"""Falcon ASGI application."""

import falcon.asgi
from falcon.asgi import App

from demandflow.application.use_cases.document_coordinator import DocumentCoordinator
from demandflow.domain.exceptions import DemandFlowError
from demandflow.interfaces.api.errors import (
    handle_domain_error,
    handle_timeout,
    handle_unexpected,
)
from demandflow.interfaces.api.resources.health import HealthResource
from demandflow.interfaces.api.resources.letters import LetterResource, LettersResource
from demandflow.interfaces.api.resources.versions import (
    DiffResource,
    VersionNavigationResource,
    VersionResource,
    VersionsResource,
)
from demandflow.interfaces.api.resources.workflow import HistoryResource, WorkflowActionResource


def create_app(
    coordinator: DocumentCoordinator,
    health_resource: HealthResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes and error handlers."""
    app = falcon.asgi.App(middleware=middleware or [])

    app.add_error_handler(Exception, handle_unexpected)
    app.add_error_handler(TimeoutError, handle_timeout)
    app.add_error_handler(DemandFlowError, handle_domain_error)

    navigation = VersionNavigationResource(coordinator)
    history = HistoryResource(coordinator)

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/letters", LettersResource(coordinator))
    app.add_route("/v1/letters/{letter_id:uuid}", LetterResource(coordinator))
    app.add_route("/v1/letters/{letter_id:uuid}/versions", VersionsResource(coordinator))
    app.add_route(
        "/v1/letters/{letter_id:uuid}/versions/{version_number:int(min=1)}",
        VersionResource(coordinator),
    )
    app.add_route("/v1/letters/{letter_id:uuid}/undo", navigation, suffix="undo")
    app.add_route("/v1/letters/{letter_id:uuid}/redo", navigation, suffix="redo")
    app.add_route("/v1/letters/{letter_id:uuid}/diff", DiffResource(coordinator))
    app.add_route(
        "/v1/letters/{letter_id:uuid}/workflow/{action}", WorkflowActionResource(coordinator)
    )
    app.add_route("/v1/letters/{letter_id:uuid}/history", history)
    app.add_route("/v1/letters/{letter_id:uuid}/approval", history, suffix="approval")
    return app
