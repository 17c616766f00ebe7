"""Map domain errors to HTTP responses.

Guard and state errors carry the fields the UI needs for its remediation
message (score vs threshold, minimum reason length, current state).
"""

import logging
from typing import Any

import falcon
import falcon.asgi

from demandflow.domain.exceptions import (
    ComplianceBelowThresholdError,
    ConflictError,
    ContentLockedError,
    DemandFlowError,
    InvalidTransitionError,
    MissingReasonError,
    NoNextVersionError,
    NoPriorVersionError,
    NotFound,
    PermissionDenied,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_response(ex: DemandFlowError) -> tuple[str, dict[str, Any]]:
    """Return (status, body) for a domain error."""
    body: dict[str, Any] = {"message": str(ex)}
    if isinstance(ex, NotFound):
        return falcon.HTTP_404, {"error": "not_found", **body}
    if isinstance(ex, PermissionDenied):
        return falcon.HTTP_403, {"error": "permission_denied", **body}
    if isinstance(ex, ValidationError):
        return falcon.HTTP_400, {"error": "validation_error", **body}
    if isinstance(ex, ContentLockedError):
        return falcon.HTTP_409, {"error": "content_locked", "state": str(ex.state), **body}
    if isinstance(ex, InvalidTransitionError):
        return falcon.HTTP_409, {
            "error": "invalid_transition",
            "action": str(ex.action),
            "state": str(ex.state),
            **body,
        }
    if isinstance(ex, ComplianceBelowThresholdError):
        return falcon.HTTP_422, {
            "error": "compliance_below_threshold",
            "score": ex.score,
            "threshold": ex.threshold,
            **body,
        }
    if isinstance(ex, MissingReasonError):
        return falcon.HTTP_422, {"error": "missing_reason", "min_length": ex.min_length, **body}
    if isinstance(ex, NoPriorVersionError):
        return falcon.HTTP_409, {"error": "no_prior_version", **body}
    if isinstance(ex, NoNextVersionError):
        return falcon.HTTP_409, {"error": "no_next_version", **body}
    if isinstance(ex, ConflictError):
        return falcon.HTTP_409, {"error": "conflict", **body}
    return falcon.HTTP_400, {"error": "error", **body}


async def handle_domain_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: DemandFlowError, params: dict
) -> None:
    """Falcon error handler for DemandFlowError."""
    status, body = error_response(ex)
    if isinstance(ex, NotFound):
        logger.info("%s %s: %s", req.method, req.path, ex)
    resp.status = status
    resp.media = body


async def handle_timeout(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: TimeoutError, params: dict
) -> None:
    """Operation exceeded its time budget and was rolled back."""
    logger.warning("%s %s timed out", req.method, req.path)
    resp.status = falcon.HTTP_503
    resp.media = {"error": "timeout", "message": "Operation timed out, please retry"}


async def handle_unexpected(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params: dict
) -> None:
    """Log with traceback and hide details from the caller."""
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}
