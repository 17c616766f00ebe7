"""Application entry point and composition root."""

import logging

from demandflow import __version__
from demandflow.application.services.approval_state_machine import ApprovalStateMachine
from demandflow.application.services.version_store import VersionStore
from demandflow.application.use_cases.document_coordinator import DocumentCoordinator
from demandflow.config import get_settings
from demandflow.infrastructure.audit.logging_sink import LoggingAuditSink
from demandflow.infrastructure.auth.keycloak_provider import KeycloakProvider
from demandflow.infrastructure.persistence.postgres.connection import create_pool
from demandflow.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from demandflow.interfaces.api.app import create_app
from demandflow.interfaces.api.middleware.auth import AuthMiddleware
from demandflow.interfaces.api.middleware.client_address import ClientAddressMiddleware
from demandflow.interfaces.api.middleware.cors import CORSMiddleware
from demandflow.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from demandflow.interfaces.api.resources.health import HealthResource

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Root logger setup shared by the server and scripts."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """CLI entry point."""
    print(f"DemandFlow v{__version__}")


def create_demandflow_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings.log_level)

    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        timeout=settings.operation_timeout_seconds,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak not configured; requests run as anonymous")

    coordinator = DocumentCoordinator(
        unit_of_work_factory=uow_factory,
        version_store=VersionStore(),
        state_machine=ApprovalStateMachine(
            compliance_threshold=settings.compliance_threshold,
            min_reason_length=settings.min_rejection_reason_length,
        ),
        audit_sink=LoggingAuditSink(),
        conflict_retries=settings.conflict_retries,
        timeout_seconds=settings.operation_timeout_seconds,
    )

    cors_origins = [
        o.strip() for o in settings.cors_origins.split(",") if o.strip()
    ]
    trusted_proxies = [
        p.strip() for p in settings.trusted_proxies.split(",") if p.strip()
    ]
    return create_app(
        coordinator,
        HealthResource(pool),
        middleware=[
            CORSMiddleware(cors_origins),
            ClientAddressMiddleware(trusted_proxies),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak, anonymous_role=settings.anonymous_role),
        ],
    )


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_demandflow_app()
    # Forwarding headers are resolved by ClientAddressMiddleware.
    uvicorn.run(app, host="0.0.0.0", port=8000, proxy_headers=False)
