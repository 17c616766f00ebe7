"""Fixtures for API tests."""

import falcon.asgi
import pytest
from falcon.testing import TestClient

from demandflow.interfaces.api.app import create_app
from demandflow.interfaces.api.middleware.auth import RequestUser
from demandflow.interfaces.api.middleware.client_address import ClientAddressMiddleware
from demandflow.interfaces.api.resources.health import HealthResource


class AuthBypassMiddleware:
    """Middleware that sets context.user from test headers.

    ``X-Test-Role`` carries comma-separated roles (default PARALEGAL),
    ``X-Test-User`` the user id.
    """

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        roles = req.get_header("X-Test-Role", default="PARALEGAL")
        req.context.user = RequestUser(
            user_id=req.get_header("X-Test-User", default="test-user-1"),
            roles=[r for r in roles.split(",") if r],
        )


@pytest.fixture
def app(coordinator):
    """Falcon ASGI app with API resources for testing."""
    return create_app(
        coordinator,
        HealthResource(),
        middleware=[ClientAddressMiddleware(), AuthBypassMiddleware()],
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)


ATTORNEY = {"X-Test-Role": "ATTORNEY", "X-Test-User": "attorney-1"}
DEBTOR = {"X-Test-Role": "DEBTOR", "X-Test-User": "debtor-1"}
