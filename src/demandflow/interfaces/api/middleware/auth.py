"""Auth middleware - extracts the acting user from JWT or a development role."""

import asyncio
from dataclasses import dataclass, field

import falcon.asgi

from demandflow.domain.value_objects import ActorRole
from demandflow.domain.value_objects.actor_role import ROLE_PRECEDENCE


@dataclass
class RequestUser:
    """User from request context."""

    user_id: str
    roles: list[str] = field(default_factory=list)
    email: str | None = None
    username: str | None = None

    @property
    def role(self) -> ActorRole | None:
        """Most privileged firm role carried by the user, if any."""
        held = {r.upper() for r in self.roles}
        for role in ROLE_PRECEDENCE:
            if role.value in held:
                return role
        return None


class AuthMiddleware:
    """Middleware that validates JWT and sets req.context.user.

    Requests without a bearer token become ``anonymous``; they only get a
    role when ``anonymous_role`` is configured.
    """

    def __init__(self, keycloak_provider=None, anonymous_role: str | None = None) -> None:
        self._keycloak = keycloak_provider
        self._anonymous_roles = [anonymous_role] if anonymous_role else []

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract user from Authorization header."""
        auth = req.get_header("Authorization")
        if auth and auth.startswith("Bearer "):
            token = auth[7:]
            if self._keycloak:
                user = await asyncio.to_thread(self._keycloak.decode_token, token)
                if user:
                    req.context.user = RequestUser(
                        user_id=user.user_id,
                        roles=list(user.realm_roles),
                        email=user.email,
                        username=user.username,
                    )
                    return
            req.context.user = None
        else:
            req.context.user = RequestUser(user_id="anonymous", roles=self._anonymous_roles)
