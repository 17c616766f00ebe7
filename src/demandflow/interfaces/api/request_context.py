"""Build actor attribution from the incoming request."""

import falcon
import falcon.asgi

from demandflow.domain.value_objects import Actor


def actor_from_request(req: falcon.asgi.Request) -> Actor:
    """Acting user with role, client IP and user agent.

    The IP is the one resolved by ClientAddressMiddleware, or the socket peer
    when that middleware is not installed. Raises 401 without an
    authenticated user and 403 when the user holds no firm role.
    """
    user = getattr(req.context, "user", None)
    if not user:
        raise falcon.HTTPUnauthorized(title="Unauthorized")
    role = user.role
    if role is None:
        raise falcon.HTTPForbidden(title="Forbidden", description="No firm role assigned")
    return Actor(
        actor_id=user.user_id,
        role=role,
        ip_address=getattr(req.context, "client_ip", None) or req.remote_addr,
        user_agent=req.user_agent,
    )
