"""Client address middleware - resolves the caller IP recorded on approvals."""

import falcon.asgi


class ClientAddressMiddleware:
    """Set ``req.context.client_ip`` from the socket peer.

    Forwarding headers are client-controlled, so they are read only when the
    direct peer is one of ``trusted_proxies``. The client is then the nearest
    hop in the forwarding chain that is not itself a trusted proxy.
    """

    def __init__(self, trusted_proxies: list[str] | None = None) -> None:
        self._trusted = frozenset(trusted_proxies or ())

    def resolve(self, req: falcon.asgi.Request) -> str | None:
        peer = req.remote_addr
        if peer not in self._trusted:
            return peer
        route = req.access_route
        for hop in reversed(route):
            if hop not in self._trusted:
                return hop
        return route[0] if route else peer

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        req.context.client_ip = self.resolve(req)
