"""Mount — bind a pure handler to the ASGI interface.

A handler is any function ``Request -> Response`` (sync or async). ``mount``
wraps it into an ASGI 3.0 application; there is nothing to register and
nothing to freeze::

    from paperplane import json, mount, routes

    app = mount(routes([
        ("GET", "/", lambda req: json({"hello": "world"})),
    ]))

Serve it with any ASGI server, or ``app.run()`` (requires
``pip install paperplane[server]``).
"""

from paperplane._internal.asgi import Receive, Scope, Send
from paperplane._internal.types import Handler
from paperplane.config import AppConfig
from paperplane.errors import ConfigurationError
from paperplane.server.handler import handle_request


class Mount:
    """An ASGI application wrapping a single handler.

    Immutable after construction; one instance safely serves every
    connection concurrently since all per-request state lives in the
    connection's own task.
    """

    __slots__ = ("config", "handler")

    def __init__(self, handler: Handler, config: AppConfig | None = None) -> None:
        if not callable(handler):
            msg = f"mount() expects a callable handler, got {type(handler).__name__}"
            raise ConfigurationError(msg)
        self.handler = handler
        self.config: AppConfig = config or AppConfig()

    def __repr__(self) -> str:
        name = getattr(self.handler, "__qualname__", repr(self.handler))
        return f"Mount({name})"

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start serving with the pounce ASGI server (blocks).

        Args:
            host: Override bind host.
            port: Override bind port.
        """
        from paperplane.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Lifespan scopes are acknowledged; HTTP scopes go through the
        request pipeline; anything else is ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(scope, receive, send, handler=self.handler, config=self.config)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Answer the ASGI lifespan protocol.

        There are no startup or shutdown hooks; the mount only signals
        completion so servers that speak lifespan proceed.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return


def mount(handler: Handler, config: AppConfig | None = None) -> Mount:
    """Wrap *handler* as an ASGI application."""
    return Mount(handler, config)
