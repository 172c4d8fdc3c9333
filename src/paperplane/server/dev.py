"""Server entry point.

Starts a pounce ASGI server with a live ``Mount`` object. The transport,
TLS, and worker management all belong to pounce.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for *app*.

    Pounce's ``run()`` takes an import string, but here we hold a live
    ASGI callable, so ``pounce.Server`` is used directly.

    Args:
        app: ASGI callable (a paperplane ``Mount``).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes (development only).
        app_path: Optional ``"module:attribute"`` import string so pounce
            can re-import the app on each reload.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = (
            "Serving requires the 'pounce' ASGI server. "
            "Install it with: pip install paperplane[server]"
        )
        raise RuntimeError(msg) from exc

    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    server = Server(config, app, app_path=app_path)
    server.run()
