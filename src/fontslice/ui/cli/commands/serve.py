"""CLI command running the HTTP server."""

from __future__ import annotations

from fontslice.server import create_app

from .._options import HostOption, NoJanitorOption, PortOption
from ..state import get_cli_state, resolve_config
from ..utils import build_service


def serve(
    host: HostOption = None,
    port: PortOption = None,
    no_janitor: NoJanitorOption = False,
) -> None:
    """Serve font subsets over HTTP."""
    config = resolve_config(host=host, port=port)
    service, config = build_service(config)
    janitor = None if no_janitor else service.create_janitor(config)
    if janitor is not None:
        janitor.start()

    app = create_app(service)
    get_cli_state().console.log(f"Serving fonts on http://{config.host}:{config.port}")
    try:
        app.run(host=config.host, port=config.port, threaded=True, use_reloader=False)
    finally:
        if janitor is not None:
            janitor.stop()


__all__ = ["serve"]
