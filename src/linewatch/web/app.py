"""aiohttp application factory."""

from __future__ import annotations

import logging

from aiohttp import WSCloseCode, web

from linewatch.config import LinewatchConfig
from linewatch.dashboard.service import DashboardStateService
from linewatch.store.base import DocumentStore
from linewatch.store.memory import MemoryDocumentStore
from linewatch.view.debounce import Debouncer
from linewatch.view.model import DashboardViewModel
from linewatch.web import commands, ingest, realtime
from linewatch.web.keys import (
    CONFIG_KEY,
    SERVICE_KEY,
    SOCKETS_KEY,
    STORE_KEY,
    THRESHOLD_DEBOUNCER_KEY,
    VIEW_KEY,
)

_logger = logging.getLogger(__name__)


async def index(_request: web.Request) -> web.Response:
    return web.json_response(
        {
            "message": "LineWatch dashboard API",
            "endpoints": {
                "update": "/update",
                "dashboard": "/api/dashboard",
                "chart": "/api/chart",
                "relay": "/api/relays/{relay_id}",
                "threshold": "/api/threshold",
                "websocket": "/ws",
            },
        }
    )


async def _on_startup(app: web.Application) -> None:
    app[VIEW_KEY].open()
    _logger.info("LineWatch serving document %s", app[CONFIG_KEY].document_path)


async def _on_shutdown(app: web.Application) -> None:
    for ws in set(app[SOCKETS_KEY]):
        await ws.close(code=WSCloseCode.GOING_AWAY, message=b"Server shutdown")


async def _on_cleanup(app: web.Application) -> None:
    app[THRESHOLD_DEBOUNCER_KEY].flush()
    view = app[VIEW_KEY]
    view.close()
    await view.wait_for_commands()


def create_app(
    config: LinewatchConfig | None = None,
    *,
    store: DocumentStore | None = None,
) -> web.Application:
    """Build the web application.

    Parameters
    ----------
    config : LinewatchConfig or None
        Server configuration. Defaults to :meth:`LinewatchConfig.from_env`.
    store : DocumentStore or None
        Store client. Defaults to a fresh :class:`MemoryDocumentStore`.
    """
    config = config if config is not None else LinewatchConfig.from_env()
    store = store if store is not None else MemoryDocumentStore()
    service = DashboardStateService(
        store,
        path=config.document_path,
        default_threshold=config.default_threshold,
    )
    view = DashboardViewModel(service, window=config.chart_window)

    app = web.Application()
    app[CONFIG_KEY] = config
    app[STORE_KEY] = store
    app[SERVICE_KEY] = service
    app[VIEW_KEY] = view
    app[THRESHOLD_DEBOUNCER_KEY] = Debouncer(config.threshold_debounce, view.request_threshold_change)
    app[SOCKETS_KEY] = set()

    app.router.add_get("/", index)
    app.add_routes(ingest.routes)
    app.add_routes(commands.routes)
    app.add_routes(realtime.routes)

    app.on_startup.append(_on_startup)
    app.on_shutdown.append(_on_shutdown)
    app.on_cleanup.append(_on_cleanup)
    return app
