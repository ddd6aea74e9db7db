"""Websocket realtime read path (``/ws``).

Each connection gets its own :class:`DashboardViewModel`. Every store
write produces one view update; the socket always sends the latest view,
so a slow client skips intermediate snapshots instead of queueing them.

Client messages::

    {"type": "toggleRelay", "id": "dp-3", "isOn": false}
    {"type": "setThreshold", "value": 18.5}

Threshold edits are debounced per connection.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Any

from aiohttp import WSMsgType, web

from linewatch.view.debounce import Debouncer
from linewatch.view.model import DashboardViewModel
from linewatch.web.commands import parse_threshold
from linewatch.web.keys import CONFIG_KEY, SERVICE_KEY, SOCKETS_KEY

_logger = logging.getLogger(__name__)

routes = web.RouteTableDef()


def snapshot_message(view: DashboardViewModel) -> dict[str, Any]:
    state = view.state
    return {
        "type": "snapshot",
        "loaded": view.loaded,
        "state": state.to_document(),
        "chart": [point.to_document() for point in view.chart],
        "averageCurrent": view.average_current,
        "overloaded": [point.id for point in view.overloaded_points],
    }


def submit_threshold(view: DashboardViewModel, value: float) -> None:
    """Forward a settled threshold edit unless it matches the stored value."""
    if value == view.state.safety_threshold:
        return
    view.request_threshold_change(value)


def handle_message(view: DashboardViewModel, debouncer: Debouncer[float], raw: str) -> str | None:
    """Dispatch one client message. Returns an error description, or ``None``."""
    try:
        message = json.loads(raw)
    except ValueError:
        return "message is not JSON"
    if not isinstance(message, dict):
        return "message must be an object"

    kind = message.get("type")
    if kind == "toggleRelay":
        relay_id = message.get("id")
        is_on = message.get("isOn")
        if not isinstance(relay_id, str) or not isinstance(is_on, bool):
            return "toggleRelay needs string 'id' and boolean 'isOn'"
        view.request_relay_toggle(relay_id, is_on)
        return None
    if kind == "setThreshold":
        value = parse_threshold(message.get("value"))
        if value is None:
            return "setThreshold needs a positive number 'value'"
        debouncer.push(value)
        return None
    return f"unknown message type: {kind!r}"


async def _push_views(ws: web.WebSocketResponse, view: DashboardViewModel, changed: asyncio.Event) -> None:
    while not ws.closed:
        await changed.wait()
        changed.clear()
        try:
            await ws.send_json(snapshot_message(view))
        except ConnectionResetError:
            _logger.debug("Websocket closed while sending snapshot")
            return


@routes.get("/ws")
async def dashboard_socket(request: web.Request) -> web.WebSocketResponse:
    ws = web.WebSocketResponse(heartbeat=30.0)
    await ws.prepare(request)

    config = request.app[CONFIG_KEY]
    service = request.app[SERVICE_KEY]
    sockets = request.app[SOCKETS_KEY]

    changed = asyncio.Event()
    initial_state = await service.get()
    view = DashboardViewModel(
        service,
        initial_state=initial_state,
        window=config.chart_window,
        on_change=lambda _view: changed.set(),
    )
    debouncer: Debouncer[float] = Debouncer(config.threshold_debounce, lambda value: submit_threshold(view, value))

    sockets.add(ws)
    _logger.debug("Dashboard websocket connected (%d open)", len(sockets))
    async with view:
        changed.set()
        sender = asyncio.create_task(_push_views(ws, view, changed))
        try:
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    error = handle_message(view, debouncer, msg.data)
                    if error is not None:
                        await ws.send_json({"type": "error", "error": error})
                elif msg.type == WSMsgType.ERROR:
                    _logger.debug("Websocket closed with exception", exc_info=ws.exception())
        finally:
            debouncer.flush()
            sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sender
            sockets.discard(ws)

    _logger.debug("Dashboard websocket disconnected (%d open)", len(sockets))
    return ws
