"""REST endpoints for dashboard reads and operator commands.

Commands are accepted (``202``) and executed in the background; their
outcome is logged, not returned.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from aiohttp import web

from linewatch.web.keys import SERVICE_KEY, THRESHOLD_DEBOUNCER_KEY, VIEW_KEY

_logger = logging.getLogger(__name__)

routes = web.RouteTableDef()


def parse_threshold(value: Any) -> float | None:
    """Accept only finite, positive numbers as a safety threshold."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    result = float(value)
    if not math.isfinite(result) or result <= 0:
        return None
    return result


async def _json_object(request: web.Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


@routes.get("/api/dashboard")
async def get_dashboard(request: web.Request) -> web.Response:
    state = await request.app[SERVICE_KEY].get()
    return web.json_response(state.to_document())


@routes.get("/api/chart")
async def get_chart(request: web.Request) -> web.Response:
    view = request.app[VIEW_KEY]
    return web.json_response([point.to_document() for point in view.chart])


@routes.post("/api/relays/{relay_id}")
async def post_relay(request: web.Request) -> web.Response:
    body = await _json_object(request)
    is_on = body.get("isOn") if body is not None else None
    if not isinstance(is_on, bool):
        return web.json_response({"error": "Body must be {\"isOn\": true|false}"}, status=400)

    relay_id = request.match_info["relay_id"]
    request.app[VIEW_KEY].request_relay_toggle(relay_id, is_on)
    return web.json_response({"accepted": True}, status=202)


@routes.put("/api/threshold")
async def put_threshold(request: web.Request) -> web.Response:
    body = await _json_object(request)
    value = parse_threshold(body.get("value")) if body is not None else None
    if value is None:
        return web.json_response({"error": "Threshold must be a positive number"}, status=400)

    request.app[THRESHOLD_DEBOUNCER_KEY].push(value)
    return web.json_response({"accepted": True}, status=202)
