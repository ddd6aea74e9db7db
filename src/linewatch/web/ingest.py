"""Telemetry ingestion endpoint (``/update``).

The monitoring hardware POSTs current readings here. Status codes:

- ``200 {"success": true}`` when the batch was applied (even partially)
- ``400 {"error"}`` when ``distributionPoints`` is missing or malformed
- ``404 {"error"}`` when the dashboard document does not exist yet
- ``500 {"error"}`` on store failure
"""

from __future__ import annotations

import logging

from aiohttp import web

from linewatch.exceptions import DocumentNotFoundError, InvalidRequestError
from linewatch.ingestion.apply import ingest_payload
from linewatch.web.keys import CONFIG_KEY, STORE_KEY

_logger = logging.getLogger(__name__)

routes = web.RouteTableDef()


@routes.post("/update")
async def post_update(request: web.Request) -> web.Response:
    try:
        payload = await request.json()
    except ValueError:
        return web.json_response({"error": "Invalid data format"}, status=400)

    store = request.app[STORE_KEY]
    config = request.app[CONFIG_KEY]
    try:
        await ingest_payload(store, payload, path=config.document_path)
    except InvalidRequestError as exc:
        return web.json_response({"error": str(exc)}, status=exc.status_code)
    except DocumentNotFoundError:
        return web.json_response({"error": "Dashboard data not found"}, status=404)
    except Exception:
        _logger.exception("Error applying telemetry update")
        return web.json_response({"error": "Internal Server Error"}, status=500)

    return web.json_response({"success": True})


@routes.get("/update")
async def get_update(_request: web.Request) -> web.Response:
    return web.json_response({"message": "This endpoint is for POST requests from the monitoring hardware."})
