from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable, Mapping
from typing import Any

import pytest
from aiohttp import test_utils, web

from linewatch._constants import seed_document
from linewatch.config import LinewatchConfig
from linewatch.exceptions import StoreError
from linewatch.store.base import DocumentStore, SnapshotCallback, Unsubscribe
from linewatch.store.memory import MemoryDocumentStore
from linewatch.web.app import create_app
from linewatch.web.keys import VIEW_KEY

PATH = "dashboard/data"


class _FailingStore:
    async def get(self, path: str) -> dict[str, Any] | None:
        raise StoreError("store unreachable", path=path)

    async def create(self, path: str, data: Mapping[str, Any]) -> bool:
        raise StoreError("store unreachable", path=path)

    async def set(self, path: str, data: Mapping[str, Any]) -> None:
        raise StoreError("store unreachable", path=path)

    async def merge(self, path: str, data: Mapping[str, Any]) -> None:
        raise StoreError("store unreachable", path=path)

    async def update(self, path: str, fields: Mapping[str, Any]) -> None:
        raise StoreError("store unreachable", path=path)

    def subscribe(self, path: str, callback: SnapshotCallback) -> Unsubscribe:
        return lambda: None


@contextlib.asynccontextmanager
async def _client(
    store: DocumentStore | None = None,
    **config: Any,
) -> AsyncIterator[tuple[test_utils.TestClient, web.Application]]:
    config.setdefault("threshold_debounce", 0.01)
    app = create_app(LinewatchConfig(**config), store=store if store is not None else MemoryDocumentStore())
    async with test_utils.TestClient(test_utils.TestServer(app)) as client:
        yield client, app


async def _seeded_store() -> MemoryDocumentStore:
    store = MemoryDocumentStore()
    await store.set(PATH, seed_document())
    return store


async def _next_message(ws: Any, predicate: Callable[[dict[str, Any]], bool]) -> dict[str, Any]:
    for _ in range(20):
        message = await ws.receive_json(timeout=2.0)
        if predicate(message):
            return message
    raise AssertionError("expected websocket message never arrived")


@pytest.mark.asyncio
async def test_post_update_applies_array_payload() -> None:
    store = await _seeded_store()
    async with _client(store) as (client, _app):
        resp = await client.post("/update", json={"distributionPoints": [{"id": "dp-2", "current": 2.25}]})

        assert resp.status == 200
        assert await resp.json() == {"success": True}

    stored = await store.get(PATH)
    assert stored is not None
    assert stored["distributionPoints"][1]["current"] == 2.25


@pytest.mark.asyncio
async def test_post_update_applies_legacy_mapping_payload() -> None:
    store = await _seeded_store()
    async with _client(store) as (client, _app):
        resp = await client.post("/update", json={"distributionPoints": {"dp-2": {"current": 2.25}}})

        assert resp.status == 200

    stored = await store.get(PATH)
    assert stored is not None
    assert stored["distributionPoints"][1]["current"] == 2.25


@pytest.mark.asyncio
async def test_post_update_partial_batch_still_succeeds() -> None:
    store = await _seeded_store()
    async with _client(store) as (client, _app):
        resp = await client.post(
            "/update",
            json={"distributionPoints": [{"id": "nope", "current": 1.0}, {"current": 2.0}]},
        )

        assert resp.status == 200
        assert await resp.json() == {"success": True}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {},
        {"distributionPoints": "dp-1"},
        {"distributionPoints": None},
        [{"id": "dp-1", "current": 1.0}],
    ],
)
async def test_post_update_rejects_missing_points_field(body: Any) -> None:
    store = await _seeded_store()
    async with _client(store) as (client, _app):
        resp = await client.post("/update", json=body)

        assert resp.status == 400
        assert "error" in await resp.json()


@pytest.mark.asyncio
async def test_post_update_rejects_non_json_body() -> None:
    async with _client(await _seeded_store()) as (client, _app):
        resp = await client.post("/update", data="not json", headers={"Content-Type": "application/json"})

        assert resp.status == 400


@pytest.mark.asyncio
async def test_post_update_before_seeding_is_not_found() -> None:
    async with _client() as (client, _app):
        resp = await client.post("/update", json={"distributionPoints": []})

        assert resp.status == 404
        assert await resp.json() == {"error": "Dashboard data not found"}


@pytest.mark.asyncio
async def test_post_update_store_failure_is_server_error() -> None:
    async with _client(_FailingStore()) as (client, _app):
        resp = await client.post("/update", json={"distributionPoints": []})

        assert resp.status == 500
        assert await resp.json() == {"error": "Internal Server Error"}


@pytest.mark.asyncio
async def test_get_update_is_informational() -> None:
    async with _client() as (client, _app):
        resp = await client.get("/update")

        assert resp.status == 200
        assert "message" in await resp.json()


@pytest.mark.asyncio
async def test_get_dashboard_seeds_and_returns_camel_case_state() -> None:
    store = MemoryDocumentStore()
    async with _client(store) as (client, _app):
        resp = await client.get("/api/dashboard")
        body = await resp.json()

    assert resp.status == 200
    assert body["transformer"]["relay"]["id"] == "relay-t1"
    assert len(body["distributionPoints"]) == 7
    assert body["safetyThreshold"] == 20.0
    assert await store.get(PATH) is not None


@pytest.mark.asyncio
async def test_get_dashboard_serves_fallback_when_store_fails() -> None:
    async with _client(_FailingStore()) as (client, _app):
        resp = await client.get("/api/dashboard")
        body = await resp.json()

    assert resp.status == 200
    assert body["transformer"]["relay"]["isOn"] is False
    assert body["distributionPoints"] == []


@pytest.mark.asyncio
async def test_relay_endpoint_accepts_and_applies_in_background() -> None:
    store = await _seeded_store()
    async with _client(store) as (client, app):
        resp = await client.post("/api/relays/dp-3", json={"isOn": False})
        assert resp.status == 202
        await app[VIEW_KEY].wait_for_commands()

        chart = await (await client.get("/api/chart")).json()

    stored = await store.get(PATH)
    assert stored is not None
    assert stored["distributionPoints"][2]["isOn"] is False
    assert chart[-1]["averageCurrent"] == round((11.63 + 10.54 + 16.55 + 12.56 + 9.78 + 8.42) / 6, 2)


@pytest.mark.asyncio
async def test_relay_endpoint_rejects_non_boolean() -> None:
    async with _client(await _seeded_store()) as (client, _app):
        resp = await client.post("/api/relays/dp-3", json={"isOn": "off"})

        assert resp.status == 400


@pytest.mark.asyncio
async def test_threshold_endpoint_debounces_to_last_value() -> None:
    store = await _seeded_store()
    async with _client(store, threshold_debounce=0.1) as (client, app):
        for value in (21, 22, 23.5):
            resp = await client.put("/api/threshold", json={"value": value})
            assert resp.status == 202
        await asyncio.sleep(0.3)
        await app[VIEW_KEY].wait_for_commands()

    stored = await store.get(PATH)
    assert stored is not None
    assert stored["safetyThreshold"] == 23.5


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [0, -3, "20", None, True])
async def test_threshold_endpoint_rejects_invalid_values(value: Any) -> None:
    async with _client(await _seeded_store()) as (client, _app):
        resp = await client.put("/api/threshold", json={"value": value})

        assert resp.status == 400


@pytest.mark.asyncio
async def test_websocket_pushes_snapshot_on_connect_and_after_ingestion() -> None:
    store = MemoryDocumentStore()
    async with _client(store) as (client, _app):
        async with client.ws_connect("/ws") as ws:
            first = await _next_message(ws, lambda m: m["type"] == "snapshot")
            assert first["loaded"] is True
            assert len(first["state"]["distributionPoints"]) == 7

            resp = await client.post("/update", json={"distributionPoints": [{"id": "dp-1", "current": 25.0}]})
            assert resp.status == 200

            update = await _next_message(
                ws,
                lambda m: m["type"] == "snapshot" and m["state"]["distributionPoints"][0]["current"] == 25.0,
            )
            assert update["overloaded"] == ["dp-1"]
            assert len(update["chart"]) >= 2


@pytest.mark.asyncio
async def test_websocket_commands_toggle_relay_and_set_threshold() -> None:
    store = MemoryDocumentStore()
    async with _client(store) as (client, _app):
        async with client.ws_connect("/ws") as ws:
            await _next_message(ws, lambda m: m["type"] == "snapshot")

            await ws.send_json({"type": "toggleRelay", "id": "relay-t1", "isOn": False})
            await _next_message(
                ws,
                lambda m: m["type"] == "snapshot" and m["state"]["transformer"]["relay"]["isOn"] is False,
            )

            for value in (15, 16, 17.5):
                await ws.send_json({"type": "setThreshold", "value": value})
            snapshot = await _next_message(
                ws,
                lambda m: m["type"] == "snapshot" and m["state"]["safetyThreshold"] == 17.5,
            )
            assert snapshot["state"]["transformer"]["relay"]["isOn"] is False


@pytest.mark.asyncio
async def test_websocket_reports_bad_messages() -> None:
    async with _client() as (client, _app):
        async with client.ws_connect("/ws") as ws:
            await ws.send_str("{not json")
            error = await _next_message(ws, lambda m: m["type"] == "error")
            assert "JSON" in error["error"]

            await ws.send_json({"type": "setThreshold", "value": -1})
            error = await _next_message(ws, lambda m: m["type"] == "error")
            assert "positive" in error["error"]
