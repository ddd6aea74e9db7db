"""In-memory document store.

Implements :class:`linewatch.store.base.DocumentStore` for single-process
deployments and tests. Every write pushes a full snapshot to the path's
subscribers synchronously, in registration order.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from typing import Any

from linewatch.exceptions import DocumentNotFoundError, StoreError
from linewatch.store.base import SnapshotCallback, Unsubscribe

_logger = logging.getLogger(__name__)


def _json_copy(path: str, data: Mapping[str, Any]) -> dict[str, Any]:
    """Copy *data*, rejecting anything that is not plain JSON."""
    try:
        copied = json.loads(json.dumps(dict(data), allow_nan=False))
    except (TypeError, ValueError) as exc:
        raise StoreError(f"Document at {path} is not JSON-serializable: {exc}", path=path) from exc
    return copied


def _deep_merge(target: dict[str, Any], incoming: dict[str, Any]) -> dict[str, Any]:
    """Merge *incoming* into *target*.

    Nested mappings merge key by key; lists and scalars overwrite.
    """
    for key, value in incoming.items():
        existing = target.get(key)
        if isinstance(value, dict) and isinstance(existing, dict):
            _deep_merge(existing, value)
        else:
            target[key] = value
    return target


class MemoryDocumentStore:
    """Process-local document store keyed by path."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._listeners: dict[str, list[SnapshotCallback]] = {}

    async def get(self, path: str) -> dict[str, Any] | None:
        document = self._documents.get(path)
        if document is None:
            return None
        return copy.deepcopy(document)

    async def create(self, path: str, data: Mapping[str, Any]) -> bool:
        if path in self._documents:
            _logger.debug("Create skipped; %s already exists", path)
            return False
        self._documents[path] = _json_copy(path, data)
        self._notify(path)
        return True

    async def set(self, path: str, data: Mapping[str, Any]) -> None:
        self._documents[path] = _json_copy(path, data)
        self._notify(path)

    async def merge(self, path: str, data: Mapping[str, Any]) -> None:
        incoming = _json_copy(path, data)
        document = self._documents.setdefault(path, {})
        _deep_merge(document, incoming)
        self._notify(path)

    async def update(self, path: str, fields: Mapping[str, Any]) -> None:
        document = self._documents.get(path)
        if document is None:
            raise DocumentNotFoundError(path)
        document.update(_json_copy(path, fields))
        self._notify(path)

    def subscribe(self, path: str, callback: SnapshotCallback) -> Unsubscribe:
        listeners = self._listeners.setdefault(path, [])
        listeners.append(callback)

        document = self._documents.get(path)
        if document is not None:
            self._deliver(path, callback, document)

        def unsubscribe() -> None:
            current = self._listeners.get(path)
            if current is not None and callback in current:
                current.remove(callback)

        return unsubscribe

    def _notify(self, path: str) -> None:
        document = self._documents.get(path)
        if document is None:
            return
        for callback in list(self._listeners.get(path, ())):
            self._deliver(path, callback, document)

    @staticmethod
    def _deliver(path: str, callback: SnapshotCallback, document: dict[str, Any]) -> None:
        try:
            callback(copy.deepcopy(document))
        except Exception:
            _logger.exception("Snapshot listener for %s failed", path)
