"""Document store capability interface.

The dashboard lives in a single JSON document in an external
document-oriented store. Services only rely on this structural
interface, so any backend (or a test double) that offers these
primitives can be passed in explicitly.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

SnapshotCallback = Callable[[dict[str, Any]], None]
"""Receives the full current document (not a diff) after every write."""

Unsubscribe = Callable[[], None]


class DocumentStore(Protocol):
    """Structural store interface used by services.

    Write granularity matters to callers:

    - :meth:`set` replaces the whole document.
    - :meth:`merge` deep-merges mappings into the document (lists and
      scalars are replaced); only the supplied fields change.
    - :meth:`update` replaces the supplied top-level fields and requires
      the document to exist.

    Implementations raise :class:`linewatch.exceptions.StoreError` on I/O
    failure and :class:`linewatch.exceptions.DocumentNotFoundError` from
    :meth:`update` when the document is absent. Backend errors must be
    wrapped in :class:`~linewatch.exceptions.StoreError`: the service turns
    only these two into a :class:`~linewatch.models.commands.CommandResult`,
    and anything else propagates to a direct caller.
    """

    async def get(self, path: str) -> dict[str, Any] | None:
        """Return a copy of the document, or ``None`` when absent."""
        ...

    async def create(self, path: str, data: Mapping[str, Any]) -> bool:
        """Write *data* only if the document is absent. Return ``True`` when written."""
        ...

    async def set(self, path: str, data: Mapping[str, Any]) -> None:
        ...

    async def merge(self, path: str, data: Mapping[str, Any]) -> None:
        ...

    async def update(self, path: str, fields: Mapping[str, Any]) -> None:
        ...

    def subscribe(self, path: str, callback: SnapshotCallback) -> Unsubscribe:
        """Register *callback* for full-snapshot pushes on every write.

        If the document exists, the current snapshot is delivered
        immediately. Calling the returned function stops delivery.
        """
        ...
