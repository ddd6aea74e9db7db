"""Dashboard state service.

Owns the lifecycle of the singleton dashboard document: lazy creation,
opportunistic migration, lookups and the two operator mutations.
"""

from __future__ import annotations

import logging
from typing import Any

from linewatch._constants import DEFAULT_SAFETY_THRESHOLD, DOCUMENT_PATH, seed_document
from linewatch.dashboard.migrations import pending_patch
from linewatch.exceptions import DocumentNotFoundError, StoreError
from linewatch.models.commands import CommandResult, CommandStatus
from linewatch.models.dashboard import DashboardState
from linewatch.store.base import DocumentStore

_logger = logging.getLogger(__name__)


def _apply_relay(document: dict[str, Any], relay_id: str, is_on: bool) -> bool:
    """Flip exactly one relay in *document*; the transformer relay is matched first."""
    transformer = document.get("transformer")
    relay = transformer.get("relay") if isinstance(transformer, dict) else None
    if isinstance(relay, dict) and relay.get("id") == relay_id:
        relay["isOn"] = is_on
        return True

    points = document.get("distributionPoints")
    if not isinstance(points, list):
        return False
    for point in points:
        if isinstance(point, dict) and point.get("id") == relay_id:
            point["isOn"] = is_on
            return True
    return False


class DashboardStateService:
    """Read and mutate the shared dashboard document.

    Parameters
    ----------
    store : DocumentStore
        Store client holding the document. Passed in explicitly.
    path : str
        Document path.
    default_threshold : float
        Threshold used when seeding or back-filling.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        path: str = DOCUMENT_PATH,
        default_threshold: float = DEFAULT_SAFETY_THRESHOLD,
    ) -> None:
        self._store = store
        self._path = path
        self._default_threshold = default_threshold

    @property
    def path(self) -> str:
        return self._path

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def _ensure_document(self) -> dict[str, Any]:
        """Create the document if absent, back-fill stale fields, return it."""
        document = await self._store.get(self._path)
        if document is None:
            seed = seed_document()
            seed["safetyThreshold"] = self._default_threshold
            if await self._store.create(self._path, seed):
                _logger.info("Dashboard document initialized at %s", self._path)
                return seed
            # Another reader seeded it first.
            document = await self._store.get(self._path)
            if document is None:
                raise DocumentNotFoundError(self._path)

        patch = pending_patch(document, default_threshold=self._default_threshold)
        if patch:
            await self._store.update(self._path, patch)
            _logger.info("Dashboard document migrated: %s", ", ".join(sorted(patch)))
            document = await self._store.get(self._path)
            if document is None:
                raise DocumentNotFoundError(self._path)
        return document

    async def get(self) -> DashboardState:
        """Return the current state, seeding and migrating first.

        Never raises: any failure yields :meth:`DashboardState.fallback`.
        """
        try:
            document = await self._ensure_document()
            return DashboardState.from_document(document)
        except Exception:
            _logger.exception("Error fetching dashboard state; serving fallback")
            return DashboardState.fallback()

    async def set_relay(self, relay_id: str, is_on: bool) -> CommandResult:
        """Set one relay, resolved against the transformer first, then the points.

        The whole just-read document is written back. Unknown ids are a
        no-op. Failures are logged and reported in the result. Errors outside
        the store contract propagate.
        """
        command = "set_relay"
        try:
            document = await self._store.get(self._path)
            if document is None:
                raise DocumentNotFoundError(self._path)
            if not _apply_relay(document, relay_id, is_on):
                _logger.debug("No relay matches %s; ignoring toggle", relay_id)
                return CommandResult(command=command, status=CommandStatus.NO_MATCH, target=relay_id)
            await self._store.set(self._path, document)
        except DocumentNotFoundError as exc:
            _logger.error("Error toggling relay %s: %s", relay_id, exc)
            return CommandResult(command=command, status=CommandStatus.NOT_FOUND, target=relay_id, detail=str(exc))
        except StoreError as exc:
            _logger.error("Error toggling relay %s: %s", relay_id, exc, exc_info=True)
            return CommandResult(command=command, status=CommandStatus.FAILED, target=relay_id, detail=str(exc))

        _logger.info("Relay %s switched %s", relay_id, "on" if is_on else "off")
        return CommandResult(command=command, status=CommandStatus.APPLIED, target=relay_id)

    async def set_threshold(self, value: float) -> CommandResult:
        """Write only the ``safetyThreshold`` field. No range checks here."""
        command = "set_threshold"
        try:
            await self._store.update(self._path, {"safetyThreshold": value})
        except DocumentNotFoundError as exc:
            _logger.error("Error updating safety threshold: %s", exc)
            return CommandResult(command=command, status=CommandStatus.NOT_FOUND, detail=str(exc))
        except StoreError as exc:
            _logger.error("Error updating safety threshold: %s", exc, exc_info=True)
            return CommandResult(command=command, status=CommandStatus.FAILED, detail=str(exc))

        _logger.info("Safety threshold set to %s", value)
        return CommandResult(command=command, status=CommandStatus.APPLIED)
