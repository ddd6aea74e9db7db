"""Ingestion application helpers.

This module centralizes the intake path used by the HTTP endpoint:

- validate the top-level payload shape
- normalize either wire shape into readings
- read the current document and update ``current`` on matching points
- persist the whole batch as one field-level merge

Ingestion is pure data intake: no alerting or threshold evaluation.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from linewatch._constants import DOCUMENT_PATH
from linewatch.exceptions import DocumentNotFoundError
from linewatch.ingestion.normalize import POINTS_FIELD, extract_point_entries, normalize_readings
from linewatch.models.readings import CurrentReading
from linewatch.store.base import DocumentStore

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionReport:
    """What one request changed."""

    applied: int
    unknown: int
    malformed: int


def apply_readings(
    points: list[dict[str, Any]],
    readings: Iterable[CurrentReading],
) -> tuple[list[dict[str, Any]], int, int]:
    """Return a copy of *points* with readings applied.

    Only the ``current`` field of a matching point changes. Readings for
    ids that match no point are skipped.

    Returns
    -------
    tuple
        ``(updated_points, applied, unknown)``.
    """
    updated = copy.deepcopy(points)
    index = {point.get("id"): point for point in updated if isinstance(point, dict)}
    applied = 0
    unknown = 0
    for reading in readings:
        point = index.get(reading.id)
        if point is None:
            _logger.debug("Skipping reading for unknown point %s", reading.id)
            unknown += 1
            continue
        point["current"] = reading.current
        applied += 1
    return updated, applied, unknown


def apply_readings_by_key(
    points: dict[str, Any],
    readings: Iterable[CurrentReading],
) -> tuple[dict[str, Any], int, int]:
    """Build a merge patch for the legacy id-keyed point mapping.

    Only keys already present in *points* are matched. The patch holds
    nothing but ``current`` per matched key, so every other stored field
    survives a deep merge.

    Returns
    -------
    tuple
        ``(patch, applied, unknown)``.
    """
    patch: dict[str, Any] = {}
    applied = 0
    unknown = 0
    for reading in readings:
        if not isinstance(points.get(reading.id), dict):
            _logger.debug("Skipping reading for unknown point %s", reading.id)
            unknown += 1
            continue
        patch[reading.id] = {"current": reading.current}
        applied += 1
    return patch, applied, unknown


async def ingest_payload(
    store: DocumentStore,
    payload: Any,
    *,
    path: str = DOCUMENT_PATH,
) -> IngestionReport:
    """Apply one telemetry request to the stored document.

    Exactly one store write is made per call: a merge of
    ``distributionPoints`` only, so fields written concurrently by
    operators (relay of the transformer, threshold) are preserved.
    Stored points in the legacy id-keyed mapping form are updated by key.
    When the stored points are neither a list nor a mapping, nothing can
    match and nothing is written.

    Raises
    ------
    InvalidRequestError
        Payload lacks a usable ``distributionPoints`` field.
    DocumentNotFoundError
        The dashboard document has not been initialized.
    StoreError
        Backing store failure.
    """
    entries = extract_point_entries(payload)
    batch = normalize_readings(entries)

    document = await store.get(path)
    if document is None:
        raise DocumentNotFoundError(path)

    points = document.get(POINTS_FIELD)
    if isinstance(points, list):
        updated, applied, unknown = apply_readings(points, batch.readings)
        await store.merge(path, {POINTS_FIELD: updated})
    elif isinstance(points, dict):
        patch, applied, unknown = apply_readings_by_key(points, batch.readings)
        await store.merge(path, {POINTS_FIELD: patch})
    else:
        _logger.warning("Stored %s at %s is not a list or mapping; skipping write", POINTS_FIELD, path)
        applied, unknown = 0, len(batch.readings)

    report = IngestionReport(applied=applied, unknown=unknown, malformed=batch.malformed)
    _logger.debug(
        "Ingested readings applied=%d unknown=%d malformed=%d",
        report.applied,
        report.unknown,
        report.malformed,
    )
    return report
