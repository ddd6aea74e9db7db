"""Normalization helpers for telemetry payloads.

Centralizes defensive parsing of the two wire shapes the monitoring
hardware sends:

- current: ``{"distributionPoints": [{"id": "dp-1", "current": 12.5}, ...]}``
- legacy:  ``{"distributionPoints": {"dp-1": {"current": 12.5}, ...}}``

Both produce the same ordered list of :class:`CurrentReading`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from linewatch.exceptions import InvalidRequestError
from linewatch.models.readings import CurrentReading

POINTS_FIELD = "distributionPoints"


def safe_current(value: Any) -> float | None:
    """Return *value* as a finite, non-negative float, else ``None``.

    Only real JSON numbers count; strings and booleans are rejected.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    result = float(value)
    if math.isnan(result) or math.isinf(result) or result < 0:
        return None
    return result


def safe_id(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text if text else None


@dataclass
class ReadingBatch:
    """Readings parsed from one request, plus how many entries were unusable."""

    readings: list[CurrentReading] = field(default_factory=list)
    malformed: int = 0


def extract_point_entries(payload: Any) -> list[Any] | dict[str, Any]:
    """Return the raw ``distributionPoints`` value.

    Raises
    ------
    InvalidRequestError
        The payload is not an object, or the field is absent or is
        neither an array nor an object.
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Invalid data format")
    entries = payload.get(POINTS_FIELD)
    if not isinstance(entries, (list, dict)):
        raise InvalidRequestError("Invalid data format")
    return entries


def _reading(point_id: Any, current: Any) -> CurrentReading | None:
    parsed_id = safe_id(point_id)
    parsed_current = safe_current(current)
    if parsed_id is None or parsed_current is None:
        return None
    return CurrentReading(id=parsed_id, current=parsed_current)


def normalize_readings(entries: list[Any] | dict[str, Any]) -> ReadingBatch:
    """Convert either wire shape into readings, skipping malformed entries."""
    batch = ReadingBatch()

    if isinstance(entries, dict):
        pairs = [
            (key, value.get("current") if isinstance(value, dict) else None)
            for key, value in entries.items()
        ]
    else:
        pairs = [
            (entry.get("id"), entry.get("current")) if isinstance(entry, dict) else (None, None)
            for entry in entries
        ]

    for point_id, current in pairs:
        reading = _reading(point_id, current)
        if reading is None:
            batch.malformed += 1
            continue
        batch.readings.append(reading)
    return batch
