"""Shared constants for the dashboard document."""

from __future__ import annotations

from typing import Any

DOCUMENT_PATH = "dashboard/data"

DEFAULT_SAFETY_THRESHOLD = 20.0
CHART_WINDOW = 20
THRESHOLD_DEBOUNCE_SECONDS = 0.5

TRANSFORMER_RELAY_ID = "relay-t1"

# Preset added to deployments seeded before the seventh point existed.
POINT_7: dict[str, Any] = {
    "id": "dp-7",
    "name": "Point 7",
    "current": 8.42,
    "isOn": True,
    "housesConnected": 5,
}

# (id, starting current in amps, houses connected)
_SEED_POINTS: tuple[tuple[str, float, int], ...] = (
    ("dp-1", 11.63, 5),
    ("dp-2", 10.54, 7),
    ("dp-3", 10.24, 4),
    ("dp-4", 16.55, 6),
    ("dp-5", 12.56, 8),
    ("dp-6", 9.78, 3),
)


def seed_document() -> dict[str, Any]:
    """Return a fresh copy of the default topology document."""
    points: list[dict[str, Any]] = [
        {
            "id": point_id,
            "name": f"Point {index}",
            "current": current,
            "isOn": True,
            "housesConnected": houses,
        }
        for index, (point_id, current, houses) in enumerate(_SEED_POINTS, start=1)
    ]
    points.append(dict(POINT_7))
    return {
        "transformer": {
            "id": "transformer-1",
            "name": "Main Transformer",
            "relay": {
                "id": TRANSFORMER_RELAY_ID,
                "name": "Transformer Relay",
                "isOn": True,
            },
        },
        "distributionPoints": points,
        "safetyThreshold": DEFAULT_SAFETY_THRESHOLD,
        "alerts": [],
    }


def fallback_document() -> dict[str, Any]:
    """Safe state rendered when the store cannot be reached."""
    return {
        "transformer": {
            "id": "transformer-1",
            "name": "Main Transformer",
            "relay": {
                "id": TRANSFORMER_RELAY_ID,
                "name": "Transformer Relay",
                "isOn": False,
            },
        },
        "distributionPoints": [],
        "safetyThreshold": DEFAULT_SAFETY_THRESHOLD,
        "alerts": [],
    }
