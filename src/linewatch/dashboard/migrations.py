"""Additive schema migrations for the dashboard document.

Fields were added to the document over time. Rather than migrating on
deploy, every read checks this list and back-fills whatever is missing.
Each entry only adds data (or reshapes the legacy id-keyed points
mapping into a list without dropping entries), so applying the list to
an up-to-date document is a no-op. A ``distributionPoints`` value that
is neither a list nor a mapping is left untouched.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from linewatch._constants import POINT_7

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldMigration:
    """One versioned field that older documents may lack."""

    name: str
    is_stale: Callable[[dict[str, Any]], bool]
    build_patch: Callable[[dict[str, Any], float], dict[str, Any]]


def _points(document: dict[str, Any]) -> list[Any] | None:
    points = document.get("distributionPoints")
    if points is None:
        return []
    return points if isinstance(points, list) else None


def _points_from_mapping(points: dict[str, Any]) -> list[Any]:
    """Turn the id-keyed point mapping of older documents into the list form."""
    converted: list[Any] = []
    for point_id, point in points.items():
        if isinstance(point, dict) and "id" not in point:
            point = {"id": point_id, **point}
        converted.append(copy.deepcopy(point))
    return converted


def _lacks_point(document: dict[str, Any], point_id: str) -> bool:
    points = _points(document)
    if points is None:
        return False
    return not any(isinstance(point, dict) and point.get("id") == point_id for point in points)


MIGRATIONS: tuple[FieldMigration, ...] = (
    FieldMigration(
        name="safety_threshold",
        is_stale=lambda doc: doc.get("safetyThreshold") is None,
        build_patch=lambda _doc, default_threshold: {"safetyThreshold": default_threshold},
    ),
    FieldMigration(
        name="alerts",
        is_stale=lambda doc: doc.get("alerts") is None,
        build_patch=lambda _doc, _default_threshold: {"alerts": []},
    ),
    FieldMigration(
        name="points_as_list",
        is_stale=lambda doc: isinstance(doc.get("distributionPoints"), dict),
        build_patch=lambda doc, _default_threshold: {
            "distributionPoints": _points_from_mapping(doc["distributionPoints"]),
        },
    ),
    FieldMigration(
        name="point_dp_7",
        is_stale=lambda doc: _lacks_point(doc, POINT_7["id"]),
        build_patch=lambda doc, _default_threshold: {
            "distributionPoints": [*copy.deepcopy(_points(doc) or []), dict(POINT_7)],
        },
    ),
)


def pending_patch(document: dict[str, Any], *, default_threshold: float) -> dict[str, Any]:
    """Collect the top-level fields that stale migrations need to write.

    Returns an empty dict when the document is current.
    """
    working = dict(document)
    patch: dict[str, Any] = {}
    for migration in MIGRATIONS:
        if not migration.is_stale(working):
            continue
        fields = migration.build_patch(working, default_threshold)
        _logger.debug("Migration %s back-fills %s", migration.name, sorted(fields))
        patch.update(fields)
        working.update(fields)
    return patch
