"""Tests for the dashboard document models."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from linewatch._constants import seed_document
from linewatch.models.chart import ChartDataPoint
from linewatch.models.dashboard import DashboardState, DistributionPoint


def _point(point_id: str, current: float, is_on: bool = True) -> DistributionPoint:
    return DistributionPoint(id=point_id, name=point_id, current=current, is_on=is_on, houses_connected=1)


def test_seed_document_parses_with_camel_case_aliases() -> None:
    state = DashboardState.from_document(seed_document())

    assert state.transformer.relay.id == "relay-t1"
    assert state.transformer.relay.is_on is True
    assert [p.id for p in state.distribution_points] == [f"dp-{i}" for i in range(1, 8)]
    assert state.distribution_points[3].houses_connected == 6


def test_to_document_round_trips_to_camel_case() -> None:
    document = seed_document()
    dumped = DashboardState.from_document(document).to_document()

    assert dumped["distributionPoints"][0]["housesConnected"] == 5
    assert dumped["transformer"]["relay"]["isOn"] is True
    assert dumped["safetyThreshold"] == 20.0
    assert "distribution_points" not in dumped


def test_duplicate_point_ids_rejected() -> None:
    document = seed_document()
    document["distributionPoints"][1]["id"] = "dp-1"

    with pytest.raises(ValidationError):
        DashboardState.from_document(document)


def test_missing_threshold_and_alerts_use_defaults() -> None:
    document = seed_document()
    del document["safetyThreshold"]
    del document["alerts"]

    state = DashboardState.from_document(document)

    assert state.safety_threshold == 20.0
    assert state.alerts == []


def test_fallback_reports_relay_off_and_no_points() -> None:
    state = DashboardState.fallback()

    assert state.transformer.relay.is_on is False
    assert state.distribution_points == []
    assert state.safety_threshold == 20.0
    assert state.alerts == []


def test_overload_is_strictly_greater_than_threshold() -> None:
    assert _point("dp-1", 20.0).is_overloaded(20.0) is False
    assert _point("dp-1", 20.01).is_overloaded(20.0) is True


def test_overload_requires_relay_on() -> None:
    assert _point("dp-1", 50.0, is_on=False).is_overloaded(20.0) is False


def test_average_excludes_points_that_are_off() -> None:
    state = DashboardState.from_document(seed_document()).model_copy(
        update={
            "distribution_points": [
                _point("a", 10.0),
                _point("b", 20.0),
                _point("c", 999.0, is_on=False),
            ]
        }
    )

    assert state.average_active_current() == 15.0


def test_average_over_no_active_points_is_zero() -> None:
    state = DashboardState.fallback()

    assert state.average_active_current() == 0.0


def test_overloaded_points_uses_document_threshold() -> None:
    document = seed_document()
    document["safetyThreshold"] = 11.0

    state = DashboardState.from_document(document)

    assert [p.id for p in state.overloaded_points()] == ["dp-1", "dp-4", "dp-5"]


def test_chart_point_rounds_to_two_decimals() -> None:
    point = ChartDataPoint(time=datetime(2026, 1, 1, tzinfo=UTC), average_current=12.3456)

    assert point.average_current == 12.35
    assert point.to_document() == {"time": "2026-01-01T00:00:00Z", "averageCurrent": 12.35}
