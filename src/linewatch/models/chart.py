"""Derived chart samples (never persisted)."""

from __future__ import annotations

from datetime import datetime

from pydantic import field_validator

from linewatch.models._base import LinewatchBaseModel


class ChartDataPoint(LinewatchBaseModel):
    """One average-current sample, produced per state-change notification."""

    time: datetime
    average_current: float

    @field_validator("average_current")
    @classmethod
    def _two_decimals(cls, value: float) -> float:
        return round(value, 2)
