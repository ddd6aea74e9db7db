"""Dashboard document models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from linewatch._constants import DEFAULT_SAFETY_THRESHOLD, fallback_document
from linewatch.models._base import LinewatchBaseModel


class Relay(LinewatchBaseModel):
    """A controllable on/off switch."""

    id: str
    name: str = ""
    is_on: bool = False


class Transformer(LinewatchBaseModel):
    """The single transformer feeding every distribution point."""

    id: str
    name: str = ""
    relay: Relay


class DistributionPoint(LinewatchBaseModel):
    """A monitored tap on the line with its own current reading and relay.

    Parameters
    ----------
    id : str
        Identity, unique within the document.
    name : str
        Display name.
    current : float
        Latest reading in amps. Written only by telemetry ingestion.
    is_on : bool
        Relay state. Written only by the relay toggle.
    houses_connected : int
        Number of houses fed from this point.
    """

    id: str
    name: str = ""
    current: float = Field(default=0.0, ge=0)
    is_on: bool = False
    houses_connected: int = Field(default=0, ge=0)

    def is_overloaded(self, safety_threshold: float) -> bool:
        """Return ``True`` when the relay is on and current strictly exceeds the threshold."""
        return self.is_on and self.current > safety_threshold


class DashboardState(LinewatchBaseModel):
    """The singleton root document."""

    transformer: Transformer
    distribution_points: list[DistributionPoint] = Field(default_factory=list)
    safety_threshold: float = DEFAULT_SAFETY_THRESHOLD
    alerts: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_point_ids(self) -> DashboardState:
        seen: set[str] = set()
        for point in self.distribution_points:
            if point.id in seen:
                raise ValueError(f"duplicate distribution point id: {point.id}")
            seen.add(point.id)
        return self

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> DashboardState:
        return cls.model_validate(document)

    @classmethod
    def fallback(cls) -> DashboardState:
        """Relay reported off, no points, default threshold, no alerts."""
        return cls.model_validate(fallback_document())

    def point(self, point_id: str) -> DistributionPoint | None:
        for point in self.distribution_points:
            if point.id == point_id:
                return point
        return None

    @property
    def active_points(self) -> list[DistributionPoint]:
        return [point for point in self.distribution_points if point.is_on]

    def average_active_current(self) -> float:
        """Mean current over points whose relay is on; ``0.0`` when none are."""
        active = self.active_points
        if not active:
            return 0.0
        return sum(point.current for point in active) / len(active)

    def overloaded_points(self) -> list[DistributionPoint]:
        return [point for point in self.distribution_points if point.is_overloaded(self.safety_threshold)]
