"""Telemetry readings accepted by the ingestion endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CurrentReading(BaseModel):
    """A single current reading for one distribution point."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    current: float = Field(..., ge=0, allow_inf_nan=False)
