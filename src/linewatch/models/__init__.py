"""Dashboard document, chart and command models."""

from linewatch.models.chart import ChartDataPoint
from linewatch.models.commands import CommandResult, CommandStatus
from linewatch.models.dashboard import DashboardState, DistributionPoint, Relay, Transformer
from linewatch.models.readings import CurrentReading

__all__ = [
    "ChartDataPoint",
    "CommandResult",
    "CommandStatus",
    "CurrentReading",
    "DashboardState",
    "DistributionPoint",
    "Relay",
    "Transformer",
]
