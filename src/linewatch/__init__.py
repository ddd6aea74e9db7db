"""linewatch - Realtime monitoring and relay control for a distribution line."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("linewatch")
except PackageNotFoundError:
    __version__ = "0+local"
from linewatch.config import LinewatchConfig
from linewatch.dashboard import DashboardStateService
from linewatch.exceptions import (
    DocumentNotFoundError,
    InvalidRequestError,
    LinewatchConfigError,
    LinewatchError,
    StoreError,
)
from linewatch.models import (
    ChartDataPoint,
    CommandResult,
    CommandStatus,
    CurrentReading,
    DashboardState,
    DistributionPoint,
    Relay,
    Transformer,
)
from linewatch.store import DocumentStore, MemoryDocumentStore
from linewatch.view import DashboardViewModel, Debouncer

__all__ = [
    "__version__",
    "ChartDataPoint",
    "CommandResult",
    "CommandStatus",
    "CurrentReading",
    "DashboardState",
    "DashboardStateService",
    "DashboardViewModel",
    "Debouncer",
    "DistributionPoint",
    "DocumentNotFoundError",
    "DocumentStore",
    "InvalidRequestError",
    "LinewatchConfig",
    "LinewatchConfigError",
    "LinewatchError",
    "MemoryDocumentStore",
    "Relay",
    "StoreError",
    "Transformer",
]
