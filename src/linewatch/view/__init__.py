"""Realtime view layer."""

from linewatch.view.debounce import Debouncer
from linewatch.view.model import DashboardViewModel

__all__ = ["DashboardViewModel", "Debouncer"]
