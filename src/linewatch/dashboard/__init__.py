"""Dashboard state layer.

The single source of truth for how the shared dashboard document is
created, migrated and mutated by operator commands.
"""

from linewatch.dashboard.service import DashboardStateService

__all__ = ["DashboardStateService"]
