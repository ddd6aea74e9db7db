"""Server configuration for linewatch."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from linewatch._constants import (
    CHART_WINDOW,
    DEFAULT_SAFETY_THRESHOLD,
    DOCUMENT_PATH,
    THRESHOLD_DEBOUNCE_SECONDS,
)
from linewatch.exceptions import LinewatchConfigError


@dataclasses.dataclass(frozen=True)
class LinewatchConfig:
    """Server configuration.

    Parameters
    ----------
    host : str
        Interface the HTTP server binds to.
    port : int
        TCP port the HTTP server listens on.
    document_path : str
        Store path of the singleton dashboard document.
    default_threshold : float
        Safety threshold (amps) back-filled into documents that lack one.
    chart_window : int
        Number of average-current samples each view model retains.
    threshold_debounce : float
        Seconds a threshold edit must stay unchanged before it is written.
        Successive edits inside the window collapse into one write.
    """

    host: str = "0.0.0.0"
    port: int = 9002
    document_path: str = DOCUMENT_PATH
    default_threshold: float = DEFAULT_SAFETY_THRESHOLD
    chart_window: int = CHART_WINDOW
    threshold_debounce: float = THRESHOLD_DEBOUNCE_SECONDS

    def __post_init__(self) -> None:
        if self.chart_window <= 0:
            raise LinewatchConfigError("chart_window must be positive")
        if self.threshold_debounce < 0:
            raise LinewatchConfigError("threshold_debounce must not be negative")
        if not self.document_path.strip():
            raise LinewatchConfigError("document_path must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> LinewatchConfig:
        """Create configuration from environment variables.

        Reads optional ``LINEWATCH_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        LinewatchConfig
            Populated configuration.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}

        host_env = env.get("LINEWATCH_HOST")
        if host_env is not None:
            config_kwargs["host"] = host_env

        path_env = env.get("LINEWATCH_DOCUMENT_PATH")
        if path_env is not None:
            config_kwargs["document_path"] = path_env

        try:
            port_env = env.get("LINEWATCH_PORT")
            if port_env is not None and "port" not in overrides:
                config_kwargs["port"] = int(port_env)

            threshold_env = env.get("LINEWATCH_DEFAULT_THRESHOLD")
            if threshold_env is not None and "default_threshold" not in overrides:
                config_kwargs["default_threshold"] = float(threshold_env)

            window_env = env.get("LINEWATCH_CHART_WINDOW")
            if window_env is not None and "chart_window" not in overrides:
                config_kwargs["chart_window"] = int(window_env)

            debounce_env = env.get("LINEWATCH_THRESHOLD_DEBOUNCE")
            if debounce_env is not None and "threshold_debounce" not in overrides:
                config_kwargs["threshold_debounce"] = float(debounce_env)
        except ValueError as exc:
            raise LinewatchConfigError(f"Invalid numeric LINEWATCH_* value: {exc}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
