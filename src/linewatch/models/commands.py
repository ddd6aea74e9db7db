"""Outcomes of operator commands.

Operator commands are fire-and-forget from the UI's perspective: the
service layer reports what happened through these results and logs them,
and the UI boundary chooses not to await or propagate them.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class CommandStatus(StrEnum):
    APPLIED = "applied"
    NO_MATCH = "no_match"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class CommandResult(BaseModel):
    """Result of a relay toggle or threshold update."""

    model_config = ConfigDict(frozen=True)

    command: str
    status: CommandStatus
    target: str | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == CommandStatus.APPLIED
