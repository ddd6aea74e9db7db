"""Base model for dashboard documents.

Every document model inherits from :class:`LinewatchBaseModel` which
provides:

* ``alias_generator=to_camel`` so the camelCase keys stored in the
  document map to snake_case fields.
* ``populate_by_name`` so code can construct models with field names.
* :meth:`to_document` for the JSON-serializable dict written to the store.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LinewatchBaseModel(BaseModel):
    """Base for models persisted in, or derived from, the dashboard document."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_document(self) -> dict[str, Any]:
        """Dump to the camelCase, JSON-compatible shape used on the wire."""
        return self.model_dump(by_alias=True, mode="json")
