"""Base model and enum for sensor state records.

Every state record inherits from :class:`SwiottBaseModel`, a frozen
pydantic model.  Records are never mutated in place: the state store
replaces a snapshot with :meth:`SwiottBaseModel.merged`, which validates
the patched copy so a decoder can never smuggle in a wrongly typed or
misspelled field.

Code enums inherit from :class:`SwiottEnum` which adds an ``UNKNOWN``
member at ``-1`` and a ``_missing_`` hook that returns ``UNKNOWN``
for any value without a mapped member.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class SwiottEnum(enum.IntEnum):
    """Base for firmware code enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    Codes the firmware sends that have no mapped member automatically
    resolve to ``UNKNOWN`` instead of raising ``ValueError``.
    """

    @classmethod
    def _missing_(cls, value: object) -> SwiottEnum:
        unknown: SwiottEnum = cls.UNKNOWN  # type: ignore[attr-defined]
        return unknown


class SwiottBaseModel(BaseModel):
    """Base for state records held by the store."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    def merged(self, patch: Mapping[str, Any]) -> Self:
        """Return a validated copy with the keys of *patch* overwritten.

        Keys missing from *patch* keep their current value.
        """
        if not patch:
            return self
        values = self.model_dump()
        values.update(patch)
        return type(self).model_validate(values)
