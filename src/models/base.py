"""Shared Pydantic base models and utilities."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    from datetime import timezone

    return datetime.now(timezone.utc)


class SakhiBase(BaseModel):
    """Base model with shared config for all Sakhi schemas.

    Attributes are snake_case in Python and camelCase in the persisted JSON
    layout.  Either spelling is accepted on input.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
    )

    def to_storage(self) -> dict:
        """Dump to the flat camelCase structure kept in the profile store."""
        return self.model_dump(mode="json", by_alias=True)
