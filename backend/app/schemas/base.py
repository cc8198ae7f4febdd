"""Shared schema bases for records and partial updates."""

from datetime import datetime
from typing import Any, ClassVar, Dict, Tuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from backend.app.core.time import as_utc


class RecordRead(BaseModel):
    """Base for records returned by the repository, whichever backend produced them."""

    @field_validator("created_at", "updated_at", "paid_date", mode="before", check_fields=False)
    @classmethod
    def ensure_timezone(cls, v):
        if v is None:
            return v
        if isinstance(v, str) and v.endswith("Z"):
            return v[:-1] + "+00:00"
        if isinstance(v, datetime):
            return as_utc(v)
        return v

    model_config = ConfigDict(from_attributes=True)


class PartialUpdate(BaseModel):
    """Partial update: only explicitly supplied fields are applied."""

    # Columns that may be omitted but never set to null
    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        for field in self.not_nullable:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
