"""Base class for persisted domain models.

Models are pydantic models so each subclass declares its fields explicitly
and construction from a stored record validates them one by one.
"""
from __future__ import annotations
import time
from typing import Any, ClassVar, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modelstore.errors import ModelValidationError


def now_ms() -> int:
    return time.time_ns() // 1_000_000


class AbstractModel(BaseModel):
    """Common fields and (de)serialization for every stored model."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    type_tag: ClassVar[str] = ""

    id: str = Field(min_length=1)
    created_on: int = Field(default_factory=now_ms)
    updated_on: Optional[int] = None
    updated_by: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        """Build an instance from a plain record, reporting every bad field."""
        try:
            return cls.model_validate(dict(record))
        except ValidationError as e:
            errors = e.errors(include_url=False)
            fields = []
            for err in errors:
                name = ".".join(str(p) for p in err.get("loc", ())) or "__root__"
                if name not in fields:
                    fields.append(name)
            raise ModelValidationError(cls.type_tag or cls.__name__, fields, errors) from e

    def serialize(self) -> str:
        return self.model_dump_json()

    def touch(self, updated_by: Optional[str] = None):
        """Stamp update metadata. `updated_on` always sorts after `created_on`."""
        self.updated_on = max(now_ms(), self.created_on + 1)
        if updated_by:
            self.updated_by = updated_by
        return self
