"""Error types raised by the model registry and storage layer.

Absence of a record is never an error: `get` returns ``None``. Everything
here propagates unchanged to the caller.
"""
from __future__ import annotations
from typing import Any, Optional, Sequence


class ModelStoreError(Exception):
    """Base class for modelstore errors."""


class UnknownModelTypeError(ModelStoreError, KeyError):
    """Raised when a type tag (or model class) is not in the registry."""

    def __init__(self, model_type: Any) -> None:
        super().__init__(model_type)
        self.model_type = model_type

    def __str__(self) -> str:
        return f"Unknown model type: {self.model_type!r}"


class ModelValidationError(ModelStoreError, ValueError):
    """A record could not be turned into a model instance.

    `fields` lists the missing or invalid field names; `errors` carries the
    per-field details reported by pydantic.
    """

    def __init__(self, model_type: str, fields: Sequence[str], errors: Optional[list] = None) -> None:
        self.model_type = model_type
        self.fields = list(fields)
        self.errors = errors or []
        super().__init__(f"Invalid options for {model_type}: {', '.join(self.fields)}")


class MalformedRecordError(ModelStoreError, ValueError):
    """Stored text is not a JSON object and cannot be deserialized."""


class BackendError(ModelStoreError):
    """The underlying backend failed (open failure, aborted transaction)."""

    def __init__(self, message: str, original: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.original = original
