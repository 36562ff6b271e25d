from __future__ import annotations
from typing import ClassVar, Optional

from pydantic import Field

from .base import AbstractModel


class User(AbstractModel):
    type_tag: ClassVar[str] = "User"

    name: str = Field(min_length=1)
    email: Optional[str] = None
