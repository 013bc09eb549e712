"""Pydantic schemas for the users resource."""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field


class UserPayload(BaseModel):
    """Body accepted by create and update. ``nome`` is accepted as an alias.

    Fields are left untyped so wrong types reach the service validation and
    are reported together with every other violation.
    """

    name: Any = Field(default=None, validation_alias=AliasChoices("name", "nome"))
    email: Any = None


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

