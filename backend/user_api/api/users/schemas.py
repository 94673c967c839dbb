"""Pydantic request/response schemas for Users API."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from ...constants import DEFAULT_STATUS
from ...domain.user import User, format_timestamp


class UserIn(BaseModel):
    """Body of create and update requests.

    Rule checks (required fields, lengths, email grammar) run afterwards in
    ``validation``; this model only fixes the payload's shape. Client-sent
    ``id``, ``createdAt`` and ``updatedAt`` are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, examples=["John Doe"])
    email: Optional[str] = Field(None, examples=["john@example.com"])
    phone: Optional[str] = Field(None, examples=["+1 (555) 010-2030"])
    role: Optional[str] = Field(None, examples=["USER"])
    status: Optional[str] = Field(None, examples=[DEFAULT_STATUS])
    address: Optional[str] = None

    def to_user(self) -> User:
        return User(
            name=self.name or "",
            email=self.email or "",
            phone=self.phone,
            role=self.role or "",
            status=self.status if self.status is not None else DEFAULT_STATUS,
            address=self.address,
        )


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    status: str
    address: Optional[str] = None
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value)


def dump_user(user: User) -> dict:
    return UserOut.model_validate(user).model_dump(by_alias=True)
