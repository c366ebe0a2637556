"""Client session schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from .base import BaseSchema


class Principal(BaseSchema):
    """The signed-in client resolved once per request."""

    id: UUID
    email: str
    name: str
    company: str
    phone: Optional[str] = None
    role: str = "client"


class SessionResponse(BaseSchema):
    """Schema for the current session response."""

    client: Principal


class SignOutResponse(BaseSchema):
    """Schema for sign-out response."""

    success: bool = True
    message: str = Field(default="Signed out")
