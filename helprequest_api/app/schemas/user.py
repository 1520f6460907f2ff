"""
Pydantic models for user data.

Defines schemas for registering, logging in and reading users.
Passwords are accepted on input only and never returned.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserBase(BaseModel):
    email: str = Field(..., examples=["user@example.com"])
    full_name: Optional[str] = Field(None, examples=["Chris Gaucho"])


class UserCreate(UserBase):
    """Schema for registering a user."""

    password: str = Field(..., min_length=1, examples=["strongpassword"])


class UserLogin(BaseModel):
    email: str
    password: str


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
    role_id: int
    disabled: bool = False

    model_config = {
        "from_attributes": True,
    }


class Authority(BaseModel):
    authority: str


class CurrentUserRead(BaseModel):
    """Profile of the authenticated caller, including granted authorities."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[int] = None
    email: str
    full_name: Optional[str] = None
    roles: List[Authority] = []


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
