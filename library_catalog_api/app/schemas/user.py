"""
Pydantic models for user data.

Defines schemas for registering users, logging in and reading user
information.  Password hashes never leave the service layer.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserBase(BaseModel):
    name: str = Field(..., examples=["Ada Lovelace"])
    email: str = Field(..., examples=["ada@example.com"])


class UserCreate(UserBase):
    """Schema for registering a user."""

    password: str = Field(..., examples=["strongpassword"])


class UserLogin(BaseModel):
    email: str = Field(..., examples=["ada@example.com"])
    password: str = Field(..., examples=["strongpassword"])


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
