"""
Pydantic models for author data.

``AuthorCreate`` and ``AuthorUpdate`` are request bodies; ``AuthorRead``
is the stored record as returned by the API.  The joined detail views
live in ``detail``.
"""

from pydantic import BaseModel, Field


class AuthorBase(BaseModel):
    name: str = Field(..., examples=["Frank Herbert"])


class AuthorCreate(AuthorBase):
    """Schema for creating an author."""
    pass


class AuthorUpdate(AuthorBase):
    """Schema for renaming an author."""
    pass


class AuthorRead(AuthorBase):
    id: int
    owner_id: int

    model_config = {
        "from_attributes": True,
    }

