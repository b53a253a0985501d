"""
Pydantic models for book data.

``BookCreate`` and ``BookUpdate`` carry the cover as a payload of the
form ``{"type": "<mime>", "data": "<base64>"}``, either as an object or
as the JSON string produced by browser upload widgets.  ``BookRead``
holds the stored cover bytes but never serializes them; clients get
the read‑only ``cover_image_path`` data URI instead, recomputed from
the stored bytes each time it is read.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, Optional, Union

from pydantic import BaseModel, Field, computed_field

from ..core.covers import to_data_uri
from ..core.db import SQLITE_MAX_INTEGER, SQLITE_MIN_INTEGER

CoverPayload = Union[str, Dict[str, Any]]

# Integers the store can hold; anything wider is rejected at the edge.
StoredInt = Annotated[int, Field(ge=SQLITE_MIN_INTEGER, le=SQLITE_MAX_INTEGER)]


class BookBase(BaseModel):
    title: str = Field(..., examples=["Dune"])
    description: Optional[str] = Field(None, examples=["Politics and sandworms on Arrakis"])
    publish_date: date = Field(..., examples=["1965-08-01"])
    page_count: StoredInt = Field(..., examples=[412])
    author_id: StoredInt = Field(..., examples=[1])


class BookCreate(BookBase):
    """Schema for creating a book."""

    cover: Optional[CoverPayload] = Field(
        None,
        examples=[{"type": "image/png", "data": "iVBORw0KGgo="}],
    )


class BookUpdate(BaseModel):
    """Schema for updating a book.

    All fields are optional; only fields present in the request body
    are changed.  The cover is replaced only when a non‑empty payload
    decodes to an allowed image.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    publish_date: Optional[date] = None
    page_count: Optional[StoredInt] = None
    author_id: Optional[StoredInt] = None
    cover: Optional[CoverPayload] = None


class BookRead(BookBase):
    """Schema for reading a book from the API."""

    id: int
    owner_id: int
    created_at: datetime
    cover_image: Optional[bytes] = Field(None, exclude=True, repr=False)
    cover_image_type: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }

    @computed_field  # type: ignore[misc]
    @property
    def cover_image_path(self) -> Optional[str]:
        if self.cover_image is None or self.cover_image_type is None:
            return None
        return to_data_uri(self.cover_image, self.cover_image_type)

