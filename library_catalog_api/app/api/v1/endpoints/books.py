"""
Book endpoints for API v1.

Listing and reading books is public; every other route requires a
logged‑in user, and updates and deletes are limited to the book's
owner.  Book responses carry the cover as a ``cover_image_path`` data
URI.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from library_catalog_api.app.api.deps import get_book_service
from library_catalog_api.app.core.security import get_current_user_id
from library_catalog_api.app.schemas.book import BookCreate, BookRead, BookUpdate
from library_catalog_api.app.schemas.detail import BookDetail
from library_catalog_api.app.services.book_service import BookService


router = APIRouter()


@router.get("/", response_model=List[BookRead])
async def list_books(
    title: Optional[str] = Query(None, description="Case-insensitive part of the title"),
    published_after: Optional[date] = Query(None, description="Earliest publish date (inclusive)"),
    published_before: Optional[date] = Query(None, description="Latest publish date (inclusive)"),
    service: BookService = Depends(get_book_service),
) -> List[BookRead]:
    """Search books.

    - **title**: substring of the title, case‑insensitive.
    - **published_after**, **published_before**: publish date range.

    Every supplied filter narrows the result; omitted filters are
    ignored.
    """
    return await service.list_books(
        title=title,
        published_after=published_after,
        published_before=published_before,
    )


@router.post("/", response_model=BookRead, status_code=status.HTTP_201_CREATED)
async def create_book(
    book: BookCreate,
    user_id: int = Depends(get_current_user_id),
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Create a book owned by the current user.

    The ``cover`` payload must be a JPEG, PNG or GIF image; anything
    else is ignored and the request then fails with 422 because a
    cover is required.
    """
    return await service.create_book(book, book.cover, user_id)


@router.get("/{book_id}", response_model=BookDetail)
async def get_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> BookDetail:
    """Return a book with its author and the name of the user who added it."""
    return await service.get_book_detail(book_id)


@router.put("/{book_id}", response_model=BookRead)
async def update_book(
    book_id: int,
    updates: BookUpdate,
    user_id: int = Depends(get_current_user_id),
    service: BookService = Depends(get_book_service),
) -> BookRead:
    """Update an existing book.

    Partial updates are supported; any unspecified fields remain
    unchanged, and the cover is kept unless a new valid one is sent.
    """
    return await service.update_book(book_id, updates, updates.cover, user_id)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int,
    user_id: int = Depends(get_current_user_id),
    service: BookService = Depends(get_book_service),
) -> None:
    await service.delete_book(book_id, user_id)
    return None
