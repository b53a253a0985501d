"""
Home endpoint for API v1.

Returns the most recently added books, newest first.  The number of
books is ``settings.recent_books_limit``.  Publicly accessible.
"""

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from library_catalog_api.app.api.deps import get_book_service, get_settings
from library_catalog_api.app.core.config import Settings
from library_catalog_api.app.schemas.book import BookRead
from library_catalog_api.app.services.book_service import BookService

router = APIRouter()


class HomePage(BaseModel):
    recent_books: List[BookRead]


@router.get("/", response_model=HomePage)
async def get_home(
    service: BookService = Depends(get_book_service),
    app_settings: Settings = Depends(get_settings),
) -> HomePage:
    books = await service.recent_books(limit=app_settings.recent_books_limit)
    return HomePage(recent_books=books)
