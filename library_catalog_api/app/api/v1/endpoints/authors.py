"""
Author endpoints for API v1.

Listing and reading authors is public.  Creating requires a logged‑in
user, who becomes the author's owner; renaming and deleting are
limited to that owner.  Deleting an author that still has books
answers 409 and leaves the author in place.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from library_catalog_api.app.api.deps import get_author_service, get_settings
from library_catalog_api.app.core.config import Settings
from library_catalog_api.app.core.security import get_current_user_id
from library_catalog_api.app.schemas.author import AuthorCreate, AuthorRead, AuthorUpdate
from library_catalog_api.app.schemas.detail import AuthorDetail
from library_catalog_api.app.services.author_service import AuthorService


router = APIRouter()


@router.get("/", response_model=List[AuthorRead])
async def list_authors(
    name: Optional[str] = Query(None, description="Case-insensitive part of the author's name"),
    service: AuthorService = Depends(get_author_service),
) -> List[AuthorRead]:
    return await service.list_authors(name)


@router.post("/", response_model=AuthorRead, status_code=status.HTTP_201_CREATED)
async def create_author(
    author: AuthorCreate,
    user_id: int = Depends(get_current_user_id),
    service: AuthorService = Depends(get_author_service),
) -> AuthorRead:
    """Create an author owned by the current user.

    Answers 422 for a blank name and 409 if the name already exists.
    """
    return await service.create_author(author, user_id)


@router.get("/{author_id}", response_model=AuthorDetail)
async def get_author(
    author_id: int,
    service: AuthorService = Depends(get_author_service),
    app_settings: Settings = Depends(get_settings),
) -> AuthorDetail:
    """Return an author with its owner's name and a preview of their books."""
    return await service.get_author_detail(author_id, app_settings.author_books_preview_limit)


@router.put("/{author_id}", response_model=AuthorRead)
async def rename_author(
    author_id: int,
    update: AuthorUpdate,
    user_id: int = Depends(get_current_user_id),
    service: AuthorService = Depends(get_author_service),
) -> AuthorRead:
    return await service.rename_author(author_id, update.name, user_id)


@router.delete("/{author_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_author(
    author_id: int,
    user_id: int = Depends(get_current_user_id),
    service: AuthorService = Depends(get_author_service),
) -> None:
    await service.delete_author(author_id, user_id)
    return None
