"""
FastAPI dependency providers.

The document store is opened in the application lifespan and kept on
``app.state``; these providers hand it, or a service built around it,
to route handlers.
"""

from fastapi import Depends, Request

from ..core.config import Settings
from ..core.db import DocumentStore
from ..services.author_service import AuthorService
from ..services.book_service import BookService
from ..services.user_service import UserService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_user_service(store: DocumentStore = Depends(get_store)) -> UserService:
    return UserService(store)


def get_author_service(store: DocumentStore = Depends(get_store)) -> AuthorService:
    return AuthorService(store)


def get_book_service(store: DocumentStore = Depends(get_store)) -> BookService:
    return BookService(store)
