"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers (home, users, authors,
books) under a unified prefix.  When new domains are introduced,
update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import authors, books, home, users

router = APIRouter()

router.include_router(home.router, tags=["home"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(authors.router, prefix="/authors", tags=["authors"])
router.include_router(books.router, prefix="/books", tags=["books"])
