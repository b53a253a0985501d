"""
Business logic for authors.

Author names are unique.  Only the user who created an author may
rename or delete it, and an author cannot be deleted while any book
still references it.
"""

import logging
from typing import List, Optional

from ..core.db import Contains, DocumentStore
from ..core.errors import DuplicateKeyError, DuplicateName, HasDependentBooks, NotFound, ValidationFailed
from ..core.ownership import ensure_owner
from ..schemas.author import AuthorCreate, AuthorRead
from ..schemas.book import BookRead
from ..schemas.detail import AuthorDetail

logger = logging.getLogger(__name__)


class AuthorService:
    """Service for managing authors."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationFailed("Author name must not be blank", field="name")
        return cleaned

    def _save(self, record: dict) -> AuthorRead:
        try:
            row = self.store.save("authors", record)
        except DuplicateKeyError as e:
            raise DuplicateName(f"An author named {record['name']!r} already exists") from e
        return AuthorRead(**row)

    async def create_author(self, data: AuthorCreate, owner_id: int) -> AuthorRead:
        """Create an author owned by ``owner_id``."""
        name = self._clean_name(data.name)
        author = self._save({"name": name, "owner_id": owner_id})
        logger.info("User %s created author %s (%r)", owner_id, author.id, author.name)
        return author

    async def get_author(self, author_id: int) -> AuthorRead:
        row = self.store.find_by_id("authors", author_id)
        if row is None:
            raise NotFound("Author", author_id)
        return AuthorRead(**row)

    async def get_author_detail(self, author_id: int, books_limit: Optional[int] = None) -> AuthorDetail:
        """Return an author with its owner's name and up to
        ``books_limit`` of its books, ordered by title."""
        author = await self.get_author(author_id)
        owner = self.store.find_by_id("users", author.owner_id)
        rows = self.store.find("books", {"author_id": author_id}, order_by="title", limit=books_limit)
        return AuthorDetail(
            author=author,
            owner_name=owner["name"] if owner else None,
            books=[BookRead(**row) for row in rows],
        )

    async def list_authors(self, name: Optional[str] = None) -> List[AuthorRead]:
        """Return authors, optionally filtered by a case‑insensitive
        substring of their name.  A blank filter is ignored."""
        criteria = {}
        if name and name.strip():
            criteria["name"] = Contains(name.strip())
        return [AuthorRead(**row) for row in self.store.find("authors", criteria, order_by="name")]

    async def rename_author(self, author_id: int, new_name: str, caller_id: int) -> AuthorRead:
        author = await self.get_author(author_id)
        ensure_owner(author, caller_id)
        name = self._clean_name(new_name)
        renamed = self._save({"id": author.id, "name": name})
        logger.info("User %s renamed author %s to %r", caller_id, author_id, name)
        return renamed

    async def delete_author(self, author_id: int, caller_id: int) -> None:
        """Delete an author that no book references.

        The dependent‑books lookup and the delete are separate store
        calls; a book created for this author in between is not
        detected.
        """
        author = await self.get_author(author_id)
        ensure_owner(author, caller_id)
        if self.store.find("books", {"author_id": author_id}, limit=1):
            logger.info("Refusing to delete author %s: books still reference it", author_id)
            raise HasDependentBooks(author_id)
        if not self.store.remove("authors", author_id):
            raise NotFound("Author", author_id)
        logger.info("User %s deleted author %s", caller_id, author_id)
