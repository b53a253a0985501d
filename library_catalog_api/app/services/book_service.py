"""
Business logic for books.

Book titles are unique and every book needs a cover image.  Covers
arrive as ``{"type", "data"}`` payloads and are decoded with
``decode_cover``; a payload that does not decode is ignored rather
than rejected, so a create without a usable cover fails the
"cover required" check while an update simply keeps the old cover.
Only the owner of a book may update or delete it.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from ..core.covers import decode_cover
from ..core.db import Between, Contains, DocumentStore
from ..core.errors import DuplicateKeyError, DuplicateTitle, NotFound, ValidationFailed
from ..core.ownership import ensure_owner
from ..schemas.author import AuthorRead
from ..schemas.book import BookCreate, BookRead, BookUpdate, CoverPayload
from ..schemas.detail import BookDetail

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "publish_date", "page_count", "author_id")


class BookService:
    """Service for managing books."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    def _validate(self, record: Dict[str, Any]) -> None:
        """Check a complete book record before it is written."""
        for field in REQUIRED_FIELDS:
            if record.get(field) is None:
                raise ValidationFailed(f"Field '{field}' is required", field=field)
        if not record["title"].strip():
            raise ValidationFailed("Title must not be blank", field="title")
        if record["page_count"] <= 0:
            raise ValidationFailed("Page count must be positive", field="page_count")
        if not record.get("cover_image") or not record.get("cover_image_type"):
            raise ValidationFailed("A JPEG, PNG or GIF cover image is required", field="cover")
        if self.store.find_by_id("authors", record["author_id"]) is None:
            raise ValidationFailed(f"Author {record['author_id']} does not exist", field="author_id")

    @staticmethod
    def _apply_cover(record: Dict[str, Any], cover: Optional[CoverPayload]) -> None:
        image = decode_cover(cover)
        if image is None:
            if cover:
                logger.info("Ignoring cover payload that is not an allowed image")
            return
        record["cover_image"] = image.data
        record["cover_image_type"] = image.mime_type

    def _save(self, record: Dict[str, Any]) -> BookRead:
        try:
            row = self.store.save("books", record)
        except DuplicateKeyError as e:
            raise DuplicateTitle(f"A book titled {record['title']!r} already exists") from e
        return BookRead(**row)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    async def create_book(self, data: BookCreate, cover: Optional[CoverPayload], owner_id: int) -> BookRead:
        """Create a book owned by ``owner_id``."""
        record: Dict[str, Any] = data.model_dump(exclude={"cover"})
        record["title"] = record["title"].strip()
        record["owner_id"] = owner_id
        record["created_at"] = datetime.now(timezone.utc)
        self._apply_cover(record, cover)
        self._validate(record)
        book = self._save(record)
        logger.info("User %s created book %s (%r)", owner_id, book.id, book.title)
        return book

    async def get_book(self, book_id: int) -> BookRead:
        row = self.store.find_by_id("books", book_id)
        if row is None:
            raise NotFound("Book", book_id)
        return BookRead(**row)

    async def get_book_detail(self, book_id: int) -> BookDetail:
        """Return a book with its author and its owner's name."""
        row = self.store.find_by_id("books", book_id)
        if row is None:
            raise NotFound("Book", book_id)
        author = self.store.find_by_id("authors", row["author_id"])
        owner = self.store.find_by_id("users", row["owner_id"])
        return BookDetail(
            **row,
            author=AuthorRead(**author) if author else None,
            owner_name=owner["name"] if owner else None,
        )

    async def list_books(
        self,
        title: Optional[str] = None,
        published_after: Optional[date] = None,
        published_before: Optional[date] = None,
        author_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[BookRead]:
        """Return books matching every supplied filter.

        - ``title``: case‑insensitive substring of the title.
        - ``published_after``: inclusive lower bound on ``publish_date``.
        - ``published_before``: inclusive upper bound on ``publish_date``.
        - ``author_id``: books by one author.

        Absent or blank filters are ignored.
        """
        criteria: Dict[str, Any] = {}
        if title and title.strip():
            criteria["title"] = Contains(title.strip())
        if author_id is not None:
            criteria["author_id"] = author_id
        if published_after is not None or published_before is not None:
            criteria["publish_date"] = Between(published_after, published_before)
        rows = self.store.find("books", criteria, order_by="title", limit=limit)
        return [BookRead(**row) for row in rows]

    async def recent_books(self, limit: int = 10) -> List[BookRead]:
        """Return the most recently created books, newest first."""
        rows = self.store.find("books", order_by="created_at", descending=True, limit=limit)
        return [BookRead(**row) for row in rows]

    async def update_book(
        self,
        book_id: int,
        data: BookUpdate,
        cover: Optional[CoverPayload],
        caller_id: int,
    ) -> BookRead:
        """Apply a partial update to a book owned by ``caller_id``."""
        book = await self.get_book(book_id)
        ensure_owner(book, caller_id)

        changes = data.model_dump(exclude_unset=True, exclude={"cover"})
        if isinstance(changes.get("title"), str):
            changes["title"] = changes["title"].strip()
        record = book.model_dump()
        record.pop("cover_image_path", None)
        record["cover_image"] = book.cover_image
        record.update(changes)
        self._apply_cover(record, cover)
        self._validate(record)

        updated = self._save(record)
        logger.info("User %s updated book %s", caller_id, book_id)
        return updated

    async def delete_book(self, book_id: int, caller_id: int) -> None:
        book = await self.get_book(book_id)
        ensure_owner(book, caller_id)
        if not self.store.remove("books", book_id):
            raise NotFound("Book", book_id)
        logger.info("User %s deleted book %s", caller_id, book_id)
