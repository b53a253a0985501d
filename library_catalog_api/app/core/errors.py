"""
Error hierarchy for the catalog.

Every error carries a stable ``code`` and the HTTP status the API
layer answers with.  Services raise these; they never retry, because
none of the write operations is safe to repeat blindly under the
uniqueness rules.  ``CatalogError.to_response`` produces the JSON
envelope returned to clients.
"""

from typing import Optional


class CatalogError(Exception):
    """Base exception for all catalog failures."""

    code = "CATALOG_ERROR"
    http_status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


# ─── Domain errors (400-level) ──────────────────────────────────

class ValidationFailed(CatalogError):
    """A required field is missing or malformed."""

    code = "VALIDATION_FAILED"
    http_status = 422

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class DuplicateName(CatalogError):
    """An author with the same name already exists."""

    code = "DUPLICATE_NAME"
    http_status = 409


class DuplicateTitle(CatalogError):
    """A book with the same title already exists."""

    code = "DUPLICATE_TITLE"
    http_status = 409


class DuplicateEmail(CatalogError):
    """A user with the same e-mail address is already registered."""

    code = "DUPLICATE_EMAIL"
    http_status = 409


class NotFound(CatalogError):
    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, kind: str, record_id: object) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class NotOwner(CatalogError):
    """The caller is not the owner of the record it tried to change."""

    code = "NOT_OWNER"
    http_status = 403


class HasDependentBooks(CatalogError):
    """An author cannot be deleted while books still reference it."""

    code = "HAS_DEPENDENT_BOOKS"
    http_status = 409

    def __init__(self, author_id: int) -> None:
        super().__init__(f"Author {author_id} still has books")
        self.author_id = author_id


# ─── Infrastructure errors (500-level) ──────────────────────────

class StoreError(CatalogError):
    """The underlying document store failed."""

    code = "STORE_ERROR"
    http_status = 503


class DuplicateKeyError(StoreError):
    """A UNIQUE constraint rejected a write.

    Raised by the store; services translate it into the matching
    domain error (``DuplicateName``, ``DuplicateTitle``, ...).
    """

    code = "DUPLICATE_KEY"
    http_status = 409

    def __init__(self, collection: str, field: str) -> None:
        super().__init__(f"Duplicate value for {collection}.{field}")
        self.collection = collection
        self.field = field
