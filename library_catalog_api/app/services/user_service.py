"""
Business logic for users.

The ``UserService`` registers users with a salted password hash and
authenticates them by e‑mail and password.  Users are the owners of
the authors and books they create.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from ..core.db import DocumentStore
from ..core.errors import DuplicateEmail, DuplicateKeyError, NotFound, ValidationFailed
from ..core.security import hash_password, verify_password
from ..schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)


def _to_user_read(row: dict) -> UserRead:
    return UserRead(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        created_at=row["created_at"],
    )


class UserService:
    """Service for registering and authenticating users."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def register_user(self, data: UserCreate) -> UserRead:
        """Create a new user and return it.

        Name, e‑mail and password must be non‑blank.  The e‑mail is
        normalised to lower case so that logins are case‑insensitive.
        Raises ``DuplicateEmail`` if the address is already taken.
        """
        name = data.name.strip()
        email = data.email.strip().lower()
        if not name:
            raise ValidationFailed("Name must not be blank", field="name")
        if not email:
            raise ValidationFailed("Email must not be blank", field="email")
        if not data.password:
            raise ValidationFailed("Password must not be blank", field="password")

        logger.info("Registering user %s", email)
        try:
            row = self.store.save(
                "users",
                {
                    "name": name,
                    "email": email,
                    "password": hash_password(data.password),
                    "created_at": datetime.now(timezone.utc),
                },
            )
        except DuplicateKeyError as e:
            raise DuplicateEmail(f"Email {email} is already registered") from e
        return _to_user_read(row)

    async def authenticate(self, email: str, password: str) -> Optional[UserRead]:
        """Return the user if the credentials match, otherwise ``None``."""
        rows = self.store.find("users", {"email": email.strip().lower()}, limit=1)
        if not rows:
            return None
        row = rows[0]
        if not verify_password(password, row["password"]):
            logger.info("Rejected login for %s", row["email"])
            return None
        return _to_user_read(row)

    async def get_user(self, user_id: int) -> UserRead:
        row = self.store.find_by_id("users", user_id)
        if row is None:
            raise NotFound("User", user_id)
        return _to_user_read(row)
