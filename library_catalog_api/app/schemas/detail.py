"""
Detail views joining related records.

``AuthorDetail`` bundles an author with the name of the user who
created it and a preview of their books; ``BookDetail`` is a book with
its author and the creating user's name.  Related records that no
longer exist are reported as ``None``.
"""

from typing import List, Optional

from pydantic import BaseModel

from .author import AuthorRead
from .book import BookRead


class AuthorDetail(BaseModel):
    author: AuthorRead
    owner_name: Optional[str] = None
    books: List[BookRead] = []


class BookDetail(BookRead):
    author: Optional[AuthorRead] = None
    owner_name: Optional[str] = None
