"""Library Catalog API client.

A thin wrapper around the catalog's REST API built on ``requests``.
Every operation returns a tuple ``(data, error)``: on success ``error``
is ``None``; on failure ``data`` is ``None`` (or an empty list for
listings) and ``error`` is a dictionary with the keys ``status_code``,
``code`` and ``message``.

Typical use::

    client = LibraryCatalogClient(base_url="http://localhost:8000")
    client.register("Ada", "ada@example.com", "secret")
    client.login("ada@example.com", "secret")
    author, _ = client.create_author("Frank Herbert")
    book, err = client.create_book(
        title="Dune",
        author_id=author["id"],
        publish_date="1965-08-01",
        page_count=412,
        cover=cover_payload_from_file("dune.png"),
    )
"""

from __future__ import annotations

import base64
import logging
import mimetypes
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


def cover_payload_from_file(path: str, mime_type: Optional[str] = None) -> Dict[str, str]:
    """Build a ``{"type", "data"}`` cover payload from an image file.

    The MIME type is guessed from the file name unless given.
    """
    guessed = mime_type or mimetypes.guess_type(path)[0] or "application/octet-stream"
    with open(path, "rb") as f:
        data = base64.b64encode(f.read()).decode("ascii")
    return {"type": guessed, "data": data}


class LibraryCatalogClient:
    """Client for the Library Catalog API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8000``.
            token: Optional bearer token.  ``login`` sets it.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per‑request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _error_from_response(response: requests.Response) -> Dict[str, Any]:
        code = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            code = body["error"].get("code")
            message = body["error"].get("message")
        elif isinstance(body, dict) and "detail" in body:
            message = body["detail"] if isinstance(body["detail"], str) else str(body["detail"])
        else:
            message = response.text
        return {"status_code": response.status_code, "code": code, "message": message or response.reason}

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Result:
        """Perform an HTTP request against ``API_PREFIX + path``.

        Returns ``(data, None)`` with the parsed JSON body (``None`` for
        empty responses) or ``(None, error)``.
        """
        url = f"{self.base_url}{API_PREFIX}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "code": None, "message": str(exc)}
        if not response.ok:
            error = self._error_from_response(response)
            logger.error("API request failed (%s): %s", error["status_code"], error["message"])
            return None, error
        if response.content:
            return response.json(), None
        return None, None

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def register(self, name: str, email: str, password: str) -> Result:
        return self._request(
            "POST", "/users/register", json_body={"name": name, "email": email, "password": password}
        )

    def login(self, email: str, password: str) -> Result:
        """Log in and keep the returned token for later requests."""
        data, error = self._request("POST", "/users/login", json_body={"email": email, "password": password})
        if error:
            return None, error
        self.token = data["access_token"]
        return data, None

    def me(self) -> Result:
        return self._request("GET", "/users/me")

    # ------------------------------------------------------------------
    # Authors
    # ------------------------------------------------------------------
    def list_authors(self, name: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/authors/", params={"name": name})
        return (data or [], error)

    def get_author(self, author_id: int) -> Result:
        """Return ``{"author": ..., "owner_name": ..., "books": [...]}`` for one author."""
        return self._request("GET", f"/authors/{author_id}")

    def create_author(self, name: str) -> Result:
        return self._request("POST", "/authors/", json_body={"name": name})

    def rename_author(self, author_id: int, name: str) -> Result:
        return self._request("PUT", f"/authors/{author_id}", json_body={"name": name})

    def delete_author(self, author_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/authors/{author_id}")
        return error is None, error

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------
    def recent_books(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/")
        if error:
            return [], error
        return data.get("recent_books", []), None

    def list_books(
        self,
        title: Optional[str] = None,
        published_after: Optional[str] = None,
        published_before: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request(
            "GET",
            "/books/",
            params={
                "title": title,
                "published_after": published_after,
                "published_before": published_before,
            },
        )
        return (data or [], error)

    def get_book(self, book_id: int) -> Result:
        """Return one book with its ``author`` and ``owner_name`` joined in."""
        return self._request("GET", f"/books/{book_id}")

    def create_book(
        self,
        *,
        title: str,
        author_id: int,
        publish_date: str,
        page_count: int,
        cover: Dict[str, str],
        description: Optional[str] = None,
    ) -> Result:
        body = {
            "title": title,
            "author_id": author_id,
            "publish_date": publish_date,
            "page_count": page_count,
            "description": description,
            "cover": cover,
        }
        return self._request("POST", "/books/", json_body=body)

    def update_book(self, book_id: int, **changes: Any) -> Result:
        """Send a partial update; only the given keyword fields change."""
        return self._request("PUT", f"/books/{book_id}", json_body=changes)

    def delete_book(self, book_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/books/{book_id}")
        return error is None, error
