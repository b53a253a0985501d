import base64
import json

import pytest

from library_catalog_api.app.core.covers import CoverImage, decode_cover, to_data_uri
from library_catalog_api.app.schemas.book import BookRead

from .conftest import GIF_BYTES, PNG_BYTES, cover_payload


def test_to_data_uri():
    assert to_data_uri(b"abc", "image/png") == "data:image/png;base64,YWJj"


def test_decode_cover_from_mapping():
    image = decode_cover(cover_payload())
    assert image == CoverImage(data=PNG_BYTES, mime_type="image/png")
    assert image.data_uri.startswith("data:image/png;base64,")


def test_decode_cover_from_json_string():
    image = decode_cover(json.dumps(cover_payload(GIF_BYTES, "image/gif")))
    assert image is not None
    assert image.mime_type == "image/gif"
    assert image.data == GIF_BYTES


@pytest.mark.parametrize("payload", [None, "", "not json", "[1, 2]", "42"])
def test_decode_cover_rejects_unusable_payloads(payload):
    assert decode_cover(payload) is None


@pytest.mark.parametrize(
    "mime_type", ["image/bmp", "images/gif", "text/plain", None, ["image/png"], {"x": 1}]
)
def test_decode_cover_rejects_disallowed_types(mime_type):
    payload = {"type": mime_type, "data": base64.b64encode(PNG_BYTES).decode("ascii")}
    assert decode_cover(payload) is None


def test_decode_cover_rejects_bad_base64():
    assert decode_cover({"type": "image/jpeg", "data": "***not base64***"}) is None


def test_decode_cover_rejects_missing_data():
    assert decode_cover({"type": "image/jpeg"}) is None
    assert decode_cover({"type": "image/jpeg", "data": ""}) is None


def test_cover_image_path_is_derived_from_stored_bytes():
    book = BookRead(
        id=1,
        title="Dune",
        publish_date="1965-08-01",
        page_count=412,
        author_id=1,
        owner_id=1,
        created_at="2024-01-01T00:00:00+00:00",
        cover_image=PNG_BYTES,
        cover_image_type="image/png",
        cover_image_path="data:text/plain;base64,AAAA",
    )
    assert book.cover_image_path == to_data_uri(PNG_BYTES, "image/png")
    dumped = book.model_dump()
    assert "cover_image" not in dumped
    assert dumped["cover_image_path"].startswith("data:image/png;base64,")
