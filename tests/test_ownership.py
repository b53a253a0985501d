import pytest

from library_catalog_api.app.core.errors import NotOwner
from library_catalog_api.app.core.ownership import Access, authorize, ensure_owner
from library_catalog_api.app.schemas.author import AuthorRead


def test_owner_is_allowed():
    assert authorize({"owner_id": 7}, 7) is Access.ALLOWED


def test_other_user_is_denied():
    assert authorize({"owner_id": 7}, 8) is Access.DENIED


def test_anonymous_caller_is_denied():
    assert authorize({"owner_id": 7}, None) is Access.DENIED


def test_record_without_owner_is_denied():
    assert authorize({}, 7) is Access.DENIED


def test_identifiers_compare_strictly():
    assert authorize({"owner_id": 7}, "7") is Access.DENIED


def test_attribute_records_are_supported():
    author = AuthorRead(id=1, name="Frank Herbert", owner_id=3)
    assert authorize(author, 3) is Access.ALLOWED


def test_ensure_owner_raises_for_non_owner():
    with pytest.raises(NotOwner):
        ensure_owner({"owner_id": 1}, 2)
    ensure_owner({"owner_id": 1}, 1)
