from datetime import date

import pytest

from library_catalog_api.app.core.errors import (
    DuplicateEmail,
    DuplicateName,
    DuplicateTitle,
    HasDependentBooks,
    NotFound,
    NotOwner,
    ValidationFailed,
)
from library_catalog_api.app.schemas.author import AuthorCreate
from library_catalog_api.app.schemas.book import BookCreate, BookUpdate
from library_catalog_api.app.schemas.user import UserCreate
from library_catalog_api.app.services.author_service import AuthorService
from library_catalog_api.app.services.book_service import BookService
from library_catalog_api.app.services.user_service import UserService

from .conftest import GIF_BYTES, PNG_BYTES, cover_payload

OWNER = 1
STRANGER = 2


@pytest.fixture
def authors(store):
    return AuthorService(store)


@pytest.fixture
def books(store):
    return BookService(store)


def _book(author_id, title="Dune", published=date(1965, 8, 1), **extra):
    return BookCreate(
        title=title,
        description=extra.get("description"),
        publish_date=published,
        page_count=extra.get("page_count", 412),
        author_id=author_id,
        cover=extra.get("cover", cover_payload()),
    )


# ─── Users ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_register_and_authenticate(store):
    service = UserService(store)
    user = await service.register_user(UserCreate(name=" Ada ", email="Ada@Example.com", password="secret"))
    assert user.name == "Ada"
    assert user.email == "ada@example.com"
    assert (await service.authenticate("ADA@example.com", "secret")).id == user.id
    assert await service.authenticate("ada@example.com", "wrong") is None
    assert await service.authenticate("nobody@example.com", "secret") is None


@pytest.mark.asyncio
async def test_register_duplicate_email(store):
    service = UserService(store)
    await service.register_user(UserCreate(name="Ada", email="ada@example.com", password="secret"))
    with pytest.raises(DuplicateEmail):
        await service.register_user(UserCreate(name="Other", email="ADA@example.com", password="x"))


@pytest.mark.asyncio
async def test_register_rejects_blank_fields(store):
    service = UserService(store)
    with pytest.raises(ValidationFailed):
        await service.register_user(UserCreate(name="  ", email="ada@example.com", password="secret"))
    with pytest.raises(ValidationFailed):
        await service.register_user(UserCreate(name="Ada", email="ada@example.com", password=""))


@pytest.mark.asyncio
async def test_get_missing_user(store):
    with pytest.raises(NotFound):
        await UserService(store).get_user(5)


# ─── Authors ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_author_records_owner(authors):
    author = await authors.create_author(AuthorCreate(name="  Frank Herbert "), OWNER)
    assert author.name == "Frank Herbert"
    assert author.owner_id == OWNER
    assert (await authors.get_author(author.id)) == author


@pytest.mark.asyncio
async def test_create_author_rejects_blank_and_duplicate_names(authors):
    with pytest.raises(ValidationFailed):
        await authors.create_author(AuthorCreate(name="   "), OWNER)
    await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    with pytest.raises(DuplicateName):
        await authors.create_author(AuthorCreate(name="Frank Herbert"), STRANGER)


@pytest.mark.asyncio
async def test_list_authors_filters_by_name(authors):
    for name in ["Frank Herbert", "Brian Herbert", "Iain Banks"]:
        await authors.create_author(AuthorCreate(name=name), OWNER)
    assert [a.name for a in await authors.list_authors("herb")] == ["Brian Herbert", "Frank Herbert"]
    assert len(await authors.list_authors("  ")) == 3


@pytest.mark.asyncio
async def test_rename_author(authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbet"), OWNER)
    renamed = await authors.rename_author(author.id, "Frank Herbert", OWNER)
    assert renamed.name == "Frank Herbert"
    assert renamed.owner_id == OWNER


@pytest.mark.asyncio
async def test_rename_author_by_stranger_is_refused(authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    with pytest.raises(NotOwner):
        await authors.rename_author(author.id, "Someone Else", STRANGER)
    assert (await authors.get_author(author.id)).name == "Frank Herbert"


@pytest.mark.asyncio
async def test_rename_to_existing_name(authors):
    await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    other = await authors.create_author(AuthorCreate(name="Brian Herbert"), OWNER)
    with pytest.raises(DuplicateName):
        await authors.rename_author(other.id, "Frank Herbert", OWNER)


@pytest.mark.asyncio
async def test_delete_author_with_books_is_blocked(authors, books):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    book = await books.create_book(_book(author.id), cover_payload(), OWNER)
    with pytest.raises(HasDependentBooks):
        await authors.delete_author(author.id, OWNER)
    assert await authors.get_author(author.id)

    await books.delete_book(book.id, OWNER)
    await authors.delete_author(author.id, OWNER)
    with pytest.raises(NotFound):
        await authors.get_author(author.id)


@pytest.mark.asyncio
async def test_delete_author_checks_owner_first(authors, books):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    await books.create_book(_book(author.id), cover_payload(), OWNER)
    with pytest.raises(NotOwner):
        await authors.delete_author(author.id, STRANGER)


@pytest.mark.asyncio
async def test_delete_missing_author(authors):
    with pytest.raises(NotFound):
        await authors.delete_author(404, OWNER)


# ─── Books ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_book(books, authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    data = _book(author.id)
    book = await books.create_book(data, data.cover, OWNER)
    assert book.owner_id == OWNER
    assert book.cover_image == PNG_BYTES
    assert book.cover_image_type == "image/png"
    assert book.cover_image_path.startswith("data:image/png;base64,")
    assert book.publish_date == date(1965, 8, 1)
    assert (await books.get_book(book.id)).title == "Dune"


@pytest.mark.asyncio
async def test_create_book_requires_valid_cover(books, authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    with pytest.raises(ValidationFailed) as excinfo:
        await books.create_book(_book(author.id), None, OWNER)
    assert excinfo.value.field == "cover"
    with pytest.raises(ValidationFailed):
        await books.create_book(_book(author.id), cover_payload(mime_type="image/bmp"), OWNER)
    assert await books.list_books() == []


@pytest.mark.asyncio
async def test_create_book_validates_fields(books, authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    with pytest.raises(ValidationFailed):
        await books.create_book(_book(author.id, title="  "), cover_payload(), OWNER)
    with pytest.raises(ValidationFailed):
        await books.create_book(_book(author.id, page_count=0), cover_payload(), OWNER)
    with pytest.raises(ValidationFailed) as excinfo:
        await books.create_book(_book(999), cover_payload(), OWNER)
    assert excinfo.value.field == "author_id"


@pytest.mark.asyncio
async def test_create_book_duplicate_title(books, authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    await books.create_book(_book(author.id), cover_payload(), OWNER)
    with pytest.raises(DuplicateTitle):
        await books.create_book(_book(author.id), cover_payload(), STRANGER)


@pytest.mark.asyncio
async def test_list_books_filters(books, authors):
    herbert = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    lem = await authors.create_author(AuthorCreate(name="Stanislaw Lem"), OWNER)
    await books.create_book(_book(herbert.id, "Dune", date(1965, 8, 1)), cover_payload(), OWNER)
    await books.create_book(_book(herbert.id, "Dune Messiah", date(1969, 10, 15)), cover_payload(), OWNER)
    await books.create_book(_book(lem.id, "Solaris", date(1961, 6, 1)), cover_payload(), OWNER)

    assert [b.title for b in await books.list_books(title="DUNE")] == ["Dune", "Dune Messiah"]
    after = await books.list_books(published_after=date(1965, 8, 1))
    assert [b.title for b in after] == ["Dune", "Dune Messiah"]
    before = await books.list_books(published_before=date(1965, 8, 1))
    assert [b.title for b in before] == ["Dune", "Solaris"]
    both = await books.list_books(title="dune", published_after=date(1966, 1, 1))
    assert [b.title for b in both] == ["Dune Messiah"]
    by_author = await books.list_books(author_id=lem.id)
    assert [b.title for b in by_author] == ["Solaris"]
    assert len(await books.list_books(limit=2)) == 2


@pytest.mark.asyncio
async def test_recent_books_newest_first(books, store):
    for index, title in enumerate(["Old", "Middle", "New"]):
        store.save(
            "books",
            {
                "title": title,
                "publish_date": date(2000, 1, 1),
                "page_count": 10,
                "created_at": f"2024-01-0{index + 1}T00:00:00+00:00",
                "cover_image": PNG_BYTES,
                "cover_image_type": "image/png",
                "author_id": 1,
                "owner_id": OWNER,
            },
        )
    assert [b.title for b in await books.recent_books(limit=2)] == ["New", "Middle"]


@pytest.mark.asyncio
async def test_update_book_partial(books, authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    book = await books.create_book(_book(author.id, description="Spice"), cover_payload(), OWNER)
    changes = BookUpdate(page_count=500)
    updated = await books.update_book(book.id, changes, changes.cover, OWNER)
    assert updated.page_count == 500
    assert updated.title == "Dune"
    assert updated.description == "Spice"
    assert updated.cover_image == PNG_BYTES
    assert updated.created_at == book.created_at


@pytest.mark.asyncio
async def test_update_book_cover(books, authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    book = await books.create_book(_book(author.id), cover_payload(), OWNER)

    ignored = await books.update_book(book.id, BookUpdate(), cover_payload(mime_type="image/bmp"), OWNER)
    assert ignored.cover_image_type == "image/png"

    replaced = await books.update_book(book.id, BookUpdate(), cover_payload(GIF_BYTES, "image/gif"), OWNER)
    assert replaced.cover_image == GIF_BYTES
    assert replaced.cover_image_path.startswith("data:image/gif;base64,")


@pytest.mark.asyncio
async def test_update_book_by_stranger_is_refused(books, authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    book = await books.create_book(_book(author.id), cover_payload(), OWNER)
    with pytest.raises(NotOwner):
        await books.update_book(book.id, BookUpdate(title="Mine"), None, STRANGER)
    with pytest.raises(NotOwner):
        await books.delete_book(book.id, STRANGER)
    assert (await books.get_book(book.id)).title == "Dune"


@pytest.mark.asyncio
async def test_update_book_duplicate_title(books, authors):
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), OWNER)
    await books.create_book(_book(author.id, "Dune"), cover_payload(), OWNER)
    other = await books.create_book(_book(author.id, "Children of Dune"), cover_payload(), OWNER)
    with pytest.raises(DuplicateTitle):
        await books.update_book(other.id, BookUpdate(title="Dune"), None, OWNER)


@pytest.mark.asyncio
async def test_missing_book(books):
    with pytest.raises(NotFound):
        await books.get_book(1)
    with pytest.raises(NotFound):
        await books.delete_book(1, OWNER)


@pytest.mark.asyncio
async def test_list_authors_matches_accented_names(authors):
    await authors.create_author(AuthorCreate(name="Émile Zola"), OWNER)
    assert [a.name for a in await authors.list_authors("émile")] == ["Émile Zola"]


@pytest.mark.asyncio
async def test_author_detail_joins_owner_and_books(store, authors, books):
    owner = await UserService(store).register_user(UserCreate(name="Ada", email="ada@example.com", password="x"))
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), owner.id)
    for title in ["Dune Messiah", "Dune", "Children of Dune"]:
        await books.create_book(_book(author.id, title), cover_payload(), owner.id)

    detail = await authors.get_author_detail(author.id, books_limit=2)
    assert detail.author == author
    assert detail.owner_name == "Ada"
    assert [b.title for b in detail.books] == ["Children of Dune", "Dune"]


@pytest.mark.asyncio
async def test_book_detail_joins_author_and_owner(store, authors, books):
    owner = await UserService(store).register_user(UserCreate(name="Ada", email="ada@example.com", password="x"))
    author = await authors.create_author(AuthorCreate(name="Frank Herbert"), owner.id)
    book = await books.create_book(_book(author.id), cover_payload(), owner.id)

    detail = await books.get_book_detail(book.id)
    assert detail.title == "Dune"
    assert detail.author == author
    assert detail.owner_name == "Ada"
    assert detail.cover_image_path == book.cover_image_path

    store.remove("authors", author.id)
    orphan = await books.get_book_detail(book.id)
    assert orphan.author is None
    with pytest.raises(NotFound):
        await books.get_book_detail(book.id + 1)
