"""Batch-scoped identity resolution for authors and holding locations.

Authors are deduplicated by exact structural equality of every name field,
so two different people with identical parsed names share one key. Holding
locations are deduplicated by exact name. Keys start at 1 and follow
first-seen order across the batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable, Sequence

from opac.catalog.models import NormalizedBook, ResolvedAuthor


@dataclass(frozen=True, slots=True)
class HoldingLocationRow:
    id: int
    name: str


@dataclass(frozen=True, slots=True)
class BookRow:
    id: int
    holding_location_id: int
    holding_record: str
    nbc: str | None
    isbn: str | None
    title: str
    publisher: str | None
    published_location: str | None
    publication_year: int | None
    publication_month: int | None
    page_count: int | None
    height: int | None
    width: int | None


@dataclass(frozen=True, slots=True)
class AuthorRow:
    id: int
    full_name: str
    first_name: str | None
    last_name: str | None
    first_name_kana: str | None
    last_name_kana: str | None


@dataclass(frozen=True, slots=True)
class BookAuthorRow:
    book_id: int
    author_id: int
    role: str


@dataclass(frozen=True, slots=True)
class NoteRow:
    id: int
    book_id: int
    content: str


@dataclass(slots=True)
class CatalogBatch:
    """Relational rows for one import, every foreign key already resolved."""

    holding_locations: list[HoldingLocationRow] = field(default_factory=list)
    books: list[BookRow] = field(default_factory=list)
    authors: list[AuthorRow] = field(default_factory=list)
    book_authors: list[BookAuthorRow] = field(default_factory=list)
    notes: list[NoteRow] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "holding_locations": len(self.holding_locations),
            "books": len(self.books),
            "authors": len(self.authors),
            "book_authors": len(self.book_authors),
            "notes": len(self.notes),
        }


class KeyRegistry:
    """Assigns surrogate keys to hashable values in first-seen order."""

    def __init__(self) -> None:
        self._keys: dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, value: object) -> bool:
        return value in self._keys

    def key_for(self, value: Hashable) -> int:
        key = self._keys.get(value)
        if key is None:
            key = len(self._keys) + 1
            self._keys[value] = key
        return key


class IdentityResolver:
    """Owns the author and location maps of the batch being resolved."""

    def __init__(self) -> None:
        self._authors = KeyRegistry()
        self._locations = KeyRegistry()

    def author_key(self, author: ResolvedAuthor) -> int:
        return self._authors.key_for(author.identity_key())

    def location_key(self, name: str) -> int:
        return self._locations.key_for(name)

    def resolve(self, books: Sequence[NormalizedBook]) -> CatalogBatch:
        """Resolve all keys and build the relational rows for ``books``.

        Keys restart at 1 on every call; each batch is self-contained.
        """

        self._authors = KeyRegistry()
        self._locations = KeyRegistry()
        batch = CatalogBatch()
        authors_by_key: dict[int, ResolvedAuthor] = {}

        # Authors get keys over the full batch before any book row is built.
        for book in books:
            for attribution in book.authors:
                authors_by_key.setdefault(self.author_key(attribution.author), attribution.author)

        for book_id, book in enumerate(books, start=1):
            location_id = self._add_location(batch, book.holding_location_name)
            batch.books.append(_book_row(book_id, location_id, book))
            batch.book_authors.extend(self._book_author_rows(book_id, book))
            for content in book.notes:
                batch.notes.append(NoteRow(id=len(batch.notes) + 1, book_id=book_id, content=content))

        batch.authors.extend(
            AuthorRow(
                id=author_id,
                full_name=author.full_name,
                first_name=author.first_name,
                last_name=author.last_name,
                first_name_kana=author.first_name_kana,
                last_name_kana=author.last_name_kana,
            )
            for author_id, author in sorted(authors_by_key.items())
        )
        return batch

    def _add_location(self, batch: CatalogBatch, name: str) -> int:
        if name not in self._locations:
            batch.holding_locations.append(HoldingLocationRow(id=self.location_key(name), name=name))
        return self.location_key(name)

    def _book_author_rows(self, book_id: int, book: NormalizedBook) -> Iterable[BookAuthorRow]:
        seen: set[tuple[int, str]] = set()
        for attribution in book.authors:
            pair = (self.author_key(attribution.author), attribution.role.value)
            if pair in seen:
                continue
            seen.add(pair)
            yield BookAuthorRow(book_id=book_id, author_id=pair[0], role=pair[1])


def _book_row(book_id: int, location_id: int, book: NormalizedBook) -> BookRow:
    return BookRow(
        id=book_id,
        holding_location_id=location_id,
        holding_record=book.holding_record_id,
        nbc=book.nbc,
        isbn=book.isbn,
        title=book.title,
        publisher=book.publisher,
        published_location=book.publisher_location,
        publication_year=book.year,
        publication_month=book.month,
        page_count=book.page_count,
        height=book.height,
        width=book.width,
    )


def resolve_batch(books: Sequence[NormalizedBook]) -> CatalogBatch:
    """Resolve ``books`` with a fresh resolver so no state leaks across runs."""

    return IdentityResolver().resolve(books)
