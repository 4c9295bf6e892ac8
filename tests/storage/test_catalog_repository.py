from __future__ import annotations

from pathlib import Path
import sqlite3

import pytest

from opac.catalog.identity import BookAuthorRow, CatalogBatch, resolve_batch
from opac.catalog.models import AuthorAttribution, NormalizedBook, ResolvedAuthor, Role
from opac.storage.repository import CatalogRepository


def _book(title: str, *authors: AuthorAttribution) -> NormalizedBook:
    return NormalizedBook(
        title=title,
        holding_location_name="Tokyo Main",
        holding_record_id=f"HR-{title}",
        authors=list(authors),
        publisher="岩波書店",
        year=2004,
        month=8,
        page_count=120,
        notes=[f"note for {title}"],
    )


def test_schema_initialization_creates_expected_tables(tmp_path: Path) -> None:
    with CatalogRepository(tmp_path / "catalog.db") as repo:
        rows = repo.connection.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
        table_names = {row["name"] for row in rows}

    assert {"holding_locations", "books", "authors", "book_authors", "notes"} <= table_names


def test_write_batch_links_rows_by_database_ids(tmp_path: Path) -> None:
    author = ResolvedAuthor(full_name="山田太郎", first_name="太郎", last_name="山田")
    batch = resolve_batch(
        [
            _book("本A", AuthorAttribution(author)),
            _book("本B", AuthorAttribution(author, Role.EDITOR)),
        ]
    )

    with CatalogRepository(tmp_path / "catalog.db") as repo:
        written = repo.write_batch(batch)
        rows = repo.connection.execute(
            """
            SELECT b.title, a.full_name, ba.role, hl.name AS location
            FROM book_authors ba
            JOIN books b ON b.id = ba.book_id
            JOIN authors a ON a.id = ba.author_id
            JOIN holding_locations hl ON hl.id = b.holding_location_id
            ORDER BY b.id
            """
        ).fetchall()

    assert written["books"] == 2
    assert [tuple(row) for row in rows] == [
        ("本A", "山田太郎", "author", "Tokyo Main"),
        ("本B", "山田太郎", "editor", "Tokyo Main"),
    ]


def test_failed_write_rolls_back_everything(tmp_path: Path) -> None:
    batch = resolve_batch([_book("本A")])
    broken = CatalogBatch(
        holding_locations=batch.holding_locations,
        books=batch.books,
        authors=batch.authors,
        book_authors=[BookAuthorRow(book_id=1, author_id=99, role="author")],
        notes=batch.notes,
    )

    with CatalogRepository(tmp_path / "catalog.db") as repo:
        with pytest.raises(KeyError):
            repo.write_batch(broken)

        assert repo.count_rows("books") == 0
        assert repo.count_rows("holding_locations") == 0


def test_role_constraint_rejects_unknown_roles(tmp_path: Path) -> None:
    author = ResolvedAuthor(full_name="山田太郎")
    batch = resolve_batch([_book("本A", AuthorAttribution(author))])
    batch.book_authors[0] = BookAuthorRow(book_id=1, author_id=1, role="ghostwriter")

    with CatalogRepository(tmp_path / "catalog.db") as repo:
        with pytest.raises(sqlite3.IntegrityError):
            repo.write_batch(batch)

        assert repo.count_rows("authors") == 0


def test_count_rows_rejects_unknown_table(tmp_path: Path) -> None:
    with CatalogRepository(tmp_path / "catalog.db") as repo:
        with pytest.raises(ValueError):
            repo.count_rows("sqlite_master")
