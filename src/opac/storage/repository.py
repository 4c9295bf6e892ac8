"""Transactional writer for resolved catalog batches."""

from __future__ import annotations

import logging
from pathlib import Path
import sqlite3

from opac.catalog.identity import CatalogBatch
from opac.storage.schema import CATALOG_TABLES, apply_runtime_pragmas, ensure_schema

LOGGER = logging.getLogger(__name__)


class CatalogRepository:
    """Thin transactional layer over the SQLite catalog schema."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._connection = sqlite3.connect(str(self._db_path))
        self._connection.row_factory = sqlite3.Row
        apply_runtime_pragmas(self._connection)
        ensure_schema(self._connection)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "CatalogRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def count_rows(self, table: str) -> int:
        if table not in CATALOG_TABLES:
            raise ValueError(f"Unknown catalog table: {table}")
        row = self._connection.execute(f"SELECT COUNT(*) AS c FROM {table}").fetchone()
        return int(row["c"])

    def write_batch(self, batch: CatalogBatch, *, replace: bool = False) -> dict[str, int]:
        """Insert one batch in a single transaction.

        Batch surrogate keys are translated to the row ids SQLite assigns, so
        a batch can be appended to a database that already holds rows. With
        ``replace`` the existing catalog is cleared inside the same
        transaction. Returns the number of rows written per table.
        """

        with self._connection:
            if replace:
                self._clear()

            location_ids: dict[int, int] = {}
            for location in batch.holding_locations:
                cursor = self._connection.execute(
                    "INSERT INTO holding_locations(name) VALUES(?)",
                    (location.name,),
                )
                location_ids[location.id] = int(cursor.lastrowid)

            author_ids: dict[int, int] = {}
            for author in batch.authors:
                cursor = self._connection.execute(
                    """
                    INSERT INTO authors(full_name, first_name, last_name, first_name_kana, last_name_kana)
                    VALUES(?, ?, ?, ?, ?)
                    """,
                    (
                        author.full_name,
                        author.first_name,
                        author.last_name,
                        author.first_name_kana,
                        author.last_name_kana,
                    ),
                )
                author_ids[author.id] = int(cursor.lastrowid)

            book_ids: dict[int, int] = {}
            for book in batch.books:
                cursor = self._connection.execute(
                    """
                    INSERT INTO books(
                        holding_location_id,
                        holding_record,
                        nbc,
                        isbn,
                        title,
                        publisher,
                        published_location,
                        publication_year,
                        publication_month,
                        page_count,
                        height,
                        width
                    )
                    VALUES(?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        location_ids[book.holding_location_id],
                        book.holding_record,
                        book.nbc,
                        book.isbn,
                        book.title,
                        book.publisher,
                        book.published_location,
                        book.publication_year,
                        book.publication_month,
                        book.page_count,
                        book.height,
                        book.width,
                    ),
                )
                book_ids[book.id] = int(cursor.lastrowid)

            self._connection.executemany(
                "INSERT INTO book_authors(book_id, author_id, role) VALUES(?, ?, ?)",
                [
                    (book_ids[link.book_id], author_ids[link.author_id], link.role)
                    for link in batch.book_authors
                ],
            )
            self._connection.executemany(
                "INSERT INTO notes(book_id, content) VALUES(?, ?)",
                [(book_ids[note.book_id], note.content) for note in batch.notes],
            )

        written = batch.counts()
        LOGGER.debug("Wrote catalog batch to %s: %s", self._db_path, written)
        return written

    def _clear(self) -> None:
        for table in ("book_authors", "notes", "books", "authors", "holding_locations"):
            self._connection.execute(f"DELETE FROM {table}")
