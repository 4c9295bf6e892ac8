"""SQLite schema and pragmas for the normalized catalog."""

from __future__ import annotations

import sqlite3


PRAGMA_BUSY_TIMEOUT_MS = 5000

CATALOG_TABLES = ("holding_locations", "books", "authors", "book_authors", "notes")


def apply_runtime_pragmas(connection: sqlite3.Connection) -> None:
    """Apply runtime pragmas for local batch imports."""

    connection.execute("PRAGMA journal_mode=WAL;")
    connection.execute(f"PRAGMA busy_timeout={PRAGMA_BUSY_TIMEOUT_MS};")
    connection.execute("PRAGMA synchronous=NORMAL;")
    connection.execute("PRAGMA foreign_keys=ON;")


def ensure_schema(connection: sqlite3.Connection) -> None:
    """Create catalog tables and indexes if missing."""

    connection.executescript(
        """
        CREATE TABLE IF NOT EXISTS holding_locations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS books (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            holding_location_id INTEGER NOT NULL,
            holding_record TEXT NOT NULL,
            nbc TEXT,
            isbn TEXT,
            title TEXT NOT NULL,
            publisher TEXT,
            published_location TEXT,
            publication_year INTEGER,
            publication_month INTEGER,
            page_count INTEGER,
            height INTEGER,
            width INTEGER,
            FOREIGN KEY(holding_location_id) REFERENCES holding_locations(id)
        );

        CREATE TABLE IF NOT EXISTS authors (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            full_name TEXT NOT NULL,
            first_name TEXT,
            last_name TEXT,
            first_name_kana TEXT,
            last_name_kana TEXT
        );

        CREATE TABLE IF NOT EXISTS book_authors (
            book_id INTEGER NOT NULL,
            author_id INTEGER NOT NULL,
            role TEXT NOT NULL
                CHECK(role IN ('author', 'editor', 'director', 'translator', 'illustrator')),
            PRIMARY KEY (book_id, author_id, role),
            FOREIGN KEY(book_id) REFERENCES books(id) ON DELETE CASCADE,
            FOREIGN KEY(author_id) REFERENCES authors(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS notes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            book_id INTEGER NOT NULL,
            content TEXT,
            FOREIGN KEY(book_id) REFERENCES books(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_book_authors_book_id ON book_authors(book_id);
        CREATE INDEX IF NOT EXISTS idx_book_authors_author_id ON book_authors(author_id);
        CREATE INDEX IF NOT EXISTS idx_notes_book_id ON notes(book_id);
        CREATE INDEX IF NOT EXISTS idx_books_holding_location_id ON books(holding_location_id);

        CREATE INDEX IF NOT EXISTS idx_books_isbn ON books(isbn);
        CREATE INDEX IF NOT EXISTS idx_books_nbc ON books(nbc);
        CREATE INDEX IF NOT EXISTS idx_books_publication_year ON books(publication_year);
        CREATE INDEX IF NOT EXISTS idx_books_publication_month ON books(publication_month);
        """
    )
