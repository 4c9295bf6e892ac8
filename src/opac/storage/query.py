"""Keyword, title, author, publisher and year search over the catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
import sqlite3

SEARCH_FIELDS = ("keyword", "title", "author", "publisher", "year")

# Display suffix for each stored role; plain authors are shown without one.
ROLE_DISPLAY_SUFFIXES = {
    "editor": "編著",
    "director": "監修",
    "author": "著",
    "translator": "訳",
    "illustrator": "絵",
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


@dataclass(slots=True)
class BookAuthorHit:
    full_name: str
    role: str

    @property
    def formatted(self) -> str:
        if self.role == "author":
            return self.full_name
        return self.full_name + ROLE_DISPLAY_SUFFIXES.get(self.role, "")


@dataclass(slots=True)
class BookHit:
    book_id: int
    title: str
    publisher: str | None
    published_location: str | None
    publication_year: int | None
    publication_month: int | None
    page_count: int | None
    width: int | None
    height: int | None
    isbn: str | None
    nbc: str | None
    holding_record: str
    holding_location_name: str
    authors: list[BookAuthorHit] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def publication_date(self) -> str:
        result = "" if self.publication_year is None else str(self.publication_year)
        if self.publication_month:
            result += f"-{self.publication_month}"
        return result

    @property
    def size(self) -> str:
        result = ""
        if self.width:
            result += f"{self.width}x"
        if self.height:
            result += f"{self.height}cm"
        return result

    def to_dict(self) -> dict[str, object]:
        return {
            "book_id": self.book_id,
            "title": self.title,
            "authors": [author.formatted for author in self.authors],
            "publisher": self.publisher,
            "published_location": self.published_location,
            "publication_date": self.publication_date,
            "page_count": self.page_count,
            "size": self.size,
            "isbn": self.isbn,
            "nbc": self.nbc,
            "holding_record": self.holding_record,
            "holding_location": self.holding_location_name,
            "notes": list(self.notes),
        }


def _like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _leading_int(value: str) -> int | None:
    match = _LEADING_INT_RE.match(value)
    if match is None:
        return None
    return int(match.group(1))


def _title_clause(query: str) -> tuple[str, list[object]]:
    return "b.title LIKE ? ESCAPE '\\'", [_like_pattern(query)]


def _publisher_clause(query: str) -> tuple[str, list[object]]:
    return "b.publisher LIKE ? ESCAPE '\\'", [_like_pattern(query)]


def _author_clause(query: str) -> tuple[str, list[object]]:
    return (
        "EXISTS ("
        "SELECT 1 FROM book_authors ba "
        "JOIN authors a ON a.id = ba.author_id "
        "WHERE ba.book_id = b.id AND a.full_name LIKE ? ESCAPE '\\')",
        [_like_pattern(query)],
    )


def build_filter(query: str, field_name: str = "keyword") -> tuple[str, list[object]]:
    """Return a SQL condition over ``books b`` and its parameters."""

    if field_name == "title":
        return _title_clause(query)
    if field_name == "publisher":
        return _publisher_clause(query)
    if field_name == "author":
        return _author_clause(query)
    if field_name == "year":
        year = _leading_int(query)
        if year is None:
            return "0", []
        return "b.publication_year = ?", [year]
    if field_name != "keyword":
        raise ValueError(f"Unsupported search field: {field_name}")

    clauses: list[str] = []
    params: list[object] = []
    for clause, clause_params in (_title_clause(query), _author_clause(query), _publisher_clause(query)):
        clauses.append(clause)
        params.extend(clause_params)

    year = _leading_int(query)
    if year is not None:
        clauses.append("b.publication_year = ?")
        params.append(year)

    clauses.append("b.isbn = ?")
    params.append(query)
    return " OR ".join(f"({clause})" for clause in clauses), params


def _load_authors(connection: sqlite3.Connection, book_ids: list[int]) -> dict[int, list[BookAuthorHit]]:
    placeholders = ",".join("?" for _ in book_ids)
    rows = connection.execute(
        f"""
        SELECT ba.book_id AS book_id, a.full_name AS full_name, ba.role AS role
        FROM book_authors ba
        JOIN authors a ON a.id = ba.author_id
        WHERE ba.book_id IN ({placeholders})
        ORDER BY ba.rowid ASC
        """,
        tuple(book_ids),
    ).fetchall()

    authors: dict[int, list[BookAuthorHit]] = {}
    for row in rows:
        authors.setdefault(int(row["book_id"]), []).append(
            BookAuthorHit(full_name=row["full_name"], role=row["role"])
        )
    return authors


def _load_notes(connection: sqlite3.Connection, book_ids: list[int]) -> dict[int, list[str]]:
    placeholders = ",".join("?" for _ in book_ids)
    rows = connection.execute(
        f"""
        SELECT book_id, content
        FROM notes
        WHERE book_id IN ({placeholders})
        ORDER BY id ASC
        """,
        tuple(book_ids),
    ).fetchall()

    notes: dict[int, list[str]] = {}
    for row in rows:
        notes.setdefault(int(row["book_id"]), []).append(row["content"])
    return notes


def search_books(
    connection: sqlite3.Connection,
    *,
    query: str,
    field_name: str = "keyword",
    limit: int = 20,
) -> list[BookHit]:
    """Search books by one field; ``keyword`` ORs all of them plus ISBN."""

    if not query.strip():
        return []

    safe_limit = max(1, min(limit, 100))
    condition, params = build_filter(query.strip(), field_name)
    rows = connection.execute(
        f"""
        SELECT
            b.id AS book_id,
            b.title AS title,
            b.publisher AS publisher,
            b.published_location AS published_location,
            b.publication_year AS publication_year,
            b.publication_month AS publication_month,
            b.page_count AS page_count,
            b.width AS width,
            b.height AS height,
            b.isbn AS isbn,
            b.nbc AS nbc,
            b.holding_record AS holding_record,
            hl.name AS holding_location_name
        FROM books b
        JOIN holding_locations hl ON hl.id = b.holding_location_id
        WHERE {condition}
        ORDER BY b.id ASC
        LIMIT ?
        """,
        (*params, safe_limit),
    ).fetchall()
    if not rows:
        return []

    book_ids = [int(row["book_id"]) for row in rows]
    authors = _load_authors(connection, book_ids)
    notes = _load_notes(connection, book_ids)

    return [
        BookHit(
            book_id=int(row["book_id"]),
            title=row["title"],
            publisher=row["publisher"],
            published_location=row["published_location"],
            publication_year=row["publication_year"],
            publication_month=row["publication_month"],
            page_count=row["page_count"],
            width=row["width"],
            height=row["height"],
            isbn=row["isbn"],
            nbc=row["nbc"],
            holding_record=row["holding_record"],
            holding_location_name=row["holding_location_name"],
            authors=authors.get(int(row["book_id"]), []),
            notes=notes.get(int(row["book_id"]), []),
        )
        for row in rows
    ]
