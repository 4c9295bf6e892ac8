"""Batch import orchestrator: export file to SQLite catalog."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import time

from opac.catalog.assembler import parse_records
from opac.catalog.identity import CatalogBatch, resolve_batch
from opac.catalog.reader import read_source_lines
from opac.storage.repository import CatalogRepository

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportRunStats:
    source_path: str
    books: int = 0
    authors: int = 0
    holding_locations: int = 0
    book_authors: int = 0
    notes: int = 0
    duration_ms: int = 0

    def to_dict(self) -> dict[str, str | int]:
        return {
            "source_path": self.source_path,
            "books": self.books,
            "authors": self.authors,
            "holding_locations": self.holding_locations,
            "book_authors": self.book_authors,
            "notes": self.notes,
            "duration_ms": self.duration_ms,
        }


def build_batch(path: str | Path, *, encoding: str | None = None) -> CatalogBatch:
    """Parse the whole export and resolve identities; nothing is written."""

    lines = read_source_lines(path, encoding=encoding)
    books = parse_records(lines)
    return resolve_batch(books)


class CatalogImporter:
    """Parses an export completely, then writes it in one transaction."""

    def __init__(self, repository: CatalogRepository) -> None:
        self._repository = repository

    @classmethod
    def from_db_path(cls, db_path: str | Path) -> "CatalogImporter":
        return cls(repository=CatalogRepository(db_path))

    @property
    def repository(self) -> CatalogRepository:
        return self._repository

    def close(self) -> None:
        self._repository.close()

    def __enter__(self) -> "CatalogImporter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def import_file(
        self,
        path: str | Path,
        *,
        encoding: str | None = None,
        replace: bool = False,
    ) -> ImportRunStats:
        started = time.perf_counter()
        source = Path(path)
        LOGGER.info("Importing catalog export %s", source)

        batch = build_batch(source, encoding=encoding)
        written = self._repository.write_batch(batch, replace=replace)

        stats = ImportRunStats(
            source_path=str(source),
            books=written["books"],
            authors=written["authors"],
            holding_locations=written["holding_locations"],
            book_authors=written["book_authors"],
            notes=written["notes"],
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        LOGGER.info("Inserted %s books and %s authors from %s", stats.books, stats.authors, source)
        return stats
