"""Assemble raw records into normalized books."""

from __future__ import annotations

import logging
from typing import Iterable

from opac.catalog.authors import parse_authors
from opac.catalog.biblio import parse_physical, parse_publication, parse_title_line
from opac.catalog.errors import CatalogParseError, MissingRequiredFieldError
from opac.catalog.models import NormalizedBook, RawRecord
from opac.catalog.reader import REPEATED_KEYS, iter_raw_records

LOGGER = logging.getLogger(__name__)

REQUIRED_KEYS = ("tr", "pub", "holdingloc", "holdingsrecord")
_CONSUMED_KEYS = frozenset({"tr", "pub", "phys", "holdingloc", "holdingsrecord", "isbn", "nbc"}) | REPEATED_KEYS


def _require(record: RawRecord, key: str) -> str:
    value = record.get(key)
    if value is None:
        raise MissingRequiredFieldError("assemble", f"record has no {key.upper()} line")
    return value


def assemble_book(record: RawRecord) -> NormalizedBook:
    """Merge the parsed TR, PUB and PHYS lines with the passthrough fields."""

    raw_tr, raw_pub, holding_location, holding_record = (_require(record, key) for key in REQUIRED_KEYS)

    title_line = parse_title_line(raw_tr)
    if not title_line.title:
        raise MissingRequiredFieldError("assemble", f"TR line has an empty title: {raw_tr!r}")

    authors = parse_authors(title_line.raw_authors, record.values("authorheading"))
    publication = parse_publication(raw_pub)
    physical = parse_physical(record.get("phys"))

    return NormalizedBook(
        title=title_line.title,
        holding_location_name=holding_location,
        holding_record_id=holding_record,
        authors=authors,
        publisher_location=publication.location,
        publisher=publication.publisher,
        year=publication.year,
        month=publication.month,
        page_count=physical.page_count,
        width=physical.width,
        height=physical.height,
        isbn=record.get("isbn"),
        nbc=record.get("nbc"),
        notes=list(record.values("note")),
        extra_fields={key: value for key, value in record.fields.items() if key not in _CONSUMED_KEYS},
    )


def assemble_books(records: Iterable[RawRecord]) -> list[NormalizedBook]:
    """Assemble every record; the first failure aborts the whole batch."""

    books: list[NormalizedBook] = []
    for record_no, record in enumerate(records, start=1):
        try:
            books.append(assemble_book(record))
        except CatalogParseError as exc:
            exc.attach_record(record_no, record)
            raise
    LOGGER.debug("Assembled %s books", len(books))
    return books


def parse_records(lines: Iterable[str]) -> list[NormalizedBook]:
    """Read and assemble a whole export held in memory."""

    return assemble_books(iter_raw_records(lines))
