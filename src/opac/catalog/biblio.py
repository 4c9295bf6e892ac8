"""Parsers for the TR, PUB and PHYS lines of a catalog record."""

from __future__ import annotations

from dataclasses import dataclass
import re

from opac.catalog.errors import UnparseableDateError
from opac.catalog.fields import split_first, strip_or_none
from opac.catalog.models import PhysicalDescription, PublicationInfo

# 2004, 2004.8, c2004, [2004.8]
_DATE_RE = re.compile(r"([0-9]{2,4})(?:\.([0-9]{1,2}))?")
_PAGE_COUNT_RE = re.compile(r"([0-9]+)p")

_TITLE_SEPARATOR = " / "
_DATE_SEPARATOR = ", "
_PUBLISHER_SEPARATOR = " : "
_PHYS_SEPARATOR = " ; "


@dataclass(frozen=True, slots=True)
class TitleLine:
    title: str
    raw_authors: str | None


@dataclass(frozen=True, slots=True)
class PublicationDate:
    year: int
    month: int | None = None


def parse_title_line(raw_tr: str) -> TitleLine:
    """Split ``"title / author list"``; the author list may be absent."""

    title, raw_authors = split_first(raw_tr, _TITLE_SEPARATOR)
    return TitleLine(title=title.strip(), raw_authors=raw_authors)


def parse_date(raw_date: str | None) -> PublicationDate:
    if raw_date is None:
        raise UnparseableDateError("pub", "publication line has no date part")

    match = _DATE_RE.search(raw_date)
    if match is None:
        raise UnparseableDateError("pub", f"no year found in date {raw_date!r}")

    year, month = match.group(1), match.group(2)
    return PublicationDate(year=int(year), month=int(month) if month is not None else None)


def parse_publication(raw_pub: str) -> PublicationInfo:
    """Parse ``"[location] : publisher, date"`` into its parts."""

    raw_pub_info, raw_date = split_first(raw_pub, _DATE_SEPARATOR)
    date = parse_date(raw_date)
    raw_location, raw_publisher = split_first(raw_pub_info, _PUBLISHER_SEPARATOR)
    return PublicationInfo(
        location=strip_or_none(raw_location),
        publisher=strip_or_none(raw_publisher),
        year=date.year,
        month=date.month,
    )


def parse_physical(raw_phys: str | None) -> PhysicalDescription:
    """Extract the page count from a PHYS line.

    The dimensions segment (after ``" ; "``) is not interpreted: the export
    has no settled width/height notation, so both stay unset.
    """

    if raw_phys is None:
        return PhysicalDescription()

    raw_page_count, _dimensions = split_first(raw_phys, _PHYS_SEPARATOR)
    match = _PAGE_COUNT_RE.search(raw_page_count)
    if match is None:
        return PhysicalDescription()
    return PhysicalDescription(page_count=int(match.group(1)))
