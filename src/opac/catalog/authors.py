"""Author list parsing with role suffixes and authorheading matching."""

from __future__ import annotations

import re
from typing import Sequence

from opac.catalog.fields import split_first, strip_brackets_and_trim
from opac.catalog.models import (
    AuthorAttribution,
    AuthorHeading,
    AuthorMention,
    ResolvedAuthor,
    Role,
)

# Checked in order, first match wins: 編著 must come before 編 and 著.
ROLE_SUFFIXES: tuple[tuple[str, Role], ...] = (
    ("編著", Role.EDITOR),
    ("監修", Role.DIRECTOR),
    ("編", Role.EDITOR),
    ("著", Role.AUTHOR),
    ("訳", Role.TRANSLATOR),
    ("絵", Role.ILLUSTRATOR),
)

# A bare "," also separates authors, which collides with "last, first" names.
_AUTHOR_SEPARATOR_RE = re.compile(r" ; |，|,")
_NAME_SEPARATOR = ", "
_KANA_SEPARATOR = " ("


def parse_author_heading(heading: str) -> AuthorHeading:
    """Parse ``"last, first"`` or ``"kana_last, kana_first (last, first)"``."""

    if _KANA_SEPARATOR not in heading:
        last_name, first_name = split_first(heading, _NAME_SEPARATOR)
        return AuthorHeading(last_name=last_name, first_name=first_name)

    kana, name = split_first(heading, _KANA_SEPARATOR)
    name = name or ""
    if name.endswith(")"):
        name = name[:-1]
    last_name_kana, first_name_kana = split_first(kana, _NAME_SEPARATOR)
    last_name, first_name = split_first(name, _NAME_SEPARATOR)
    return AuthorHeading(
        last_name=last_name,
        first_name=first_name,
        last_name_kana=last_name_kana,
        first_name_kana=first_name_kana,
    )


def split_author_mentions(raw_authors: str | None) -> list[AuthorMention]:
    if raw_authors is None:
        return []
    return [
        AuthorMention(raw_text=segment)
        for segment in _AUTHOR_SEPARATOR_RE.split(raw_authors)
        if segment.strip()
    ]


def strip_role_suffix(text: str) -> tuple[str, Role]:
    for suffix, role in ROLE_SUFFIXES:
        if text.endswith(suffix):
            return text[: -len(suffix)], role
    return text, Role.AUTHOR


def match_heading(author_name: str, headings: Sequence[AuthorHeading]) -> AuthorHeading | None:
    """Return the first heading whose last name occurs in ``author_name``."""

    for heading in headings:
        if heading.last_name and heading.last_name in author_name:
            return heading
    return None


def parse_author(mention: AuthorMention, headings: Sequence[AuthorHeading]) -> AuthorAttribution:
    text = mention.raw_text.replace("[", "").replace("]", "").strip()
    text, role = strip_role_suffix(text)
    author_name = strip_brackets_and_trim(text)

    heading = match_heading(author_name, headings)
    if heading is None:
        return AuthorAttribution(author=ResolvedAuthor(full_name=author_name), role=role)

    author = ResolvedAuthor(
        full_name=author_name,
        first_name=heading.first_name,
        last_name=heading.last_name,
        first_name_kana=heading.first_name_kana,
        last_name_kana=heading.last_name_kana,
    )
    return AuthorAttribution(author=author, role=role)


def parse_authors(raw_authors: str | None, raw_headings: Sequence[str]) -> list[AuthorAttribution]:
    """Parse an author list against the record's authorheading lines.

    The result keeps the order of the source list, which downstream treats as
    the display order (first entry is the primary author).
    """

    headings = [parse_author_heading(raw_heading) for raw_heading in raw_headings]
    return [parse_author(mention, headings) for mention in split_author_mentions(raw_authors)]
