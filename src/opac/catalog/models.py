"""Data structures shared by the catalog parsing pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class Role(Enum):
    AUTHOR = "author"
    EDITOR = "editor"
    DIRECTOR = "director"
    TRANSLATOR = "translator"
    ILLUSTRATOR = "illustrator"


@dataclass(frozen=True, slots=True)
class RawRecord:
    """One sentinel-terminated block of `KEY: value` lines.

    ``fields`` holds scalar keys (last write wins) and ``repeated`` holds the
    repeatable keys as tuples in source order. Every repeatable key is present,
    possibly as an empty tuple.
    """

    fields: Mapping[str, str]
    repeated: Mapping[str, tuple[str, ...]]
    start_line: int = 0
    lines: tuple[str, ...] = ()

    def get(self, key: str) -> str | None:
        return self.fields.get(key)

    def values(self, key: str) -> tuple[str, ...]:
        return self.repeated.get(key, ())


@dataclass(frozen=True, slots=True)
class AuthorMention:
    raw_text: str


@dataclass(frozen=True, slots=True)
class AuthorHeading:
    """Standardized name variant parsed from an `authorheading` line."""

    last_name: str | None
    first_name: str | None = None
    last_name_kana: str | None = None
    first_name_kana: str | None = None


@dataclass(frozen=True, slots=True)
class ResolvedAuthor:
    """Author identity; equal field values mean the same entity within a batch."""

    full_name: str
    first_name: str | None = None
    last_name: str | None = None
    first_name_kana: str | None = None
    last_name_kana: str | None = None

    def identity_key(self) -> tuple[str, str | None, str | None, str | None, str | None]:
        return (
            self.full_name,
            self.first_name,
            self.last_name,
            self.first_name_kana,
            self.last_name_kana,
        )


@dataclass(frozen=True, slots=True)
class AuthorAttribution:
    author: ResolvedAuthor
    role: Role = Role.AUTHOR


@dataclass(frozen=True, slots=True)
class PublicationInfo:
    location: str | None
    publisher: str | None
    year: int
    month: int | None = None


@dataclass(frozen=True, slots=True)
class PhysicalDescription:
    page_count: int | None = None
    width: int | None = None
    height: int | None = None


@dataclass(slots=True)
class NormalizedBook:
    """Fully parsed book ready for identity resolution."""

    title: str
    holding_location_name: str
    holding_record_id: str
    authors: list[AuthorAttribution] = field(default_factory=list)
    publisher_location: str | None = None
    publisher: str | None = None
    year: int | None = None
    month: int | None = None
    page_count: int | None = None
    width: int | None = None
    height: int | None = None
    isbn: str | None = None
    nbc: str | None = None
    notes: list[str] = field(default_factory=list)
    extra_fields: dict[str, str] = field(default_factory=dict)
