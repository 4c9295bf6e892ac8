"""Line reader for the `KEY: value` catalog export format.

Records are blocks of ``KEY: value`` lines closed by a line whose key is
``*``. Keys are lower-cased. ``authorheading`` and ``note`` may repeat and are
accumulated in source order; any other repeated key keeps its last value.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator

from charset_normalizer import from_bytes

from opac.catalog.errors import MalformedLineError
from opac.catalog.models import RawRecord

LOGGER = logging.getLogger(__name__)

FIELD_SEPARATOR = ": "
SENTINEL_KEY = "*"
REPEATED_KEYS = frozenset({"authorheading", "note"})


def split_line(line: str, *, line_no: int | None = None) -> tuple[str, str | None]:
    """Split a line on the first ``": "`` into ``(key.lower(), value)``.

    The sentinel line may carry no value, in which case ``value`` is ``None``.
    """

    key, separator, value = line.partition(FIELD_SEPARATOR)
    if key == SENTINEL_KEY:
        return key, value if separator else None
    if not separator:
        where = f"line {line_no}" if line_no is not None else "line"
        raise MalformedLineError("read", f"{where} has no {FIELD_SEPARATOR!r} separator: {line!r}")
    return key.lower(), value


class RecordBuilder:
    """Accumulates the fields of one record until the sentinel closes it."""

    def __init__(self, start_line: int) -> None:
        self._start_line = start_line
        self._fields: dict[str, str] = {}
        self._repeated: dict[str, list[str]] = {key: [] for key in sorted(REPEATED_KEYS)}
        self._lines: list[str] = []

    @property
    def start_line(self) -> int:
        return self._start_line

    def add_line(self, line: str) -> None:
        self._lines.append(line)

    def add(self, key: str, value: str) -> None:
        if key in REPEATED_KEYS:
            self._repeated[key].append(value)
        else:
            self._fields[key] = value

    def close(self) -> RawRecord:
        return RawRecord(
            fields=MappingProxyType(dict(self._fields)),
            repeated=MappingProxyType({key: tuple(values) for key, values in self._repeated.items()}),
            start_line=self._start_line,
            lines=tuple(self._lines),
        )


def iter_raw_records(lines: Iterable[str]) -> Iterator[RawRecord]:
    """Lazily yield one ``RawRecord`` per sentinel-terminated block.

    A trailing block with no closing sentinel is dropped (and logged). A
    malformed line aborts reading with the partial record attached.
    """

    builder: RecordBuilder | None = None
    record_no = 1
    for line_no, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            continue

        if builder is None:
            builder = RecordBuilder(start_line=line_no)
        builder.add_line(line)

        try:
            key, value = split_line(line, line_no=line_no)
        except MalformedLineError as exc:
            exc.attach_record(record_no, builder.close())
            raise

        if key == SENTINEL_KEY:
            yield builder.close()
            builder = None
            record_no += 1
            continue

        builder.add(key, value or "")

    if builder is not None:
        LOGGER.warning(
            "Dropping unterminated record starting at line %s (no closing %r)",
            builder.start_line,
            SENTINEL_KEY,
        )


def decode_source(raw: bytes, encoding: str | None = None) -> str:
    """Decode an export, trying UTF-8 before charset detection."""

    if encoding:
        return raw.decode(encoding)

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best is None or not best.encoding:
        raise ValueError("Could not detect catalog source encoding")
    LOGGER.warning("Source is not UTF-8; decoding as detected encoding %s", best.encoding)
    return raw.decode(best.encoding)


def read_source_lines(path: str | Path, *, encoding: str | None = None) -> list[str]:
    """Read the whole export into memory as a list of lines."""

    source = Path(path)
    text = decode_source(source.read_bytes(), encoding)
    return text.split("\n")
