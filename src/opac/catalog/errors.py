"""Parse errors raised by the catalog pipeline."""

from __future__ import annotations

from dataclasses import dataclass

from opac.catalog.models import RawRecord


@dataclass(slots=True)
class CatalogParseError(Exception):
    """A parse step rejected its input; the whole batch is aborted."""

    step: str
    detail: str
    record_no: int | None = None
    raw_record: RawRecord | None = None

    def __str__(self) -> str:
        location = ""
        if self.record_no is not None:
            location = f" (record={self.record_no}"
            if self.raw_record is not None:
                location += f", line={self.raw_record.start_line}"
            location += ")"
        return f"{self.step}: {self.detail}{location}"

    def attach_record(self, record_no: int, raw_record: RawRecord) -> None:
        self.record_no = record_no
        self.raw_record = raw_record

    def to_dict(self) -> dict[str, object]:
        return {
            "error": type(self).__name__,
            "step": self.step,
            "detail": self.detail,
            "record_no": self.record_no,
            "start_line": self.raw_record.start_line if self.raw_record is not None else None,
            "raw_record": list(self.raw_record.lines) if self.raw_record is not None else None,
        }


class MalformedLineError(CatalogParseError):
    """A content line has no `": "` separator."""


class MissingRequiredFieldError(CatalogParseError):
    """A record lacks a field every book needs."""


class UnparseableDateError(CatalogParseError):
    """The publication date matches no recognized pattern."""
