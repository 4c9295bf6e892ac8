"""Runtime configuration for catalog import and search."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping


DEFAULT_DB_PATH = ".opac.db"
DEFAULT_SOURCE_PATH = "jbisc.txt"
DEFAULT_SEARCH_LIMIT = 20


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class CatalogSettings:
    """Validated settings shared by the import and search commands."""

    db_path: Path
    source_path: Path
    source_encoding: str | None = None
    search_limit: int = DEFAULT_SEARCH_LIMIT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "CatalogSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        db_path_raw = source.get("OPAC_DB_PATH", DEFAULT_DB_PATH).strip()
        if not db_path_raw:
            raise ValueError("OPAC_DB_PATH cannot be empty")

        source_path_raw = source.get("OPAC_SOURCE_PATH", DEFAULT_SOURCE_PATH).strip()
        if not source_path_raw:
            raise ValueError("OPAC_SOURCE_PATH cannot be empty")

        encoding_raw = source.get("OPAC_SOURCE_ENCODING", "").strip()

        limit_raw = source.get("OPAC_SEARCH_LIMIT", str(DEFAULT_SEARCH_LIMIT)).strip()
        if not limit_raw:
            raise ValueError("OPAC_SEARCH_LIMIT cannot be empty")
        search_limit = _parse_positive_int(name="OPAC_SEARCH_LIMIT", raw_value=limit_raw)

        return cls(
            db_path=Path(db_path_raw),
            source_path=Path(source_path_raw),
            source_encoding=encoding_raw or None,
            search_limit=search_limit,
        )
