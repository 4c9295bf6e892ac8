"""Catalog export parsing and normalization pipeline."""

from .assembler import assemble_book, parse_records
from .errors import CatalogParseError, MalformedLineError, MissingRequiredFieldError, UnparseableDateError
from .identity import CatalogBatch, IdentityResolver, resolve_batch

__all__ = [
    "CatalogBatch",
    "CatalogParseError",
    "IdentityResolver",
    "MalformedLineError",
    "MissingRequiredFieldError",
    "UnparseableDateError",
    "assemble_book",
    "parse_records",
    "resolve_batch",
]
