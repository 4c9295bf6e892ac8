"""SQLite persistence and search for the normalized catalog."""

from .query import BookHit, search_books
from .repository import CatalogRepository

__all__ = ["BookHit", "CatalogRepository", "search_books"]
