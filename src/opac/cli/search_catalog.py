"""CLI entrypoint for catalog searches."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from opac.catalog.config import CatalogSettings
from opac.storage.query import SEARCH_FIELDS, search_books
from opac.storage.repository import CatalogRepository

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
        stream=sys.stderr,
    )

    try:
        settings = CatalogSettings.from_env()
    except ValueError as error:
        logger.error("Configuration error: %s", error)
        return 2

    parser = argparse.ArgumentParser(description="Search the imported SQLite catalog")
    parser.add_argument("--db-path", default=str(settings.db_path), help="SQLite database path")
    parser.add_argument("--query", required=True, help="Search text")
    parser.add_argument("--field", choices=SEARCH_FIELDS, default="keyword", help="Field to search")
    parser.add_argument("--limit", type=int, default=settings.search_limit, help="Maximum number of results")
    args = parser.parse_args(argv)
    safe_limit = max(1, min(args.limit, 100))

    with CatalogRepository(args.db_path) as repository:
        hits = search_books(repository.connection, query=args.query, field_name=args.field, limit=safe_limit)

    payload = {
        "query": args.query,
        "field": args.field,
        "limit": safe_limit,
        "results": [hit.to_dict() for hit in hits],
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
