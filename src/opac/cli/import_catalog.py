"""CLI entrypoint for importing a catalog export into SQLite."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from opac.catalog.config import CatalogSettings
from opac.catalog.errors import CatalogParseError
from opac.catalog.importer import CatalogImporter

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

    parser = argparse.ArgumentParser(description="Import a KEY: value catalog export into the SQLite catalog")
    parser.add_argument("--source", default=str(settings.source_path), help="Catalog export file")
    parser.add_argument("--db-path", default=str(settings.db_path), help="SQLite database path")
    parser.add_argument(
        "--encoding",
        default=settings.source_encoding,
        help="Source encoding (default: UTF-8, falling back to detection)",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Delete the existing catalog in the same transaction before inserting",
    )
    args = parser.parse_args(argv)

    with CatalogImporter.from_db_path(args.db_path) as importer:
        try:
            stats = importer.import_file(args.source, encoding=args.encoding, replace=args.replace)
        except CatalogParseError as error:
            logger.error("Import aborted, nothing written: %s", error)
            print(json.dumps({"source_path": args.source, **error.to_dict()}, ensure_ascii=False, indent=2))
            return 1
        except (OSError, LookupError, ValueError) as error:
            logger.error("Could not read %s: %s", args.source, error)
            print(json.dumps({"source_path": args.source, "error": str(error)}, ensure_ascii=False, indent=2))
            return 1

    print(json.dumps(stats.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
