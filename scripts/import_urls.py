#!/usr/bin/env python
"""
Bulk import recipes from URLs into the configured recipe store.

Run manually:
    python scripts/import_urls.py https://example.com/recipe-a https://example.com/recipe-b
    python scripts/import_urls.py --file urls.txt
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from recipe_keeper.app.api.deps import get_recipe_store
from recipe_keeper.app.services.import_service import bulk_import

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("import_urls")


def read_urls(args: argparse.Namespace) -> List[str]:
    urls = list(args.urls)
    if args.file:
        lines = Path(args.file).read_text(encoding="utf-8").splitlines()
        urls.extend(line.strip() for line in lines if line.strip() and not line.startswith("#"))
    return urls


def main() -> int:
    repo_root = Path(__file__).resolve().parents[1]
    env_path = repo_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    parser = argparse.ArgumentParser(description="Import recipes from URLs")
    parser.add_argument("urls", nargs="*", help="Recipe page URLs")
    parser.add_argument("--file", help="File with one URL per line")
    args = parser.parse_args()

    urls = read_urls(args)
    if not urls:
        parser.error("no URLs given")

    def report(done: int, total: int) -> None:
        logger.info("Progress: %d/%d", done, total)

    result = asyncio.run(bulk_import(urls, store=get_recipe_store(), on_progress=report))
    logger.info("Imported %d, failed %d, total %d", result.imported, result.failed, result.total)
    return 0 if result.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
