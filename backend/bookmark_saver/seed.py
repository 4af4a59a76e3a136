"""
Bookmark Saver Backend — Fixture Loader
========================================

What:  Loads a JSON array of bookmarks into the store.
Why:   Test and demo databases need a known starting state.
How:   Each entry passes the same validation as POST /bookmarks, then the
       batch is written with drop_and_seed (default) or create_many (--append).

Usage:
    python -m bookmark_saver.seed fixtures/bookmarks.json
    python -m bookmark_saver.seed extra.json --append

Not part of the request-serving path.
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from bookmark_saver.config import settings
from bookmark_saver.database import DocumentGateway, DocumentStore
from bookmark_saver.exceptions import BookmarkSaverError, ValidationError
from bookmark_saver.schemas.bookmark import BookmarkCreate
from bookmark_saver.services.bookmark_service import BOOKMARKS_COLLECTION, BookmarkService

logger = logging.getLogger(__name__)


def load_fixtures(path: Path, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Read and validate fixture entries, returning documents ready to insert.

    Entries get strictly decreasing createdAt values in file order, so the
    first entry is listed first (newest).

    Raises:
        ValidationError: file is not a JSON array, or an entry is invalid
    """
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(message=f"{path} is not valid JSON: {e}") from e

    if not isinstance(entries, list):
        raise ValidationError(message=f"{path} must contain a JSON array of bookmarks")

    now = now or datetime.now(timezone.utc)
    documents = []
    for index, entry in enumerate(entries):
        try:
            payload = BookmarkCreate.model_validate(entry)
            documents.append(
                BookmarkService.build_document(payload, now=now - timedelta(seconds=index))
            )
        except (PydanticValidationError, ValidationError) as e:
            message = e.message if isinstance(e, ValidationError) else str(e)
            raise ValidationError(
                message=f"Fixture entry {index} is invalid: {message}",
                context={"index": index},
            ) from e
    return documents


async def seed(
    gateway: DocumentGateway,
    documents: Sequence[Dict[str, Any]],
    collection: str = BOOKMARKS_COLLECTION,
    append: bool = False,
) -> int:
    if append:
        ids = await gateway.create_many(collection, documents)
    else:
        ids = await gateway.drop_and_seed(collection, documents)
    logger.info("Seeded %d documents into '%s' (append=%s)", len(ids), collection, append)
    return len(ids)


async def _run(args: argparse.Namespace) -> int:
    documents = load_fixtures(Path(args.file))

    store = DocumentStore(
        settings.mongodb_uri,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
    )
    await store.connect(args.database or settings.database_name)
    gateway = DocumentGateway(store)
    try:
        return await seed(gateway, documents, collection=args.collection, append=args.append)
    finally:
        gateway.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load bookmark fixtures into MongoDB")
    parser.add_argument("file", help="JSON file containing an array of bookmarks")
    parser.add_argument("--collection", default=BOOKMARKS_COLLECTION, help="Target collection")
    parser.add_argument("--database", default=None, help="Override DATABASE_NAME")
    parser.add_argument(
        "--append", action="store_true", help="Insert without dropping the collection first"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        count = asyncio.run(_run(args))
    except BookmarkSaverError as e:
        logger.error("Seeding failed: %s", e.message)
        return 1

    print(f"Loaded {count} bookmarks into '{args.collection}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
