#!/usr/bin/env python3
"""Bulk-register reciters from a JSON file.

Input: a JSON array of objects with at least "name" (and optionally "category"
or any other column of the reciters table), e.g.:

    [{"name": "Ahmad Ali", "category": "juz-30"}, {"name": "Sara Omar"}]

Behavior:
- Names already registered (case-insensitive exact match) are skipped
- Each new reciter is inserted individually; failures are counted, not fatal
- The existence check is advisory, so running two imports at once may duplicate names

Run:
  cd services/api
  python -m scripts.import_reciters reciters.json

Env vars (also read from .env):
  SUPABASE_URL, SUPABASE_KEY
  IMPORT_DRY_RUN=1   only report what would be inserted
"""

import asyncio
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from postgrest import AsyncPostgrestClient
from pydantic import ValidationError

from reciters_api.models import NewReciter
from reciters_api.services.reciters import add_reciter, check_reciter_exists
from reciters_api.settings import get_settings
from reciters_api.stores.supabase import client_from_settings

load_dotenv()


def _load_entries(path: Path) -> list[dict]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise SystemExit(f"{path}: expected a JSON array of reciters")
    return [item for item in payload if isinstance(item, dict)]


async def import_reciters(db: AsyncPostgrestClient, entries: list[dict], *, dry_run: bool = False) -> dict:
    stats = {"total": len(entries), "inserted": 0, "skipped_existing": 0, "invalid": 0, "failed": 0}

    for entry in entries:
        try:
            reciter = NewReciter.model_validate(entry)
        except ValidationError:
            stats["invalid"] += 1
            continue

        if await check_reciter_exists(db, reciter.name):
            stats["skipped_existing"] += 1
            continue

        if dry_run:
            stats["inserted"] += 1
            continue

        created = await add_reciter(db, reciter)
        if created is None:
            stats["failed"] += 1
        else:
            stats["inserted"] += 1

    return stats


async def main() -> None:
    if len(sys.argv) < 2:
        raise SystemExit("usage: python -m scripts.import_reciters <file.json>")

    entries = _load_entries(Path(sys.argv[1]))
    dry_run = os.getenv("IMPORT_DRY_RUN", "") in ("1", "true", "yes")

    settings = get_settings()
    db = client_from_settings(settings)
    try:
        stats = await import_reciters(db, entries, dry_run=dry_run)
    finally:
        await db.aclose()

    print({"ok": stats["failed"] == 0, "dry_run": dry_run, **stats})


if __name__ == "__main__":
    asyncio.run(main())
