"""Offline batch producer for the static ``publications.json`` snapshot.

Fetches a fixed list of INSPIRE-HEP records, newest first, and writes them as
raw API payloads. The site pipeline reads this file only while its own cache
slot is empty.

Usage:
    python generate_cache.py [output_path]
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from cache import STATIC_SNAPSHOT_PATH
from inspire_client import BatchedLookup
from normalizer import sort_raw_records

RECORD_IDS: tuple[str, ...] = (
    "2908681", "2895564", "2874953", "2848263", "2831272",
    "2797164", "2722124", "2696557", "2720822", "1805025",
    "1805263", "1861559", "2149709", "2661418",
)

LOGGER = logging.getLogger(__name__)


def generate_snapshot(
    output_path: str | Path = STATIC_SNAPSHOT_PATH,
    record_ids: tuple[str, ...] = RECORD_IDS,
    lookup: BatchedLookup | None = None,
) -> list[dict[str, Any]]:
    """Fetch, sort and write the snapshot. Returns the written records."""
    lookup = lookup or BatchedLookup()
    LOGGER.info("Fetching %s records from INSPIRE-HEP", len(record_ids))
    papers = sort_raw_records(lookup.fetch(list(record_ids)))

    path = Path(output_path)
    path.write_text(json.dumps(papers, indent=2), encoding="utf-8")
    LOGGER.info("Wrote %s papers to %s", len(papers), path)
    return papers


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    output = sys.argv[1] if len(sys.argv) > 1 else STATIC_SNAPSHOT_PATH
    generate_snapshot(output)
