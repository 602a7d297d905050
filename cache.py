"""Single-slot JSON cache for the last successful publication fetch."""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from models import PublicationRecord
from normalizer import SELF_AUTHOR_NAMES, normalize_records

PUBLICATIONS_CACHE_PATH = os.getenv("PUBLICATIONS_CACHE_PATH", ".cache/inspire_hep_papers_cache.json")
STATIC_SNAPSHOT_PATH = os.getenv("STATIC_SNAPSHOT_PATH", "publications.json")

LOGGER = logging.getLogger(__name__)


class PublicationCache:
    """Last-write-wins store for normalized publication records."""

    def __init__(self, path: str | Path = PUBLICATIONS_CACHE_PATH) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        """True once the slot has been written, even if it no longer loads."""
        return self.path.exists()

    def load(self) -> list[PublicationRecord] | None:
        """Return cached records, or None on any kind of miss."""
        if not self.exists():
            return None

        try:
            with self.path.open(encoding="utf-8") as fh:
                payload = json.load(fh)
        except (json.JSONDecodeError, OSError) as exc:
            LOGGER.warning("Could not read publication cache %s: %s", self.path, exc)
            return None

        items = payload.get("records") if isinstance(payload, dict) else None
        if not isinstance(items, list) or not items:
            return None

        try:
            records = [PublicationRecord.from_dict(item) for item in items]
        except (KeyError, TypeError) as exc:
            LOGGER.warning("Ignoring malformed publication cache %s: %s", self.path, exc)
            return None

        LOGGER.info("Loaded %s publications from cache written at %s", len(records), payload.get("written_at"))
        return records

    def store(self, records: list[PublicationRecord]) -> None:
        """Overwrite the slot. Storage errors are logged, never raised."""
        payload: dict[str, Any] = {
            "written_at": datetime.now(UTC).isoformat(),
            "records": [record.to_dict() for record in records],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
        except OSError as exc:
            LOGGER.warning("Failed to save publication cache %s: %s", self.path, exc)
            return
        LOGGER.info("Saved %s publications to cache %s", len(records), self.path)


def load_static_snapshot(
    path: str | Path = STATIC_SNAPSHOT_PATH,
    variants: tuple[str, ...] = SELF_AUTHOR_NAMES,
) -> list[PublicationRecord]:
    """Normalize the pre-generated ``publications.json``; ``[]`` when unusable."""
    snapshot = Path(path)
    if not snapshot.exists():
        return []

    try:
        with snapshot.open(encoding="utf-8") as fh:
            raw_records = json.load(fh)
    except (json.JSONDecodeError, OSError) as exc:
        LOGGER.warning("Could not load static snapshot %s: %s", snapshot, exc)
        return []

    if not isinstance(raw_records, list):
        LOGGER.warning("Static snapshot %s is not a JSON array", snapshot)
        return []

    return normalize_records(raw_records, variants)
