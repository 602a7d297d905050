"""Publication list pipeline: papers.md -> INSPIRE-HEP -> HTML fragment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from cache import STATIC_SNAPSHOT_PATH, PublicationCache, load_static_snapshot
from inspire_client import FetchFailedError, LookupStrategy, make_lookup
from models import PublicationRecord
from normalizer import SELF_AUTHOR_NAMES, normalize_records
from references import extract_record_ids, read_text_source
from render import render_message, render_publications
from sinks import OutputSink

PAPERS_SOURCE = os.getenv("PAPERS_SOURCE", "papers.md")
LOOKUP_STRATEGY = os.getenv("LOOKUP_STRATEGY", "batched")

LOADING_MESSAGE = "Loading publications from INSPIRE-HEP..."
EMPTY_MESSAGE = "No publications found in papers.md"

LOGGER = logging.getLogger(__name__)


@dataclass
class PublicationResult:
    """Outcome of one run.

    ``state`` is ``"fresh"``, ``"empty"`` or ``"failed"``; ``served_from`` names
    what was shown before the live fetch (``"cache"``, ``"static"`` or None).
    """

    state: str
    records: list[PublicationRecord] = field(default_factory=list)
    served_from: str | None = None
    error: str | None = None


def show_stored_publications(
    sink: OutputSink,
    cache: PublicationCache,
    static_snapshot: str | Path | None,
    variants: tuple[str, ...],
) -> str | None:
    """Render cached records, else the static snapshot, else a loading line.

    The static snapshot is only read while the cache slot has never been written.
    """
    cached = cache.load()
    if cached:
        LOGGER.info("Rendering %s publications from cache", len(cached))
        render_publications(sink, cached)
        return "cache"

    if static_snapshot is not None and not cache.exists():
        static = load_static_snapshot(static_snapshot, variants)
        if static:
            LOGGER.info("Rendering %s publications from static snapshot %s", len(static), static_snapshot)
            render_publications(sink, static)
            return "static"

    render_message(sink, LOADING_MESSAGE)
    return None


def load_publications(
    sink: OutputSink,
    source: str | Path = PAPERS_SOURCE,
    lookup: LookupStrategy | None = None,
    cache: PublicationCache | None = None,
    static_snapshot: str | Path | None = STATIC_SNAPSHOT_PATH,
    variants: tuple[str, ...] = SELF_AUTHOR_NAMES,
) -> PublicationResult:
    """Show stored publications immediately, then refresh them from INSPIRE-HEP."""
    cache = cache or PublicationCache()
    lookup = lookup or make_lookup(LOOKUP_STRATEGY)

    served_from = show_stored_publications(sink, cache, static_snapshot, variants)

    try:
        text = read_text_source(source)
        record_ids = extract_record_ids(text)
        if not record_ids:
            LOGGER.info("No INSPIRE ids found in %s", source)
            render_message(sink, EMPTY_MESSAGE)
            return PublicationResult(state="empty", served_from=served_from)

        LOGGER.info("Found %s INSPIRE ids in %s", len(record_ids), source)
        raw_records = lookup.fetch(record_ids)
    except FetchFailedError as exc:
        LOGGER.error("Error loading publications: %s", exc)
        if not sink.showing_content:
            render_message(sink, f"Error loading publications: {exc}")
        return PublicationResult(state="failed", served_from=served_from, error=str(exc))

    records = normalize_records(raw_records, variants)
    cache.store(records)
    render_publications(sink, records)
    LOGGER.info("Rendered %s fresh publications", len(records))
    return PublicationResult(state="fresh", records=records, served_from=served_from)
