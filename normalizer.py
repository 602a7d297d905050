"""Turn raw INSPIRE literature records into render-ready publication records."""

from __future__ import annotations

import logging
import os
from typing import Any

from models import AuthorName, Link, PublicationRecord

INSPIRE_RECORD_URL = "https://inspirehep.net/literature"
ARXIV_ABS_URL = "https://arxiv.org/abs"
DOI_RESOLVER_URL = "https://doi.org"

UNTITLED = "Untitled"
MISSING_DATE_KEY = "0000"

# Large collaboration papers collapse to the first few names.
COLLABORATION_AUTHOR_THRESHOLD = 10
COLLABORATION_DISPLAY_AUTHORS = 3
MAX_DISPLAY_AUTHORS = 20

SELF_AUTHOR_NAMES: tuple[str, ...] = tuple(
    name.strip()
    for name in os.getenv("SELF_AUTHOR_NAMES", "Jonas, Florian;Jonas, F.;Florian Jonas").split(";")
    if name.strip()
)

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def resolve_date_key(metadata: dict[str, Any]) -> str:
    """Publication year, then preprint date, then earliest date, then ``"0000"``."""
    publication_info = metadata.get("publication_info") or []
    if publication_info and isinstance(publication_info[0], dict) and publication_info[0].get("year"):
        return str(publication_info[0]["year"])
    if metadata.get("preprint_date"):
        return str(metadata["preprint_date"])
    if metadata.get("earliest_date"):
        return str(metadata["earliest_date"])
    return MISSING_DATE_KEY


def normalize_date_key(date_key: str) -> str:
    """Pad a date key to ``YYYY-MM-DD`` so year-only and full dates collate together.

    Missing month or day parts become ``00``; anything after ``T`` is dropped.
    """
    parts = date_key.split("T", 1)[0].strip().split("-")
    year = parts[0].zfill(4) if parts[0] else MISSING_DATE_KEY
    month = parts[1].zfill(2) if len(parts) > 1 and parts[1] else "00"
    day = parts[2].zfill(2) if len(parts) > 2 and parts[2] else "00"
    return f"{year}-{month}-{day}"


def sort_records(records: list[PublicationRecord]) -> list[PublicationRecord]:
    """Newest first by normalized date key; ties keep their input order."""
    return sorted(records, key=lambda record: normalize_date_key(record.date_key), reverse=True)


def sort_raw_records(raw_records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Same ordering as ``sort_records``, applied to raw API payloads."""
    return sorted(
        raw_records,
        key=lambda raw: normalize_date_key(resolve_date_key(raw.get("metadata") or {})),
        reverse=True,
    )


# ---------------------------------------------------------------------------
# Venue
# ---------------------------------------------------------------------------


def _publication_info(metadata: dict[str, Any]) -> dict[str, Any] | None:
    publication_info = metadata.get("publication_info") or []
    if not publication_info:
        return None
    return publication_info[0] if isinstance(publication_info[0], dict) else {}


def format_venue(metadata: dict[str, Any]) -> str:
    """Journal reference when publication info exists, else a dated preprint form.

    Publication info without a journal title (conference-only entries) stays
    a bare ``"Preprint"``.
    """
    pub = _publication_info(metadata)
    if pub is not None:
        if not pub.get("journal_title"):
            return "Preprint"
        venue = str(pub["journal_title"])
        if pub.get("journal_volume"):
            venue += f" {pub['journal_volume']}"
        if pub.get("year"):
            venue += f" ({pub['year']})"
        page = pub.get("page_start") or pub.get("artid")
        if page:
            venue += f", {page}"
        return venue

    if metadata.get("preprint_date"):
        return f"Preprint ({str(metadata['preprint_date'])[:4]})"
    if metadata.get("earliest_date"):
        return f"({str(metadata['earliest_date'])[:4]})"
    return "Preprint"


def venue_volume(metadata: dict[str, Any]) -> str | None:
    """Journal volume shown inside the venue, for emphasis when rendering."""
    pub = _publication_info(metadata)
    if pub and pub.get("journal_title") and pub.get("journal_volume"):
        return str(pub["journal_volume"])
    return None


# ---------------------------------------------------------------------------
# Authors
# ---------------------------------------------------------------------------


def format_name(last_first: str) -> str:
    """Convert ``"Doe, Jane"`` to ``"J. Doe"``; other shapes pass through."""
    parts = last_first.split(",")
    if len(parts) != 2:
        return last_first
    last, first = parts[0].strip(), parts[1].strip()
    if not first:
        return last
    return f"{first[0]}. {last}"


def is_self_author(name: str, variants: tuple[str, ...] = SELF_AUTHOR_NAMES) -> bool:
    """Match ``name`` against the configured spellings of the site owner's name.

    A variant matches exactly, or loosely when its last name appears together
    with either its full first name or its first initial followed by a dot.
    """
    for variant in variants:
        if name.strip() == variant:
            return True
        last, first = _split_variant(variant)
        if not last or not first or last not in name:
            continue
        initial = f"{first[0]}."
        # A bare initial only matches with its dot, never as a substring.
        if initial in name or (len(first) > 1 and first in name):
            return True
    return False


def _split_variant(variant: str) -> tuple[str, str]:
    if "," in variant:
        last, first = variant.split(",", 1)
    else:
        first, _, last = variant.strip().rpartition(" ")
    return last.strip(), first.strip().rstrip(".")


def _collaboration(metadata: dict[str, Any]) -> str | None:
    collaborations = metadata.get("collaborations") or []
    if collaborations and isinstance(collaborations[0], dict) and collaborations[0].get("value"):
        return str(collaborations[0]["value"])
    return None


def format_authors(
    metadata: dict[str, Any],
    variants: tuple[str, ...] = SELF_AUTHOR_NAMES,
) -> tuple[tuple[AuthorName, ...], bool, str | None]:
    """Return ``(authors, et_al, collaboration)`` for display."""
    names = [
        str(author.get("full_name", ""))
        for author in metadata.get("authors") or []
        if isinstance(author, dict)
    ]
    collaboration = _collaboration(metadata)

    if collaboration and len(names) > COLLABORATION_AUTHOR_THRESHOLD:
        shown = names[:COLLABORATION_DISPLAY_AUTHORS]
        et_al = True
    else:
        shown = names[:MAX_DISPLAY_AUTHORS]
        et_al = len(names) > MAX_DISPLAY_AUTHORS

    authors = tuple(AuthorName(display=format_name(name), is_self=is_self_author(name, variants)) for name in shown)
    return authors, et_al, collaboration


def author_line(record: PublicationRecord) -> str:
    """Plain-text author line, e.g. ``"A. One, B. Two et al. (ALICE Collaboration)"``."""
    text = ", ".join(author.display for author in record.authors)
    if record.et_al:
        text += " et al."
    if record.collaboration:
        text += f" ({record.collaboration} Collaboration)"
    return text.strip()


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


def _first_value(metadata: dict[str, Any], key: str) -> str | None:
    items = metadata.get(key) or []
    if items and isinstance(items[0], dict) and items[0].get("value"):
        return str(items[0]["value"])
    return None


def build_links(record_id: str, metadata: dict[str, Any]) -> tuple[Link, ...]:
    links: list[Link] = []

    if _first_value(metadata, "abstracts"):
        links.append(Link(kind="abstract", label="Abstract"))

    arxiv_id = _first_value(metadata, "arxiv_eprints")
    if arxiv_id:
        links.append(Link(kind="arxiv", label=f"arXiv:{arxiv_id}", url=f"{ARXIV_ABS_URL}/{arxiv_id}"))

    doi = _first_value(metadata, "dois")
    if doi:
        links.append(Link(kind="doi", label="DOI", url=f"{DOI_RESOLVER_URL}/{doi}"))

    links.append(Link(kind="inspire", label="INSPIRE", url=f"{INSPIRE_RECORD_URL}/{record_id}"))

    documents = [doc for doc in metadata.get("documents") or [] if isinstance(doc, dict)]
    if documents:
        document = next((doc for doc in documents if doc.get("fulltext")), documents[0])
        if document.get("url"):
            links.append(Link(kind="pdf", label="PDF", url=str(document["url"])))

    citation_count = metadata.get("citation_count")
    if citation_count is not None:
        links.append(Link(kind="citations", label=f"{citation_count} citations"))

    return tuple(links)


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------


def normalize_record(
    raw: dict[str, Any],
    variants: tuple[str, ...] = SELF_AUTHOR_NAMES,
) -> PublicationRecord:
    """Flatten one raw ``{"id", "metadata"}`` payload."""
    metadata = raw.get("metadata") or {}
    record_id = str(raw.get("id") or metadata.get("control_number") or "")

    titles = metadata.get("titles") or []
    title = titles[0].get("title") if titles and isinstance(titles[0], dict) else None

    authors, et_al, collaboration = format_authors(metadata, variants)
    citation_count = metadata.get("citation_count")

    return PublicationRecord(
        record_id=record_id,
        title=str(title) if title else UNTITLED,
        authors=authors,
        et_al=et_al,
        collaboration=collaboration,
        venue=format_venue(metadata),
        volume=venue_volume(metadata),
        date_key=resolve_date_key(metadata),
        links=build_links(record_id, metadata),
        citation_count=int(citation_count) if citation_count is not None else None,
        abstract=_first_value(metadata, "abstracts"),
    )


def normalize_records(
    raw_records: list[dict[str, Any]],
    variants: tuple[str, ...] = SELF_AUTHOR_NAMES,
) -> list[PublicationRecord]:
    """Normalize and sort newest first, skipping payloads that are not objects."""
    records = []
    for raw in raw_records:
        if not isinstance(raw, dict):
            LOGGER.warning("Skipping non-object INSPIRE payload: %r", raw)
            continue
        records.append(normalize_record(raw, variants))
    return sort_records(records)
