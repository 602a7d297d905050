"""INSPIRE-HEP literature API client.

Two lookup strategies share the ``fetch(ids) -> list[dict]`` interface:

- ``BatchedLookup`` fetches one record per id, a few at a time, pausing
  between groups to stay under the INSPIRE rate limit (15 requests / 5 s).
- ``QueryLookup`` builds a single ``recid:A or recid:B`` search with a field
  projection and returns one page of hits.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Protocol

import requests

INSPIRE_API_URL = os.getenv("INSPIRE_API_URL", "https://inspirehep.net/api/literature")
INSPIRE_BATCH_SIZE = int(os.getenv("INSPIRE_BATCH_SIZE", "5"))
INSPIRE_BATCH_DELAY_SECONDS = float(os.getenv("INSPIRE_BATCH_DELAY_SECONDS", "1.0"))
INSPIRE_PAGE_SIZE = int(os.getenv("INSPIRE_PAGE_SIZE", "100"))
REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "20"))

# Only what the normalizer reads.
QUERY_FIELDS: tuple[str, ...] = (
    "control_number",
    "titles",
    "authors.full_name",
    "collaborations",
    "publication_info",
    "preprint_date",
    "earliest_date",
    "arxiv_eprints",
    "dois",
    "documents",
    "abstracts",
    "citation_count",
)

LOGGER = logging.getLogger(__name__)


class FetchFailedError(RuntimeError):
    """The reference source or the lookup API could not be read."""


class LookupStrategy(Protocol):
    def fetch(self, record_ids: list[str]) -> list[dict[str, Any]]: ...


def fetch_record(record_id: str) -> dict[str, Any]:
    """Fetch one literature record by id. Raises on transport or HTTP errors."""
    response = requests.get(f"{INSPIRE_API_URL}/{record_id}", timeout=REQUEST_TIMEOUT_SECONDS)
    response.raise_for_status()
    return response.json()


def _fetch_or_none(record_id: str) -> dict[str, Any] | None:
    try:
        return fetch_record(record_id)
    except (requests.RequestException, ValueError) as exc:
        LOGGER.warning("INSPIRE lookup failed for id=%s, dropping: %s", record_id, exc)
        return None


class BatchedLookup:
    """Fetch records one id at a time, ``batch_size`` in flight at most."""

    def __init__(
        self,
        batch_size: int = INSPIRE_BATCH_SIZE,
        delay_seconds: float = INSPIRE_BATCH_DELAY_SECONDS,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.batch_size = batch_size
        self.delay_seconds = delay_seconds

    def fetch(self, record_ids: list[str]) -> list[dict[str, Any]]:
        records: list[dict[str, Any]] = []
        for start in range(0, len(record_ids), self.batch_size):
            batch = record_ids[start : start + self.batch_size]
            LOGGER.info(
                "INSPIRE batch %s: fetching %s records",
                start // self.batch_size + 1,
                len(batch),
            )
            with ThreadPoolExecutor(max_workers=len(batch)) as pool:
                results = list(pool.map(_fetch_or_none, batch))
            records.extend(r for r in results if r is not None)

            if start + self.batch_size < len(record_ids):
                time.sleep(self.delay_seconds)

        if record_ids and not records:
            raise FetchFailedError(f"All {len(record_ids)} INSPIRE lookups failed")

        LOGGER.info("INSPIRE batched fetch: requested=%s returned=%s", len(record_ids), len(records))
        return records


class QueryLookup:
    """Fetch all records with one boolean-OR search request."""

    def __init__(self, page_size: int = INSPIRE_PAGE_SIZE, fields: tuple[str, ...] = QUERY_FIELDS) -> None:
        self.page_size = page_size
        self.fields = fields

    def build_params(self, record_ids: list[str]) -> dict[str, Any]:
        return {
            "q": " or ".join(f"recid:{record_id}" for record_id in record_ids),
            "size": self.page_size,
            "fields": ",".join(self.fields),
        }

    def fetch(self, record_ids: list[str]) -> list[dict[str, Any]]:
        if not record_ids:
            return []

        try:
            response = requests.get(
                INSPIRE_API_URL,
                params=self.build_params(record_ids),
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise FetchFailedError(f"INSPIRE search failed: {exc}") from exc

        try:
            hits = body["hits"]["hits"]
        except (KeyError, TypeError) as exc:
            raise FetchFailedError(f"Unexpected INSPIRE search response shape: {body}") from exc

        LOGGER.info("INSPIRE query fetch: requested=%s returned=%s", len(record_ids), len(hits))
        return list(hits)


def make_lookup(strategy: str) -> LookupStrategy:
    """Return the lookup strategy registered under ``strategy``."""
    if strategy == "batched":
        return BatchedLookup()
    if strategy == "query":
        return QueryLookup()
    raise ValueError(f"Unknown lookup strategy: {strategy!r} (expected 'batched' or 'query')")
