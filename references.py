"""Reference list reading and INSPIRE record id extraction."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import requests

from inspire_client import REQUEST_TIMEOUT_SECONDS, FetchFailedError

# Matches lines like: - https://inspirehep.net/literature/123456 ...
RECORD_ID_PATTERN = re.compile(r"literature/(\d+)")

LOGGER = logging.getLogger(__name__)


def extract_record_ids(text: str) -> list[str]:
    """Return the record id of every matching line, in order, duplicates kept."""
    ids: list[str] = []
    for line in text.splitlines():
        match = RECORD_ID_PATTERN.search(line)
        if match:
            ids.append(match.group(1))
    return ids


def read_text_source(source: str | Path) -> str:
    """Read a local file or an http(s) URL as text."""
    location = str(source)
    if location.startswith(("http://", "https://")):
        try:
            response = requests.get(location, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchFailedError(f"Could not fetch {location}: {exc}") from exc
        return response.text

    try:
        return Path(location).read_text(encoding="utf-8")
    except OSError as exc:
        raise FetchFailedError(f"Could not read {location}: {exc}") from exc
