"""Output targets for rendered HTML fragments."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

LOGGER = logging.getLogger(__name__)


class OutputSink(Protocol):
    showing_content: bool

    def write(self, html: str, placeholder: bool = False) -> None: ...


class MemorySink:
    """Keeps the latest fragment in memory."""

    def __init__(self) -> None:
        self.html = ""
        self.showing_content = False
        self.writes = 0

    def write(self, html: str, placeholder: bool = False) -> None:
        self.html = html
        self.showing_content = not placeholder
        self.writes += 1


class FileSink:
    """Replaces the contents of one HTML fragment file on every write."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.showing_content = False

    def write(self, html: str, placeholder: bool = False) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(html, encoding="utf-8")
        self.showing_content = not placeholder
        LOGGER.debug("Wrote %s bytes to %s", len(html), self.path)
