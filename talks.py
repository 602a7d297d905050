"""Talk list pipeline: talk.bib -> HTML fragment."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from bibtex import parse_bibtex, sort_talks, talk_from_entry
from inspire_client import FetchFailedError
from models import TalkRecord
from references import read_text_source
from render import render_message, render_talks
from sinks import OutputSink

TALKS_SOURCE = os.getenv("TALKS_SOURCE", "talk.bib")

LOGGER = logging.getLogger(__name__)


def load_talks(sink: OutputSink, source: str | Path = TALKS_SOURCE) -> list[TalkRecord]:
    """Parse ``source`` and render it newest first. Returns the rendered talks."""
    try:
        text = read_text_source(source)
    except FetchFailedError as exc:
        LOGGER.error("Error loading talks: %s", exc)
        render_message(sink, "Error loading talks.")
        return []

    talks = sort_talks([talk_from_entry(entry) for entry in parse_bibtex(text)])
    render_talks(sink, talks)
    LOGGER.info("Rendered %s talks from %s", len(talks), source)
    return talks
