"""CV and contact-info pipelines backed by YAML files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, NamedTuple

import yaml

from inspire_client import FetchFailedError
from references import read_text_source
from render import render_contact, render_cv, render_message
from sinks import OutputSink

CV_SOURCE = os.getenv("CV_SOURCE", "cv.yml")
CONTACT_SOURCE = os.getenv("CONTACT_SOURCE", "contactinfo.yaml")

CV_SECTION_TYPES = frozenset({"map", "time_table", "nested_list", "list"})
SKIPPED_CV_SECTIONS = frozenset({"General Information"})

LOGGER = logging.getLogger(__name__)


class ContactMapping(NamedTuple):
    key: str
    label: str
    icon: str
    prefix: str


# Rendered in this order, only for keys present in the file.
CONTACT_MAPPINGS: tuple[ContactMapping, ...] = (
    ContactMapping("email", "Email", "gmail", "mailto:"),
    ContactMapping("linkedin_username", "LinkedIn", "linkedin", "https://www.linkedin.com/in/"),
    ContactMapping("github_username", "GitHub", "github", "https://github.com/"),
    ContactMapping("orcid_id", "ORCID", "orcid", "https://orcid.org/"),
    ContactMapping("scholar_userid", "Google Scholar", "googlescholar", "https://scholar.google.com/citations?user="),
)


def load_yaml_document(source: str | Path) -> Any:
    """Read and parse one YAML document. Raises FetchFailedError on any failure."""
    text = read_text_source(source)
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise FetchFailedError(f"Invalid YAML in {source}: {exc}") from exc


def select_cv_sections(data: Any) -> list[dict[str, Any]]:
    """Keep renderable sections in file order."""
    if not isinstance(data, list):
        raise FetchFailedError("CV file must contain a list of sections")

    sections = []
    for section in data:
        if not isinstance(section, dict):
            continue
        if section.get("title") in SKIPPED_CV_SECTIONS:
            continue
        if section.get("type") not in CV_SECTION_TYPES:
            LOGGER.debug("Skipping CV section %r with type %r", section.get("title"), section.get("type"))
            continue
        sections.append({**section, "contents": section.get("contents") or []})
    return sections


def build_contact_links(data: Any) -> list[dict[str, str]]:
    if not isinstance(data, dict):
        raise FetchFailedError("Contact file must contain a mapping")

    return [
        {
            "key": mapping.key,
            "label": mapping.label,
            "icon": mapping.icon,
            "url": f"{mapping.prefix}{data[mapping.key]}",
        }
        for mapping in CONTACT_MAPPINGS
        if data.get(mapping.key)
    ]


def load_cv(sink: OutputSink, source: str | Path = CV_SOURCE) -> list[dict[str, Any]]:
    try:
        sections = select_cv_sections(load_yaml_document(source))
    except FetchFailedError as exc:
        LOGGER.error("Error loading CV: %s", exc)
        render_message(sink, f"Error loading CV: {exc}", tag="p")
        return []

    render_cv(sink, sections)
    LOGGER.info("Rendered %s CV sections from %s", len(sections), source)
    return sections


def load_contact(sink: OutputSink, source: str | Path = CONTACT_SOURCE) -> list[dict[str, str]]:
    try:
        links = build_contact_links(load_yaml_document(source))
    except FetchFailedError as exc:
        LOGGER.error("Error loading contact info: %s", exc)
        render_message(sink, f"Error loading contact info: {exc}", tag="p")
        return []

    render_contact(sink, links)
    LOGGER.info("Rendered %s contact links from %s", len(links), source)
    return links
