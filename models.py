"""Shared typed models for the site pipelines."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class AuthorName:
    """One formatted author, flagged when it matches the site owner."""

    display: str
    is_self: bool = False


@dataclass(frozen=True, slots=True)
class Link:
    """A labelled affordance under a publication.

    ``url`` is None for the abstract toggle and the citation annotation.
    """

    kind: str
    label: str
    url: str | None = None


@dataclass(frozen=True, slots=True)
class PublicationRecord:
    """Normalized, render-ready publication built from an INSPIRE record."""

    record_id: str
    title: str
    authors: tuple[AuthorName, ...]
    venue: str
    date_key: str
    links: tuple[Link, ...] = ()
    et_al: bool = False
    collaboration: str | None = None
    citation_count: int | None = None
    abstract: str | None = None
    volume: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PublicationRecord:
        return cls(
            record_id=str(data["record_id"]),
            title=data["title"],
            authors=tuple(AuthorName(**a) for a in data.get("authors", [])),
            venue=data["venue"],
            date_key=data["date_key"],
            links=tuple(Link(**link) for link in data.get("links", [])),
            et_al=bool(data.get("et_al", False)),
            collaboration=data.get("collaboration"),
            citation_count=data.get("citation_count"),
            abstract=data.get("abstract"),
            volume=data.get("volume"),
        )


@dataclass(frozen=True, slots=True)
class BibEntry:
    """One ``@type{key, ...}`` block from a BibTeX-like file."""

    entry_type: str
    key: str
    fields: dict[str, str | int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class TalkRecord:
    """Talk or poster parsed from ``talk.bib``."""

    key: str
    title: str
    year: int = 0
    entry_type: str = "talk"
    note: str | None = None
    month: str | None = None
    indico: str | None = None
    url: str | None = None
    abbr: str | None = None
