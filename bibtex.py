"""Tolerant parser for the small BibTeX dialect used by ``talk.bib``.

Only ``name = {value}``, ``name = "value"`` and ``name = 123`` fields are
recognised. Braces nested more than one level deep are not balanced: the
value stops at the first closing brace.
"""

from __future__ import annotations

import re

from models import BibEntry, TalkRecord

ENTRY_PATTERN = re.compile(r"@(\w+)\s*\{\s*([^,]+),([^@]+)")
FIELD_PATTERN = re.compile(r"(\w+)\s*=\s*(?:\{([^}]*)\}|\"([^\"]*)\"|(\d+))")
_WHITESPACE = re.compile(r"\s+")


def parse_bibtex(text: str) -> list[BibEntry]:
    """Split ``text`` into entries; later fields overwrite earlier ones of the same name."""
    entries: list[BibEntry] = []
    for match in ENTRY_PATTERN.finditer(text):
        entry_type, key, body = match.group(1), match.group(2).strip(), match.group(3)
        fields: dict[str, str | int] = {}
        for field_match in FIELD_PATTERN.finditer(body):
            name = field_match.group(1).lower()
            value = field_match.group(2) or field_match.group(3) or field_match.group(4)
            if not value:
                continue
            value = _WHITESPACE.sub(" ", value).strip()
            fields[name] = _parse_year(value) if name == "year" else value
        entries.append(BibEntry(entry_type=entry_type, key=key, fields=fields))
    return entries


def _parse_year(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0


def talk_from_entry(entry: BibEntry) -> TalkRecord:
    fields = entry.fields
    year = fields.get("year", 0)
    return TalkRecord(
        key=entry.key,
        entry_type=entry.entry_type,
        title=str(fields.get("title", "")).replace("{", "").replace("}", ""),
        year=year if isinstance(year, int) else 0,
        note=_optional(fields.get("note")),
        month=_optional(fields.get("month")),
        indico=_optional(fields.get("indico")),
        url=_optional(fields.get("url")),
        abbr=_optional(fields.get("abbr")),
    )


def sort_talks(talks: list[TalkRecord]) -> list[TalkRecord]:
    """Newest year first; entries within a year keep file order."""
    return sorted(talks, key=lambda talk: talk.year, reverse=True)


def _optional(value: str | int | None) -> str | None:
    return None if value is None else str(value)
