from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cache import PublicationCache
from inspire_client import FetchFailedError
from normalizer import normalize_record
from publications import EMPTY_MESSAGE, LOADING_MESSAGE, load_publications
from sinks import MemorySink

VARIANTS = ("Jonas, Florian",)

PAPERS_MD = """# Publications

- https://inspirehep.net/literature/101 Old paper
- https://inspirehep.net/literature/202 New paper
"""


def _raw(record_id: str, year: int, title: str) -> dict:
    return {
        "id": record_id,
        "metadata": {
            "titles": [{"title": title}],
            "publication_info": [{"journal_title": "JHEP", "year": year}],
        },
    }


@pytest.fixture
def papers_md(tmp_path: Path) -> Path:
    path = tmp_path / "papers.md"
    path.write_text(PAPERS_MD, encoding="utf-8")
    return path


@pytest.fixture
def cache(tmp_path: Path) -> PublicationCache:
    return PublicationCache(tmp_path / "cache" / "papers.json")


def _lookup(records: list[dict] | None = None, error: Exception | None = None) -> MagicMock:
    lookup = MagicMock()
    if error is not None:
        lookup.fetch.side_effect = error
    else:
        lookup.fetch.return_value = records or []
    return lookup


def test_fresh_fetch_sorts_caches_and_renders(papers_md: Path, cache: PublicationCache, tmp_path: Path) -> None:
    sink = MemorySink()
    lookup = _lookup([_raw("101", 2019, "Old paper"), _raw("202", 2024, "New paper")])

    result = load_publications(
        sink, source=papers_md, lookup=lookup, cache=cache,
        static_snapshot=tmp_path / "absent.json", variants=VARIANTS,
    )

    lookup.fetch.assert_called_once_with(["101", "202"])
    assert result.state == "fresh"
    assert result.served_from is None
    assert [r.record_id for r in result.records] == ["202", "101"]
    assert cache.load() == result.records
    assert sink.showing_content is True
    assert sink.html.index("New paper") < sink.html.index("Old paper")


def test_zero_ids_is_empty_state_without_lookup(tmp_path: Path, cache: PublicationCache) -> None:
    source = tmp_path / "papers.md"
    source.write_text("# Publications\n\nNothing yet.\n", encoding="utf-8")
    sink = MemorySink()
    lookup = _lookup()

    result = load_publications(
        sink, source=source, lookup=lookup, cache=cache,
        static_snapshot=None, variants=VARIANTS,
    )

    assert result.state == "empty"
    lookup.fetch.assert_not_called()
    assert EMPTY_MESSAGE in sink.html
    assert cache.load() is None


def test_failure_keeps_cached_list(papers_md: Path, cache: PublicationCache) -> None:
    cached = [normalize_record(_raw("1", 2020, "Cached paper"), VARIANTS)]
    cache.store(cached)
    sink = MemorySink()

    result = load_publications(
        sink, source=papers_md, lookup=_lookup(error=FetchFailedError("API down")),
        cache=cache, static_snapshot=None, variants=VARIANTS,
    )

    assert result.state == "failed"
    assert result.served_from == "cache"
    assert "Cached paper" in sink.html
    assert "Error loading publications" not in sink.html
    assert cache.load() == cached


def test_failure_without_stored_data_shows_error(papers_md: Path, cache: PublicationCache) -> None:
    sink = MemorySink()

    result = load_publications(
        sink, source=papers_md, lookup=_lookup(error=FetchFailedError("API down")),
        cache=cache, static_snapshot=None, variants=VARIANTS,
    )

    assert result.state == "failed"
    assert result.error == "API down"
    assert "Error loading publications: API down" in sink.html
    assert sink.showing_content is False


def test_missing_source_is_fetch_failure(tmp_path: Path, cache: PublicationCache) -> None:
    sink = MemorySink()
    lookup = _lookup()

    result = load_publications(
        sink, source=tmp_path / "missing.md", lookup=lookup, cache=cache,
        static_snapshot=None, variants=VARIANTS,
    )

    assert result.state == "failed"
    lookup.fetch.assert_not_called()
    assert "Error loading publications" in sink.html


def test_static_snapshot_used_when_cache_empty(papers_md: Path, cache: PublicationCache, tmp_path: Path) -> None:
    snapshot = tmp_path / "publications.json"
    snapshot.write_text(json.dumps([_raw("9", 2022, "Static paper")]), encoding="utf-8")
    sink = MemorySink()

    result = load_publications(
        sink, source=papers_md, lookup=_lookup(error=FetchFailedError("offline")),
        cache=cache, static_snapshot=snapshot, variants=VARIANTS,
    )

    assert result.served_from == "static"
    assert "Static paper" in sink.html


def test_cache_preferred_over_static_snapshot(papers_md: Path, cache: PublicationCache, tmp_path: Path) -> None:
    cache.store([normalize_record(_raw("1", 2020, "Cached paper"), VARIANTS)])
    snapshot = tmp_path / "publications.json"
    snapshot.write_text(json.dumps([_raw("9", 2022, "Static paper")]), encoding="utf-8")
    sink = MemorySink()

    result = load_publications(
        sink, source=papers_md, lookup=_lookup([_raw("202", 2024, "New paper")]),
        cache=cache, static_snapshot=snapshot, variants=VARIANTS,
    )

    assert result.served_from == "cache"
    assert result.state == "fresh"
    assert "New paper" in sink.html


def test_loading_placeholder_written_first(papers_md: Path, cache: PublicationCache) -> None:
    seen: list[str] = []
    sink = MemorySink()
    lookup = MagicMock()
    lookup.fetch.side_effect = lambda ids: seen.append(sink.html) or [_raw("202", 2024, "New paper")]

    load_publications(sink, source=papers_md, lookup=lookup, cache=cache, static_snapshot=None, variants=VARIANTS)

    assert LOADING_MESSAGE in seen[0]
    assert sink.writes == 2


def test_static_snapshot_skipped_once_cache_slot_written(
    papers_md: Path, cache: PublicationCache, tmp_path: Path
) -> None:
    cache.store([])
    snapshot = tmp_path / "publications.json"
    snapshot.write_text(json.dumps([_raw("9", 2022, "Static paper")]), encoding="utf-8")
    sink = MemorySink()

    result = load_publications(
        sink, source=papers_md, lookup=_lookup(error=FetchFailedError("offline")),
        cache=cache, static_snapshot=snapshot, variants=VARIANTS,
    )

    assert result.served_from is None
    assert "Static paper" not in sink.html
    assert "Error loading publications: offline" in sink.html
