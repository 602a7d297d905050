"""Tests for the CLI entrypoint (main.run / main.parse_args)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import main


def test_parse_args_defaults() -> None:
    args = main.parse_args([])
    assert args.only is None
    assert args.strategy in ("batched", "query")


def test_parse_args_repeatable_only() -> None:
    args = main.parse_args(["--only", "cv", "--only", "talks", "--strategy", "query"])
    assert args.only == ["cv", "talks"]
    assert args.strategy == "query"


def test_run_builds_only_requested_fragments(tmp_path: Path) -> None:
    with patch("main.load_publications") as mock_pubs, \
         patch("main.load_talks") as mock_talks, \
         patch("main.load_cv") as mock_cv, \
         patch("main.load_contact") as mock_contact:
        main.run(fragments=("talks", "cv"), output_dir=tmp_path, strategy="batched")

    mock_pubs.assert_not_called()
    mock_contact.assert_not_called()
    assert mock_talks.call_args.args[0].path == tmp_path / "talks.html"
    assert mock_cv.call_args.args[0].path == tmp_path / "cv.html"


def test_run_passes_selected_strategy(tmp_path: Path) -> None:
    with patch("main.load_publications") as mock_pubs, \
         patch("main.make_lookup") as mock_make_lookup:
        main.run(fragments=("publications",), output_dir=tmp_path, strategy="query")

    mock_make_lookup.assert_called_once_with("query")
    assert mock_pubs.call_args.kwargs["lookup"] is mock_make_lookup.return_value
    assert mock_pubs.call_args.args[0].path == tmp_path / "publications.html"
