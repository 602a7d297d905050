from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from inspire_client import FetchFailedError
from references import extract_record_ids, read_text_source


def test_extract_record_ids_in_order_with_duplicates() -> None:
    text = (
        "# Papers\n"
        "- https://inspirehep.net/literature/2908681 Jet quenching\n"
        "some unrelated line\n"
        "- https://inspirehep.net/literature/1805025\n"
        "- see also https://inspirehep.net/literature/2908681 again\n"
    )
    assert extract_record_ids(text) == ["2908681", "1805025", "2908681"]


def test_extract_record_ids_first_match_per_line() -> None:
    line = "literature/111 and literature/222\n"
    assert extract_record_ids(line) == ["111"]


@pytest.mark.parametrize("text", [
    "",
    "no links here\n",
    "https://inspirehep.net/literature/\n",
    "https://inspirehep.net/authors/12345\n",
])
def test_extract_record_ids_empty_when_nothing_matches(text: str) -> None:
    assert extract_record_ids(text) == []


def test_read_text_source_reads_local_file(tmp_path: Path) -> None:
    source = tmp_path / "papers.md"
    source.write_text("- https://inspirehep.net/literature/42\n", encoding="utf-8")
    assert "literature/42" in read_text_source(source)


def test_read_text_source_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FetchFailedError):
        read_text_source(tmp_path / "missing.md")


def test_read_text_source_fetches_url() -> None:
    response = MagicMock()
    response.text = "- https://inspirehep.net/literature/7\n"

    with patch("references.requests.get", return_value=response) as mock_get:
        text = read_text_source("https://example.org/papers.md")

    assert extract_record_ids(text) == ["7"]
    mock_get.assert_called_once()


def test_read_text_source_http_error_raises() -> None:
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")

    with patch("references.requests.get", return_value=response):
        with pytest.raises(FetchFailedError, match="404"):
            read_text_source("https://example.org/papers.md")
