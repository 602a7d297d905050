"""CLI entrypoint: build the site's data-driven HTML fragments."""

from __future__ import annotations

import argparse
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from dotenv import load_dotenv

from cache import PublicationCache
from inspire_client import make_lookup
from personal_info import load_contact, load_cv
from publications import load_publications
from sinks import FileSink
from talks import load_talks

FRAGMENTS = ("publications", "talks", "cv", "contact")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Render publications, talks, CV and contact fragments")
    parser.add_argument(
        "--only",
        choices=FRAGMENTS,
        action="append",
        default=None,
        help="Fragment to build (repeatable). Builds all fragments when omitted.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(os.getenv("SITE_OUTPUT_DIR", "site")),
        help="Directory receiving <fragment>.html files",
    )
    parser.add_argument(
        "--strategy",
        choices=["batched", "query"],
        default=os.getenv("LOOKUP_STRATEGY", "batched"),
        help="'batched': one request per id, 5 at a time. 'query': one search request for all ids.",
    )
    return parser.parse_args(argv)


def run(fragments: tuple[str, ...], output_dir: Path, strategy: str) -> None:
    """Build the requested fragments. Publications and talks run side by side."""
    tasks = []
    if "publications" in fragments:
        tasks.append(
            lambda: load_publications(
                FileSink(output_dir / "publications.html"),
                lookup=make_lookup(strategy),
                cache=PublicationCache(),
            )
        )
    if "talks" in fragments:
        tasks.append(lambda: load_talks(FileSink(output_dir / "talks.html")))

    if tasks:
        with ThreadPoolExecutor(max_workers=len(tasks)) as pool:
            for future in [pool.submit(task) for task in tasks]:
                future.result()

    if "cv" in fragments:
        load_cv(FileSink(output_dir / "cv.html"))
    if "contact" in fragments:
        load_contact(FileSink(output_dir / "contact.html"))

    logging.info("Build complete: fragments=%s output_dir=%s", ",".join(fragments), output_dir)


def main(argv: list[str] | None = None) -> None:
    """Initialize config and build the fragments."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)
    fragments = tuple(args.only) if args.only else FRAGMENTS
    run(fragments=fragments, output_dir=args.output_dir, strategy=args.strategy)


if __name__ == "__main__":
    main()
