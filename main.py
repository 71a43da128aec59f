from __future__ import annotations

import argparse
import os
from typing import List, Optional

from labsite.config import (
    DEFAULT_RESOURCES,
    DEFAULT_OUT_DIR,
    PEOPLE_PAGE,
    PUBLICATIONS_PAGE,
    SORT_DEFAULT,
    SORT_KEYS,
)
from labsite.exceptions import FILE_WRITE_ERRORS, ResourceUnavailable
from labsite.http_utils import is_url
from labsite.log_utils import logger, LogSource, LogCategory
from labsite.people import load_people
from labsite.pub_utils import load_publications, select_publications, status_message
from labsite.render import render_people, render_publications, write_page


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render the lab People and Publications pages from roster, biography, and BibTeX files."
    )
    parser.add_argument("--resources", default=DEFAULT_RESOURCES,
                        help="resource root: a local directory or an http(s) base URL (default: %(default)s)")
    parser.add_argument("--out", default=DEFAULT_OUT_DIR, help="output directory (default: %(default)s)")
    parser.add_argument("--only", choices=("people", "publications"), help="render a single page")
    parser.add_argument("--sort", choices=SORT_KEYS, default=SORT_DEFAULT, help="publication order")
    parser.add_argument("--filter", default="", help="case-insensitive publication filter")
    parser.add_argument("--photo-base", default=None,
                        help="prefix for photo and icon links on the people page (default: the resource root)")
    parser.add_argument("--log-file", default=None, help="mirror the log to this file")
    return parser


def _photo_base(resources: str, out_dir: str, override: Optional[str]) -> str:
    """
    Photo and icon links are written into the page, so a local resource root is made
    relative to the output directory.
    """
    if override:
        return override
    if is_url(resources):
        return resources
    return os.path.relpath(os.path.abspath(resources), os.path.abspath(out_dir))


def build_people_page(resources: str, out_dir: str, photo_base: Optional[str] = None) -> bool:
    """
    Load the roster and every biography, then write the people page.
    Returns False when the roster itself is unavailable.
    """
    logger.step("People page", source=LogSource.PEOPLE, category=LogCategory.PLAN)
    try:
        roster = load_people(resources)
    except ResourceUnavailable as e:
        logger.error(f"Failed to load roster: {e}", source=LogSource.PEOPLE, category=LogCategory.ERROR)
        return False

    html = render_people(roster, _photo_base(resources, out_dir, photo_base))
    path = os.path.join(out_dir, PEOPLE_PAGE)
    write_page(path, html)
    logger.success(f"Wrote {path} ({len(roster)} person(s))", source=LogSource.PEOPLE, category=LogCategory.SAVE)
    return True


def build_publications_page(resources: str, out_dir: str, sort_key: str = SORT_DEFAULT, keyword: str = "") -> bool:
    """
    Load the publication file, apply sort and filter, and write the
    publications page. When the file is unavailable the page shows the
    failure in its status line and False is returned.
    """
    logger.step("Publications page", source=LogSource.PUBLICATIONS, category=LogCategory.PLAN)
    path = os.path.join(out_dir, PUBLICATIONS_PAGE)
    try:
        entries = load_publications(resources)
    except ResourceUnavailable as e:
        status = status_message(None, e)
        logger.error(status, source=LogSource.PUBLICATIONS, category=LogCategory.ERROR)
        write_page(path, render_publications(None, status))
        return False

    status = status_message(entries)
    logger.info(status, source=LogSource.PUBLICATIONS, category=LogCategory.PARSE)

    view = select_publications(entries, sort_key, keyword)
    if entries and view.is_empty:
        logger.info(f"No publications match filter {keyword!r}", source=LogSource.PUBLICATIONS, category=LogCategory.SKIP)

    html = render_publications(view, status, has_entries=bool(entries))
    write_page(path, html)
    logger.success(
        f"Wrote {path} (journal={len(view.journals)}, conference={len(view.conferences)})",
        source=LogSource.PUBLICATIONS,
        category=LogCategory.SAVE,
    )
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """
    Render the requested pages. Returns 0 when every page was written, 1 when
    a page's source file was unavailable, and 2 when the output directory
    cannot be created.
    """
    args = build_parser().parse_args(argv)

    try:
        os.makedirs(args.out, exist_ok=True)
    except OSError as e:
        logger.error(f"Cannot create output directory '{args.out}': {e}", category=LogCategory.ERROR)
        return 2

    if args.log_file:
        logger.set_log_file(args.log_file)
    logger.step(f"Render started (resources={args.resources})", source=LogSource.SYSTEM, category=LogCategory.PLAN)

    ok = True
    try:
        if args.only in (None, "people"):
            ok = build_people_page(args.resources, args.out, args.photo_base) and ok
        if args.only in (None, "publications"):
            ok = build_publications_page(args.resources, args.out, args.sort, args.filter) and ok
    except FILE_WRITE_ERRORS as e:
        logger.error(f"Cannot write output: {e}", source=LogSource.SYSTEM, category=LogCategory.ERROR)
        ok = False

    logger.step("Render complete" if ok else "Render finished with errors", source=LogSource.SYSTEM, category=LogCategory.PLAN)
    logger.close()
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
