from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from unidecode import unidecode

from .bibtex_utils import is_conference, is_journal, parse_bibtex
from .cite_utils import format_citation
from .config import PUBLICATIONS_PATH, SORT_TITLE_ASC, SORT_YEAR_ASC, SORT_YEAR_DESC
from .http_utils import fetch_text, join_location
from .log_utils import logger, LogSource, LogCategory
from .models import PublicationEntry

__all__ = [
    "PublicationView",
    "filter_entries",
    "sort_entries",
    "select_publications",
    "load_publications",
    "status_message",
]


@dataclass
class PublicationView:
    """
    What the publications page shows for one sort key and filter keyword:
    the journal and conference groups as numbered (index, citation html) rows.
    """
    journals: List[Tuple[int, str]] = field(default_factory=list)
    conferences: List[Tuple[int, str]] = field(default_factory=list)
    sort_key: str = ""
    keyword: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.journals and not self.conferences


def _haystack(entry: PublicationEntry) -> str:
    values = [
        entry.title,
        entry.raw_authors,
        entry.get("journal"),
        entry.get("booktitle"),
        entry.get("publisher"),
        entry.get("organization"),
    ]
    return " ".join(v for v in values if v).lower()


def filter_entries(entries: Sequence[PublicationEntry], keyword: Optional[str]) -> List[PublicationEntry]:
    """
    Keep entries whose title, authors, or venue fields contain the keyword,
    compared case-insensitively. An empty keyword keeps everything.
    """
    needle = (keyword or "").strip().lower()
    if not needle:
        return list(entries)
    return [e for e in entries if needle in _haystack(e)]


def _year_value(entry: PublicationEntry) -> int:
    return entry.year if isinstance(entry.year, int) else 0


def _title_value(entry: PublicationEntry) -> str:
    return unidecode(entry.title).casefold()


def sort_entries(entries: Sequence[PublicationEntry], sort_key: Optional[str]) -> List[PublicationEntry]:
    """
    Stable sort by year (descending or ascending) or by title. Entries without
    an integer year sort as year 0; unknown keys keep source order.
    """
    if sort_key == SORT_YEAR_DESC:
        return sorted(entries, key=_year_value, reverse=True)
    if sort_key == SORT_YEAR_ASC:
        return sorted(entries, key=_year_value)
    if sort_key == SORT_TITLE_ASC:
        return sorted(entries, key=_title_value)
    return list(entries)


def select_publications(
        entries: Sequence[PublicationEntry],
        sort_key: Optional[str] = None,
        keyword: Optional[str] = None,
) -> PublicationView:
    """
    Filter, sort, and split entries into journal and conference groups, each
    numbered from 1. An entry satisfying both classifications appears in both.
    """
    data = sort_entries(filter_entries(entries, keyword), sort_key)
    journals = [e for e in data if is_journal(e)]
    conferences = [e for e in data if is_conference(e)]
    return PublicationView(
        journals=[(i, format_citation(e)) for i, e in enumerate(journals, 1)],
        conferences=[(i, format_citation(e)) for i, e in enumerate(conferences, 1)],
        sort_key=sort_key or "",
        keyword=(keyword or "").strip(),
    )


def load_publications(base: str) -> List[PublicationEntry]:
    """
    Fetch and parse the publication file. Raises ResourceUnavailable when it
    cannot be fetched.
    """
    location = join_location(base, PUBLICATIONS_PATH)
    logger.info(f"Request publications {location}", source=LogSource.PUBLICATIONS, category=LogCategory.FETCH)
    entries = parse_bibtex(fetch_text(location))
    logger.info(f"{len(entries)} entr{'y' if len(entries) == 1 else 'ies'} parsed", source=LogSource.PUBLICATIONS, category=LogCategory.PARSE)
    return entries


def status_message(entries: Optional[Sequence[PublicationEntry]], error: Optional[Exception] = None) -> str:
    """
    Human-readable status line for the publications page.
    """
    if error is not None:
        return f"Failed to load ExPub.txt: {error}"
    if not entries:
        return "ExPub.txt was parsed, but no entries were found."
    return f"Loaded {len(entries)} entries from ExPub.txt."
