from __future__ import annotations

import re
from typing import List, Optional

from .bibtex_utils import is_conference, is_journal
from .config import MAX_AUTHORS
from .models import Author, PublicationEntry

__all__ = [
    "parse_authors",
    "format_author",
    "format_authors",
    "format_year",
    "format_pages",
    "format_title",
    "format_citation",
]

_AUTHOR_SEP = re.compile(r"\s+and\s+", re.I)


def _parse_author_name(name: str) -> Optional[Author]:
    """
    Split one author token into family name and initials. "Family, Given"
    and "Given Middle Family" are both accepted.
    """
    name = name.replace("{", "").replace("}", "").strip()
    if not name:
        return None

    if "," in name:
        parts = name.split(",")
        family = parts[0].strip()
        given = parts[1].strip()
    else:
        tokens = name.split()
        family = tokens[-1]
        given = " ".join(tokens[:-1])

    initials = " ".join(f"{g[0].upper()}." for g in given.split())
    return Author(family=family, initials=initials)


def parse_authors(raw_authors: Optional[str]) -> List[Author]:
    """
    Turn a BibTeX author field ("Song, Fei and Zhang, Ying") into Author
    records, skipping empty names.
    """
    if not raw_authors:
        return []
    authors: List[Author] = []
    for token in _AUTHOR_SEP.split(raw_authors):
        author = _parse_author_name(token.strip())
        if author:
            authors.append(author)
    return authors


def format_author(author: Author) -> str:
    return f"{author.initials} {author.family}" if author.initials else author.family


def format_authors(authors: List[Author]) -> str:
    """
    Join authors IEEE style: "A", "A and B", "A, B, and C". Lists longer than
    MAX_AUTHORS keep the first MAX_AUTHORS names followed by "et al." with no
    "and" before the tail.
    """
    if not authors:
        return ""

    truncated = len(authors) > MAX_AUTHORS
    names = [format_author(a) for a in authors[:MAX_AUTHORS]]

    if len(names) == 1:
        return f"{names[0]} et al." if truncated else names[0]

    if len(names) == 2:
        return f"{names[0]}, {names[1]}, et al." if truncated else f"{names[0]} and {names[1]}"

    head = ", ".join(names[:-1])
    if truncated:
        return f"{head}, {names[-1]}, et al."
    return f"{head}, and {names[-1]}"


def format_year(entry: PublicationEntry) -> str:
    return str(entry.year) if isinstance(entry.year, int) else "n.d."


def format_pages(entry: PublicationEntry) -> str:
    return entry.get("pages").replace("--", "–")


def format_title(entry: PublicationEntry) -> str:
    """
    Quote the title and, when the entry carries a url field, link it.
    """
    quoted = f'"{entry.title}"'
    url = entry.get("url")
    if url:
        return f'<a class="pub-title-link" href="{url}" target="_blank" rel="noopener noreferrer">{quoted}</a>'
    return quoted


def _journal_parts(entry: PublicationEntry, pages: str, year: str) -> List[str]:
    parts = []
    journal = entry.get("journal")
    if journal:
        parts.append(f"<em>{journal}</em>")

    volume_parts = []
    if entry.get("volume"):
        volume_parts.append(f"vol. {entry.get('volume')}")
    if entry.get("number"):
        volume_parts.append(f"no. {entry.get('number')}")
    if volume_parts:
        parts.append(", ".join(volume_parts))

    if pages:
        parts.append(f"pp. {pages}")
    parts.append(year)
    return parts


def _conference_parts(entry: PublicationEntry, pages: str, year: str) -> List[str]:
    parts = []
    booktitle = entry.get("booktitle")
    if booktitle:
        parts.append(f"in <em>{booktitle}</em>")
    if pages:
        parts.append(f"pp. {pages}")
    org = entry.get("organization") or entry.get("publisher")
    if org:
        parts.append(org)
    parts.append(year)
    return parts


def format_citation(entry: PublicationEntry) -> str:
    """
    Render one entry as an IEEE-style HTML fragment (without the [n] index).

    Journal formatting takes precedence over conference formatting when an
    entry qualifies for both; entries that are neither fall back to
    "<em>venue</em>, year." or just "year.".
    """
    authors = format_authors(parse_authors(entry.raw_authors))
    title = format_title(entry)
    base = f"{authors}, {title}, " if authors else f"{title}, "

    year = format_year(entry)
    pages = format_pages(entry)

    if is_journal(entry):
        return base + ", ".join(_journal_parts(entry, pages, year)) + "."

    if is_conference(entry):
        return base + ", ".join(_conference_parts(entry, pages, year)) + "."

    venue = entry.get("booktitle") or entry.get("journal") or entry.get("publisher") or entry.get("organization")
    if venue:
        return base + f"<em>{venue}</em>, {year}."
    return base + f"{year}."
