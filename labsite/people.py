from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from .config import BIOGRAPHY_WORKERS, BUCKET_ORDER, ROSTER_PATH, SECTION_BUCKETS
from .http_utils import fetch_text, handle_fetch_errors, join_location
from .log_utils import logger, LogSource, LogCategory
from .models import Biography, Person, Roster, name_to_folder

__all__ = [
    "name_to_folder",
    "person_assets",
    "parse_roster",
    "parse_biography",
    "fetch_biography",
    "load_biography",
    "load_biographies",
    "load_people",
]

_LINE_SPLIT = re.compile(r"\r?\n")

# Biography headers in priority order. Each one must be the whole trimmed
# line, optionally followed by a colon.
_FIELD_HEADERS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"^Position:?$", re.I), "position"),
    (re.compile(r"^(?:Google Scholar|Scholar):?$", re.I), "scholar"),
    (re.compile(r"^(?:Email|E-mail):?$", re.I), "email"),
    (re.compile(r"^LinkedIn:?$", re.I), "linkedin"),
    (re.compile(r"^(?:Website|Homepage|Personal Website):?$", re.I), "website"),
    # prefix match: "Intro", "Introduction", "Introduction:" ...
    (re.compile(r"^Intro", re.I), "intro"),
]


def person_assets(name: str, base: str) -> Dict[str, str]:
    """
    Locate a person's photo and intro file below the resource root.
    """
    person = Person(name=name, role="")
    return {
        "photo": join_location(base, person.photo_path),
        "intro": join_location(base, person.intro_path),
    }


def parse_roster(text: str) -> Roster:
    """
    Split a roster file into the five role buckets.

    A trimmed line ending in ":" opens a section; the following non-blank
    lines are people in that section until the next header. Lines under a
    header outside SECTION_BUCKETS, and lines before the first header, are
    dropped. A name that itself ends in ":" is read as a header.
    """
    buckets: Dict[str, List[Person]] = {name: [] for name in BUCKET_ORDER}
    section: Optional[str] = None

    for raw_line in _LINE_SPLIT.split(text):
        line = raw_line.strip()
        if not line:
            continue
        if line.endswith(":"):
            section = line[:-1]
            continue
        if section is None:
            continue
        bucket = SECTION_BUCKETS.get(section)
        if bucket is None:
            continue
        buckets[bucket].append(Person(name=line, role=section))

    return Roster(**{name: tuple(members) for name, members in buckets.items()})


def _header_field(line: str) -> Optional[str]:
    for pattern, field_name in _FIELD_HEADERS:
        if pattern.search(line):
            return field_name
    return None


def parse_biography(text: str) -> Biography:
    """
    Read the structured fields of one person's intro file.

    Lines under the intro header are kept as written (indentation included)
    and joined with newlines; blank lines are skipped everywhere. Every other
    field takes the first non-blank line after its header, and a repeated
    header never overwrites a value already captured.
    """
    values: Dict[str, str] = {}
    intro_lines: List[str] = []
    current: Optional[str] = None

    for raw_line in _LINE_SPLIT.split(text):
        line = raw_line.strip()
        if not line:
            continue

        header = _header_field(line)
        if header:
            current = header
            continue

        if current == "intro":
            intro_lines.append(raw_line)
        elif current and not values.get(current):
            values[current] = line

    return Biography(
        position=values.get("position", ""),
        scholar=values.get("scholar", ""),
        email=values.get("email", ""),
        linkedin=values.get("linkedin", ""),
        website=values.get("website", ""),
        intro="\n".join(intro_lines).strip(),
    )


@handle_fetch_errors(default_return=Biography())
def fetch_biography(person: Person, base: str) -> Biography:
    """
    Fetch and parse one person's intro file. An unavailable file yields an
    empty Biography, the same result as an empty file.
    """
    return parse_biography(fetch_text(join_location(base, person.intro_path)))


def load_biography(person: Person, base: str) -> Person:
    return person.with_biography(fetch_biography(person, base))


def load_biographies(roster: Roster, base: str, max_workers: int = BIOGRAPHY_WORKERS) -> Roster:
    """
    Fetch every biography concurrently and wait for all of them before
    returning the enriched roster. Each fetch fails independently.
    """
    people = list(roster.people())
    if not people:
        return roster

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        futures = {p: executor.submit(load_biography, p, base) for p in people}
        loaded = {p: f.result() for p, f in futures.items()}

    missing = sum(1 for p in people if loaded[p] == p)
    if missing:
        logger.info(f"{missing}/{len(people)} person(s) without biography data", source=LogSource.PEOPLE, category=LogCategory.SKIP)
    return roster.map_people(lambda p: loaded[p])


def load_people(base: str) -> Roster:
    """
    Fetch and parse the roster, then load every biography. Raises
    ResourceUnavailable when the roster file itself cannot be fetched.
    """
    location = join_location(base, ROSTER_PATH)
    logger.info(f"Request roster {location}", source=LogSource.PEOPLE, category=LogCategory.FETCH)
    roster = parse_roster(fetch_text(location))
    logger.info(f"Roster parsed: {len(roster)} person(s)", source=LogSource.PEOPLE, category=LogCategory.PARSE)
    return load_biographies(roster, base)
