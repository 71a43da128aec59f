from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .exceptions import NUMERIC_ERRORS
from .models import PublicationEntry

__all__ = [
    "iter_entry_spans",
    "parse_fields",
    "parse_year",
    "parse_bibtex",
    "is_journal",
    "is_conference",
]

# @type{key, body} where the body runs lazily up to the first "}" that is
# followed (after optional whitespace) by the next "@" or the end of input
_ENTRY_RE = re.compile(r"@([A-Za-z0-9_]+)\s*\{([^,]+),(.*?)\}\s*(?=@|\Z)", re.S)

# name = {value}; the value stops at the first "}", nested braces are not supported
_FIELD_RE = re.compile(r"([A-Za-z0-9_]+)\s*=\s*\{([^}]*)\}")

_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


def iter_entry_spans(text: str) -> Iterator[Tuple[str, str, str]]:
    """
    First pass: yield (type, key, body) for every entry, in source order.
    """
    for m in _ENTRY_RE.finditer(text):
        yield m.group(1), m.group(2), m.group(3)


def parse_fields(body: str) -> Dict[str, str]:
    """
    Second pass: collect the ``name = {value}`` pairs of one entry body.

    Names are lowercased, values trimmed with ``\\%`` unescaped. When a name
    repeats, the later value replaces the earlier one.
    """
    fields: Dict[str, str] = {}
    for m in _FIELD_RE.finditer(body):
        fields[m.group(1).lower()] = m.group(2).strip().replace("\\%", "%")
    return fields


def parse_year(value: Optional[str]) -> Optional[Union[int, str]]:
    """
    Read the leading base-10 integer of a year field ("2020", " 2021a").
    Values without leading digits are returned unchanged; a missing field
    stays None.
    """
    if value is None:
        return None
    m = _LEADING_INT_RE.match(value)
    if not m:
        return value
    try:
        return int(m.group(1))
    except NUMERIC_ERRORS:
        return value


def parse_bibtex(text: str) -> List[PublicationEntry]:
    """
    Extract every entry of a BibTeX-subset text. Malformed input never
    raises; whatever cannot be matched is left out.
    """
    entries: List[PublicationEntry] = []
    for entry_type, key, body in iter_entry_spans(text or ""):
        fields = parse_fields(body)
        entries.append(
            PublicationEntry(
                type=entry_type.lower(),
                key=key.strip(),
                fields=fields,
                year=parse_year(fields.get("year")),
                raw_authors=fields.get("author", ""),
            )
        )
    return entries


def is_journal(entry: PublicationEntry) -> bool:
    return entry.type == "article" or bool(entry.get("journal"))


def is_conference(entry: PublicationEntry) -> bool:
    return entry.type == "inproceedings" or bool(entry.get("booktitle"))
