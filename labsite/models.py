from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterator, Optional, Tuple, Union

from .config import PERSON_DIR_TEMPLATE, PHOTO_FILENAME, INTRO_FILENAME


def name_to_folder(name: str) -> str:
    """
    Turn a person's display name into the folder key of their asset directory
    by collapsing every run of whitespace into one underscore ("Yan Lu" -> "Yan_Lu").
    Names that differ only in whitespace map to the same folder.
    """
    return re.sub(r"\s+", "_", name.strip())


@dataclass(frozen=True)
class Biography:
    """
    Structured fields read from one person's intro file. An all-empty
    Biography stands for both a missing file and an empty one.
    """
    position: str = ""
    scholar: str = ""
    email: str = ""
    linkedin: str = ""
    website: str = ""
    intro: str = ""


@dataclass(frozen=True)
class Person:
    """
    One roster entry. ``role`` is the section header the name appeared under;
    the optional fields are filled from the biography file, if any.
    """
    name: str
    role: str
    position: str = ""
    scholar: str = ""
    email: str = ""
    linkedin: str = ""
    website: str = ""
    intro: str = ""

    @property
    def folder(self) -> str:
        return name_to_folder(self.name)

    @property
    def photo_path(self) -> str:
        return f"{PERSON_DIR_TEMPLATE.format(folder=self.folder)}/{PHOTO_FILENAME}"

    @property
    def intro_path(self) -> str:
        return f"{PERSON_DIR_TEMPLATE.format(folder=self.folder)}/{INTRO_FILENAME}"

    @property
    def is_pi(self) -> bool:
        return self.role.startswith("Principal Investigator")

    @property
    def has_links(self) -> bool:
        return bool(self.email or self.scholar or self.linkedin or self.website)

    def with_biography(self, bio: Biography) -> Person:
        """
        Return a copy of this person with every biography field replaced by
        the values from ``bio``.
        """
        return replace(
            self,
            position=bio.position,
            scholar=bio.scholar,
            email=bio.email,
            linkedin=bio.linkedin,
            website=bio.website,
            intro=bio.intro,
        )


@dataclass(frozen=True)
class Roster:
    """
    The people directory: five fixed buckets, each in roster-file order.
    """
    pi: Tuple[Person, ...] = ()
    postdoc: Tuple[Person, ...] = ()
    graduate: Tuple[Person, ...] = ()
    bachelor_visiting: Tuple[Person, ...] = ()
    alumni: Tuple[Person, ...] = ()

    def buckets(self) -> Iterator[Tuple[str, Tuple[Person, ...]]]:
        yield "pi", self.pi
        yield "postdoc", self.postdoc
        yield "graduate", self.graduate
        yield "bachelor_visiting", self.bachelor_visiting
        yield "alumni", self.alumni

    def people(self) -> Iterator[Person]:
        for _, members in self.buckets():
            yield from members

    def __len__(self) -> int:
        return sum(len(members) for _, members in self.buckets())

    def map_people(self, fn: Callable[[Person], Person]) -> Roster:
        """
        Build a new roster by applying ``fn`` to every person, keeping bucket
        membership and order.
        """
        return Roster(**{name: tuple(fn(p) for p in members) for name, members in self.buckets()})


@dataclass
class PublicationEntry:
    """
    One bibliographic record from the BibTeX source. ``fields`` holds every
    field of the entry body under its lowercased name; ``year`` is the parsed
    year (an int when the field starts with digits, otherwise the original
    string, or None when the entry has no year field).
    """
    type: str
    key: str
    fields: Dict[str, str] = field(default_factory=dict)
    year: Optional[Union[int, str]] = None
    raw_authors: str = ""

    def get(self, name: str) -> str:
        """
        Return a field value, or an empty string when the field is absent.
        """
        return self.fields.get(name, "")

    @property
    def title(self) -> str:
        return self.get("title")


@dataclass(frozen=True)
class Author:
    """
    One parsed author name in IEEE form: family name plus space-joined initials.
    """
    family: str
    initials: str = ""
