from __future__ import annotations

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .config import BUCKET_TITLES, ICON_NAMES, ICON_PATH_TEMPLATE
from .http_utils import join_location
from .models import Roster
from .pub_utils import PublicationView

__all__ = ["render_people", "render_publications", "write_page"]

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")

_ENV = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_people(roster: Roster, asset_base: str) -> str:
    """
    Render the people directory. Photo and icon links are resolved against
    ``asset_base`` (a URL or a path relative to the output page).
    """
    icon_urls = {
        name: join_location(asset_base, ICON_PATH_TEMPLATE.format(name=name))
        for name in ICON_NAMES
    }
    sections = [
        {
            "bucket": bucket,
            "title": BUCKET_TITLES[bucket],
            "people": [
                {"person": p, "photo_url": join_location(asset_base, p.photo_path)}
                for p in members
            ],
        }
        for bucket, members in roster.buckets()
    ]
    return _ENV.get_template("people.html").render(title="People", sections=sections, icon_urls=icon_urls)


def render_publications(view: Optional[PublicationView], status: str, has_entries: bool = True) -> str:
    """
    Render the publications page. Citation fragments are already HTML and are
    inserted without escaping; ``view`` is None when loading failed.
    """
    def rows(items):
        return [(index, Markup(citation)) for index, citation in items]

    return _ENV.get_template("publications.html").render(
        title="Publications",
        status=status,
        sort_key=view.sort_key if view else "",
        keyword=view.keyword if view else "",
        journals=rows(view.journals) if view else [],
        conferences=rows(view.conferences) if view else [],
        show_empty_hint=bool(view and has_entries and view.is_empty),
    )


def write_page(path: str, html: str) -> None:
    """
    Write a rendered page as UTF-8, creating parent directories as needed.
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(html)
