from __future__ import annotations

DEFAULT_RESOURCES = "Resources"
DEFAULT_OUT_DIR = "output"

# resource layout below the resource root (a directory or a base URL)
ROSTER_PATH = "people/people.txt"
PERSON_DIR_TEMPLATE = "people/{folder}"
PHOTO_FILENAME = "photo.jpg"
INTRO_FILENAME = "intro.txt"
PUBLICATIONS_PATH = "pub/ExPub.txt"
ICON_PATH_TEMPLATE = "icons/{name}.svg"
ICON_NAMES = ("email", "scholar", "linkedin", "website")

PEOPLE_PAGE = "people.html"
PUBLICATIONS_PAGE = "publications.html"

# Roster section headers and the bucket each one fills.
# The header text must match the roster file exactly (including its spelling).
SECTION_BUCKETS = {
    "Principal Investigator": "pi",
    "Postdoc Researcher": "postdoc",
    "Graduate Students": "graduate",
    "Bachelor Intership & Visiting Scholar": "bachelor_visiting",
    "Alumni": "alumni",
}

# render order of the buckets on the people page
BUCKET_ORDER = ("pi", "postdoc", "graduate", "bachelor_visiting", "alumni")

# headings shown above each bucket
BUCKET_TITLES = {
    "pi": "Principal Investigator",
    "postdoc": "Postdoc Researcher",
    "graduate": "Graduate Students",
    "bachelor_visiting": "Bachelor Internship & Visiting Scholar",
    "alumni": "Alumni",
}

# IEEE style lists at most this many authors before switching to "et al."
MAX_AUTHORS = 6

SORT_DEFAULT = "default"
SORT_YEAR_DESC = "year-desc"
SORT_YEAR_ASC = "year-asc"
SORT_TITLE_ASC = "title-asc"
SORT_KEYS = (SORT_DEFAULT, SORT_YEAR_DESC, SORT_YEAR_ASC, SORT_TITLE_ASC)

# HTTP request configuration
# A failed fetch is terminal for that resource, so no retries are made.
# None waits as long as the server takes; set seconds to bound each request.
HTTP_TIMEOUT_DEFAULT = None
HTTP_MAX_RETRIES = 0

DEFAULT_TEXT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (labsite Client)",
    "Accept": "text/plain,*/*;q=0.8",
}

# number of biography files fetched in parallel
BIOGRAPHY_WORKERS = 8
