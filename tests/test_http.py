import os
from unittest.mock import MagicMock, patch

import pytest
import requests

from labsite import http_utils
from labsite.exceptions import ResourceUnavailable

# ===== LOCATIONS =====

def test_is_url():
    test_cases = [
        ("https://lab.example.org/Resources", True),
        ("http://localhost:8000", True),
        ("Resources", False),
        ("/srv/site/Resources", False),
        ("file:///srv/site", False),
    ]
    for location, expected in test_cases:
        assert http_utils.is_url(location) == expected, f"is_url mismatch for {location!r}"

def test_join_location():
    assert http_utils.join_location("https://lab.example.org/Resources", "pub/ExPub.txt") == \
        "https://lab.example.org/Resources/pub/ExPub.txt"
    assert http_utils.join_location("https://lab.example.org/Resources/", "people/people.txt") == \
        "https://lab.example.org/Resources/people/people.txt"
    assert http_utils.join_location("Resources", "pub/ExPub.txt") == os.path.join("Resources", "pub", "ExPub.txt")

# ===== DECODING =====

def test_decode_text():
    """
    Byte order marks decide the encoding; otherwise UTF-8 with a Latin-1 fallback.
    """
    test_cases = [
        ("Yan Lu".encode("utf-8"), "Yan Lu"),
        (b"\xef\xbb\xbfPrincipal Investigator:", "Principal Investigator:"),
        (b"\xff\xfe" + "Alumni:".encode("utf-16le"), "Alumni:"),
        ("Müller".encode("latin-1"), "Müller"),
        ("Müller".encode("utf-8"), "Müller"),
    ]
    for raw, expected in test_cases:
        assert http_utils.decode_text(raw) == expected

# ===== FETCHING =====

def test_fetch_local_file(tmp_path):
    path = tmp_path / "people.txt"
    path.write_text("Alumni:\nOld Member\n", encoding="utf-8")
    assert http_utils.fetch_text(str(path)) == "Alumni:\nOld Member\n"

def test_fetch_missing_local_file(tmp_path):
    with pytest.raises(ResourceUnavailable) as excinfo:
        http_utils.fetch_text(str(tmp_path / "missing.txt"))
    assert excinfo.value.location.endswith("missing.txt")

def test_fetch_url():
    resp = MagicMock()
    resp.content = b"@misc{a, title={T}}"
    resp.raise_for_status.return_value = None
    with patch.object(http_utils._SESSION, "get", return_value=resp) as get:
        text = http_utils.fetch_text("https://lab.example.org/pub/ExPub.txt")
    assert text == "@misc{a, title={T}}"
    assert get.call_args[0][0] == "https://lab.example.org/pub/ExPub.txt"

def test_fetch_url_waits_without_timeout():
    """
    By default a request has no timeout; an explicit one is passed through.
    """
    resp = MagicMock()
    resp.content = b"Alumni:\n"
    resp.raise_for_status.return_value = None
    with patch.object(http_utils._SESSION, "get", return_value=resp) as get:
        http_utils.fetch_text("https://lab.example.org/people/people.txt")
        assert get.call_args.kwargs["timeout"] is None
        http_utils.fetch_text("https://lab.example.org/people/people.txt", timeout=3.0)
        assert get.call_args.kwargs["timeout"] == 3.0

def test_fetch_url_error_status():
    """
    A non-success status is reported as ResourceUnavailable.
    """
    resp = MagicMock()
    resp.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Client Error: Not Found")
    with patch.object(http_utils._SESSION, "get", return_value=resp):
        with pytest.raises(ResourceUnavailable, match="404"):
            http_utils.fetch_text("https://lab.example.org/pub/ExPub.txt")

def test_fetch_url_connection_error():
    with patch.object(http_utils._SESSION, "get", side_effect=requests.exceptions.ConnectionError("refused")):
        with pytest.raises(ResourceUnavailable):
            http_utils.fetch_text("https://lab.example.org/people/people.txt")

def test_handle_fetch_errors_returns_default():
    @http_utils.handle_fetch_errors(default_return="fallback")
    def flaky():
        raise ResourceUnavailable("somewhere", "gone")

    assert flaky() == "fallback"
