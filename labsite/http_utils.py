from __future__ import annotations

import os
import urllib.parse
from functools import wraps
from typing import Callable, Dict, Optional, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import DEFAULT_TEXT_HEADERS, HTTP_TIMEOUT_DEFAULT, HTTP_MAX_RETRIES
from .exceptions import DECODE_ERRORS, FETCH_ERRORS, ResourceUnavailable
from .log_utils import logger, LogSource, LogCategory

T = TypeVar('T')

# Global session for connection pooling
_SESSION = requests.Session()

_RETRY_STRATEGY = Retry(total=HTTP_MAX_RETRIES, allowed_methods=["GET"])
_ADAPTER = HTTPAdapter(max_retries=_RETRY_STRATEGY)
_SESSION.mount("https://", _ADAPTER)
_SESSION.mount("http://", _ADAPTER)


def handle_fetch_errors(default_return=None):
    """
    Decorator that turns a ResourceUnavailable raised by the wrapped function
    into a default value, so one missing resource degrades instead of failing
    the caller.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ResourceUnavailable as e:
                logger.info(f"Unavailable, using defaults: {e}", source=LogSource.HTTP, category=LogCategory.SKIP)
                return default_return
        return wrapper
    return decorator


def is_url(location: str) -> bool:
    return urllib.parse.urlparse(location).scheme in ("http", "https")


def join_location(base: str, relative: str) -> str:
    """
    Append a relative resource path to a resource root, which may be either a
    local directory or an http(s) base URL.
    """
    if is_url(base):
        return urllib.parse.urljoin(base.rstrip("/") + "/", urllib.parse.quote(relative))
    return os.path.join(base, *relative.split("/"))


def decode_text(raw: bytes) -> str:
    """
    Choose a suitable decoding by inspecting byte order marks, trying UTF-8
    first, and falling back to Latin-1 when needed.
    """
    if raw.startswith(b"\xef\xbb\xbf"):
        return raw.decode("utf-8-sig")
    if raw.startswith(b"\xff\xfe"):
        try:
            return raw.decode("utf-16le")[1:]
        except DECODE_ERRORS:
            pass
    if raw.startswith(b"\xfe\xff"):
        try:
            return raw.decode("utf-16be")[1:]
        except DECODE_ERRORS:
            pass
    try:
        return raw.decode("utf-8")
    except DECODE_ERRORS:
        return raw.decode("latin-1", errors="replace")


def http_fetch_bytes(url: str, headers: Dict[str, str], timeout: Optional[float]) -> bytes:
    """
    Perform a single HTTP GET and return the response body, raising for any
    non-success status.
    """
    resp = _SESSION.get(url, headers=headers, timeout=timeout)
    resp.raise_for_status()
    return resp.content


def _read_local_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def fetch_text(location: str, timeout: Optional[float] = HTTP_TIMEOUT_DEFAULT) -> str:
    """
    Retrieve one text resource from a URL or a local path and decode it.

    Every failure (network error, non-success status, missing or unreadable
    file) is reported as ResourceUnavailable.
    """
    try:
        if is_url(location):
            raw = http_fetch_bytes(location, DEFAULT_TEXT_HEADERS.copy(), timeout)
        else:
            raw = _read_local_bytes(location)
    except FETCH_ERRORS as e:
        raise ResourceUnavailable(location, str(e) or type(e).__name__) from e
    logger.debug(f"Fetched {location} ({len(raw)} bytes)", source=LogSource.HTTP, category=LogCategory.FETCH)
    return decode_text(raw)
