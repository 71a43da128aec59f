from __future__ import annotations

import socket
import urllib.error

import requests

__all__ = [
    "ResourceUnavailable",
    "HTTP_ERRORS",
    "TIMEOUT_ERRORS",
    "NETWORK_ERRORS",
    "DECODE_ERRORS",
    "FILE_IO_ERRORS",
    "FILE_READ_ERRORS",
    "NUMERIC_ERRORS",
    "FETCH_ERRORS",
    "FILE_WRITE_ERRORS",
]


class ResourceUnavailable(Exception):
    """
    A text resource (roster, biography, or publication file) could not be
    retrieved, either because the request failed, the server answered with a
    non-success status, or the local file is missing or unreadable.
    """

    def __init__(self, location: str, reason: str = ""):
        self.location = location
        self.reason = reason
        message = f"{location}: {reason}" if reason else location
        super().__init__(message)


# errors raised by urllib or requests when an HTTP request fails or a URL cannot be reached
HTTP_ERRORS = (urllib.error.HTTPError, urllib.error.URLError, requests.exceptions.RequestException)

# errors that signal an operation has taken too long and hit a timeout at the OS or socket level
TIMEOUT_ERRORS = (TimeoutError, socket.timeout)

# umbrella group for network-related failures
NETWORK_ERRORS = HTTP_ERRORS + TIMEOUT_ERRORS

# errors that occur when converting response bytes into text using a specific encoding
DECODE_ERRORS = (UnicodeDecodeError, UnicodeError)

# file system errors when reading local resource files
# Note: FileNotFoundError is a subclass of OSError, so both are included for clarity
FILE_IO_ERRORS = (FileNotFoundError, OSError)

# combined file read errors including I/O failures and encoding issues
FILE_READ_ERRORS = FILE_IO_ERRORS + DECODE_ERRORS

# numeric conversion errors raised while parsing years
NUMERIC_ERRORS = (TypeError, ValueError, OverflowError)

# everything that can go wrong while retrieving and decoding a text resource
FETCH_ERRORS = NETWORK_ERRORS + FILE_READ_ERRORS

# file write operation errors including permissions, disk full, and encoding issues
FILE_WRITE_ERRORS = (OSError, TypeError, UnicodeEncodeError)
