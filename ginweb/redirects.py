"""Path and status computations for the router's automatic redirects."""

from __future__ import annotations

import http
import posixpath
import re

_UNSAFE_PREFIX_CHARS = re.compile(r"[^a-zA-Z0-9/-]+")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def _clean(path: str) -> str:
    """Clean a slash-separated path lexically; an empty path becomes ``.``."""
    cleaned = posixpath.normpath(path) if path else "."
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def safe_prefix(prefix: str) -> str | None:
    """Sanitise an X-Forwarded-Prefix value.

    The value is cleaned, characters other than letters, digits, ``/`` and
    ``-`` are removed and runs of slashes collapsed. Returns None when the
    value names no prefix at all.
    """
    cleaned = _clean(prefix)
    if cleaned == ".":
        return None
    cleaned = _UNSAFE_PREFIX_CHARS.sub("", cleaned)
    return _REPEATED_SLASHES.sub("/", cleaned)


def trailing_slash_redirect_path(path: str, forwarded_prefix: str = "") -> str:
    """Return the path to redirect to when only the trailing slash differs.

    A path ending in a slash loses it; any other path gains one. A forwarded
    prefix, once sanitised, is placed in front of the path.
    """
    prefix = safe_prefix(forwarded_prefix)
    p = path if prefix is None else prefix + "/" + path
    if len(p) > 1 and p.endswith("/"):
        return p[:-1]
    return p + "/"


def redirect_code(method: str) -> int:
    """Return the redirect status: permanent for GET, temporary otherwise."""
    if method == http.HTTPMethod.GET if hasattr(http, "HTTPMethod") else method == "GET":
        return http.HTTPStatus.MOVED_PERMANENTLY.value
    return http.HTTPStatus.TEMPORARY_REDIRECT.value