"""Response writers, the renderer interface and the simple renderers."""

from __future__ import annotations

import abc
import http
import posixpath
import re
import urllib.parse
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence
from wsgiref.headers import Headers

PLAIN_CONTENT_TYPE = "text/plain; charset=utf-8"
_HTML_CONTENT_TYPE = "text/html; charset=utf-8"
_COPY_CHUNK = 32 * 1024

_PRINTF_VERB = re.compile(r"%(%|v)")
_HTML_ESCAPES = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&#34;", "'": "&#39;"}
)


@dataclass
class Request:
    """The parts of an incoming request that renderers need."""

    method: str = "GET"
    path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)


class ResponseRecorder:
    """An in-memory response writer that records status, headers and body."""

    def __init__(self) -> None:
        self.code = http.HTTPStatus.OK.value
        self.body = bytearray()
        self.wrote_header = False
        self._headers = Headers([])

    def header(self) -> Headers:
        """Return the mutable response headers."""
        return self._headers

    def write_header(self, code: int) -> None:
        """Record the status code; only the first call has an effect."""
        if self.wrote_header:
            return
        self.code = code
        self.wrote_header = True

    def write(self, data: bytes) -> int:
        """Append ``data`` to the body, sending a 200 status first if needed."""
        if not self.wrote_header:
            self.write_header(http.HTTPStatus.OK.value)
        self.body.extend(data)
        return len(data)


class Render(abc.ABC):
    """Something that can write itself to a response."""

    @abc.abstractmethod
    def render(self, w: Any) -> None:
        """Write the content type and body to ``w``."""

    @abc.abstractmethod
    def write_content_type(self, w: Any) -> None:
        """Write the content type to ``w`` unless one is already set."""


def write_content_type(w: Any, value: str) -> None:
    """Set the Content-Type header of ``w`` unless it already has one."""
    header = w.header()
    if "Content-Type" not in header:
        header["Content-Type"] = value


@dataclass
class Data(Render):
    """Raw bytes with a custom content type."""

    content_type: str
    data: bytes

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        w.write(bytes(self.data))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, self.content_type)


def _printf(format: str, data: Sequence[Any]) -> str:
    converted = _PRINTF_VERB.sub(lambda m: "%%" if m.group(1) == "%" else "%s", format)
    return converted % tuple(data)


def write_string(w: Any, format: str, data: Sequence[Any]) -> None:
    """Write plain text; ``format`` is applied to ``data`` only when there is data."""
    write_content_type(w, PLAIN_CONTENT_TYPE)
    text = _printf(format, data) if data else format
    w.write(text.encode("utf-8"))


@dataclass
class String(Render):
    """Plain text built from a printf-style format and its arguments."""

    format: str
    data: Sequence[Any] = field(default_factory=list)

    def render(self, w: Any) -> None:
        write_string(w, self.format, self.data)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, PLAIN_CONTENT_TYPE)


@dataclass
class Reader(Render):
    """A stream copied to the response, with extra headers.

    A negative ``content_length`` means the length is unknown and no
    Content-Length header is sent.
    """

    reader: Any
    content_type: str = ""
    content_length: int = -1
    headers: Mapping[str, str] | None = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        headers = dict(self.headers or {})
        if self.content_length >= 0:
            headers["Content-Length"] = str(self.content_length)
        header = w.header()
        for key, value in headers.items():
            if not header.get(key):
                header[key] = value
        while True:
            chunk = self.reader.read(_COPY_CHUNK)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            w.write(chunk)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, self.content_type)


def _hex_escape_non_ascii(text: str) -> str:
    return "".join(
        ch if ord(ch) < 0x80 else "".join(f"%{byte:x}" for byte in ch.encode("utf-8"))
        for ch in text
    )


def _resolve_location(request: Request, location: str) -> str:
    try:
        parts = urllib.parse.urlsplit(location)
    except ValueError:
        return location
    if parts.scheme or parts.netloc:
        return location
    old_path = request.path or "/"
    if not location.startswith("/"):
        old_dir = old_path[: old_path.rfind("/") + 1]
        location = old_dir + location
    location, sep, query = location.partition("?")
    trailing = location.endswith("/")
    cleaned = posixpath.normpath(location)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    if trailing and not cleaned.endswith("/"):
        cleaned += "/"
    return cleaned + sep + query


def _status_text(code: int) -> str:
    try:
        return http.HTTPStatus(code).phrase
    except ValueError:
        return ""


@dataclass
class Redirect(Render):
    """A redirect response to ``location`` with the given status code."""

    code: int
    request: Request
    location: str

    def render(self, w: Any) -> None:
        if (self.code < 300 or self.code > 308) and self.code != 201:
            raise ValueError(f"Cannot redirect with status code {self.code}")
        url = _resolve_location(self.request, self.location)
        header = w.header()
        had_content_type = "Content-Type" in header
        header["Location"] = _hex_escape_non_ascii(url)
        method = self.request.method
        if not had_content_type and method in ("GET", "HEAD"):
            header["Content-Type"] = _HTML_CONTENT_TYPE
        w.write_header(self.code)
        if not had_content_type and method == "GET":
            body = f'<a href="{url.translate(_HTML_ESCAPES)}">{_status_text(self.code)}</a>.\n\n'
            w.write(body.encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        """Redirects carry no content type of their own."""