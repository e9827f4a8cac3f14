"""JSON encoding and the JSON family of renderers."""

from __future__ import annotations

import base64
import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ginweb.render.base import Render, write_content_type

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
JSONP_CONTENT_TYPE = "application/javascript; charset=utf-8"
JSON_ASCII_CONTENT_TYPE = "application/json"

_LINE_SEPARATORS = {"\u2028": "\\u2028", "\u2029": "\\u2029"}
_HTML_ESCAPES = str.maketrans(
    {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", **_LINE_SEPARATORS}
)
_SEPARATOR_ESCAPES = str.maketrans(_LINE_SEPARATORS)

_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "<": "\\u003C",
    ">": "\\u003E",
    "&": "\\u0026",
    "=": "\\u003D",
}


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    raise TypeError(f"json: unsupported map key type: {type(key).__name__}")


def _prepare(obj: Any) -> Any:
    if obj is None or isinstance(obj, (str, bool, int, float)):
        return obj
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _prepare(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    to_json = getattr(obj, "json", None)
    if callable(to_json) and not isinstance(obj, type):
        return _prepare(to_json())
    if isinstance(obj, Mapping):
        items = sorted(((_key(k), v) for k, v in obj.items()), key=lambda item: item[0])
        return {k: _prepare(v) for k, v in items}
    if isinstance(obj, (list, tuple)):
        return [_prepare(item) for item in obj]
    raise TypeError(f"json: unsupported type: {type(obj).__name__}")


def _encode(obj: Any, *, indent: int | None = None, escape_html: bool = True) -> str:
    separators = (",", ": ") if indent is not None else (",", ":")
    text = json.dumps(
        _prepare(obj),
        ensure_ascii=False,
        allow_nan=False,
        indent=indent,
        separators=separators,
    )
    return text.translate(_HTML_ESCAPES if escape_html else _SEPARATOR_ESCAPES)


def marshal(obj: Any) -> bytes:
    """Encode ``obj`` as compact JSON with sorted map keys and HTML-safe strings."""
    return _encode(obj).encode("utf-8")


def js_escape_string(s: str) -> str:
    """Escape ``s`` so it can be placed safely inside JavaScript code."""
    out = []
    for ch in s:
        code = ord(ch)
        if ch in _JS_ESCAPES:
            out.append(_JS_ESCAPES[ch])
        elif code < 0x20:
            out.append(f"\\u00{code:02X}")
        elif code < 0x80 or ch.isprintable():
            out.append(ch)
        else:
            out.append(f"\\u{code:04X}")
    return "".join(out)


def write_json(w: Any, obj: Any) -> None:
    """Write the JSON content type and ``obj`` encoded as JSON."""
    write_content_type(w, JSON_CONTENT_TYPE)
    w.write(marshal(obj))


@dataclass
class JSON(Render):
    """Compact JSON."""

    data: Any

    def render(self, w: Any) -> None:
        write_json(w, self.data)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_CONTENT_TYPE)


@dataclass
class IndentedJSON(Render):
    """JSON indented by four spaces."""

    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        w.write(_encode(self.data, indent=4).encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_CONTENT_TYPE)


@dataclass
class SecureJSON(Render):
    """JSON whose top-level arrays are preceded by an anti-hijacking prefix."""

    prefix: str
    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        encoded = marshal(self.data)
        if encoded.startswith(b"[") and encoded.endswith(b"]"):
            w.write(self.prefix.encode("utf-8"))
        w.write(encoded)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_CONTENT_TYPE)


@dataclass
class JsonpJSON(Render):
    """JSON wrapped in a call to a JavaScript callback."""

    callback: str
    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        encoded = marshal(self.data)
        if not self.callback:
            w.write(encoded)
            return
        w.write(js_escape_string(self.callback).encode("utf-8"))
        w.write(b"(")
        w.write(encoded)
        w.write(b");")

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSONP_CONTENT_TYPE)


@dataclass
class AsciiJSON(Render):
    """JSON with every non-ASCII character written as a \\u escape."""

    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        text = _encode(self.data)
        escaped = "".join(ch if ord(ch) <= 0x7F else f"\\u{ord(ch):04x}" for ch in text)
        w.write(escaped.encode("ascii"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_ASCII_CONTENT_TYPE)


@dataclass
class PureJSON(Render):
    """JSON without HTML escaping, followed by a newline."""

    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        w.write((_encode(self.data, escape_html=False) + "\n").encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_CONTENT_TYPE)