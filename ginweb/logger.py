"""Request log formatting and console colour settings."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

GREEN = "\033[97;42m"
WHITE = "\033[90;47m"
YELLOW = "\033[90;43m"
RED = "\033[97;41m"
BLUE = "\033[97;44m"
MAGENTA = "\033[97;45m"
CYAN = "\033[97;46m"
RESET = "\033[0m"

_TIME_FORMAT = "%Y/%m/%d - %H:%M:%S"
_NS_PER_SECOND = 10**9
_NS_PER_MINUTE = 60 * _NS_PER_SECOND

_METHOD_COLORS = {
    "GET": BLUE,
    "POST": CYAN,
    "PUT": YELLOW,
    "DELETE": RED,
    "PATCH": GREEN,
    "HEAD": MAGENTA,
    "OPTIONS": WHITE,
}

_QUOTE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


class ColorMode(enum.Enum):
    """Whether log output is coloured."""

    AUTO = "auto"
    DISABLE = "disable"
    FORCE = "force"


_lock = threading.Lock()
_console = {"mode": ColorMode.AUTO}


def disable_console_color() -> None:
    """Turn colour output off."""
    with _lock:
        _console["mode"] = ColorMode.DISABLE


def force_console_color() -> None:
    """Turn colour output on, even when not writing to a terminal."""
    with _lock:
        _console["mode"] = ColorMode.FORCE


def console_color_mode() -> ColorMode:
    """Return the current colour mode."""
    with _lock:
        return _console["mode"]


def _nanoseconds(latency: timedelta) -> int:
    return (latency.days * 86400 + latency.seconds) * _NS_PER_SECOND + latency.microseconds * 1000


def _fraction(value: int, precision: int) -> str:
    digits = f"{value:0{precision}d}".rstrip("0")
    return "." + digits if digits else ""


def _with_fraction(value: int, precision: int) -> str:
    whole, frac = divmod(value, 10**precision)
    return str(whole) + _fraction(frac, precision)


def _format_ns(ns: int) -> str:
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    u = abs(ns)
    if u < _NS_PER_SECOND:
        if u < 1000:
            text = f"{u}ns"
        elif u < 1_000_000:
            text = _with_fraction(u, 3) + "µs"
        else:
            text = _with_fraction(u, 6) + "ms"
        return sign + text
    total_seconds, frac = divmod(u, _NS_PER_SECOND)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    sec_text = f"{seconds}{_fraction(frac, 9)}s"
    if hours:
        return f"{sign}{hours}h{minutes}m{sec_text}"
    if minutes:
        return f"{sign}{minutes}m{sec_text}"
    return sign + sec_text


def format_duration(latency: timedelta) -> str:
    """Format a duration as, for example, ``1.5ms``, ``5s`` or ``1h2m3s``."""
    return _format_ns(_nanoseconds(latency))


def _quote(text: str) -> str:
    out = ['"']
    for ch in text:
        code = ord(ch)
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif code < 0x80:
            out.append(f"\\x{code:02x}")
        elif code < 0x10000:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    out.append('"')
    return "".join(out)


@dataclass
class LogFormatterParams:
    """Everything a log formatter is given about a finished request."""

    request: Any = None
    time_stamp: datetime = datetime.min
    status_code: int = 0
    latency: timedelta = timedelta(0)
    client_ip: str = ""
    method: str = ""
    path: str = ""
    error_message: str = ""
    is_term: bool = False
    body_size: int = 0
    keys: dict[Any, Any] = field(default_factory=dict)

    def status_code_color(self) -> str:
        """Return the ANSI colour for the status code."""
        code = self.status_code
        if 100 <= code < 200:
            return WHITE
        if 200 <= code < 300:
            return GREEN
        if 300 <= code < 400:
            return WHITE
        if 400 <= code < 500:
            return YELLOW
        return RED

    def method_color(self) -> str:
        """Return the ANSI colour for the request method."""
        return _METHOD_COLORS.get(self.method, RESET)

    def reset_color(self) -> str:
        """Return the sequence that resets all colour attributes."""
        return RESET

    def is_output_color(self) -> bool:
        """Tell whether the log line should be coloured."""
        current = console_color_mode()
        return current is ColorMode.FORCE or (current is ColorMode.AUTO and self.is_term)


def default_log_formatter(param: LogFormatterParams) -> str:
    """Format a request log line in the default layout."""
    status_color = method_color = reset_color = ""
    if param.is_output_color():
        status_color = param.status_code_color()
        method_color = param.method_color()
        reset_color = param.reset_color()

    latency_ns = _nanoseconds(param.latency)
    if latency_ns > _NS_PER_MINUTE:
        latency_ns -= latency_ns % _NS_PER_SECOND

    return (
        f"[GIN] {param.time_stamp.strftime(_TIME_FORMAT)} "
        f"|{status_color} {param.status_code:3d} {reset_color}"
        f"| {_format_ns(latency_ns):>13} "
        f"| {param.client_ip:>15} "
        f"|{method_color} {param.method:<7} {reset_color} "
        f"{_quote(param.path)}\n{param.error_message}"
    )