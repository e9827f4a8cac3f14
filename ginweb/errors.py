"""Error values collected while handling a request."""

from __future__ import annotations

import dataclasses
import enum
import json as _json
from collections.abc import Iterable, Mapping
from typing import Any


class ErrorType(enum.IntFlag):
    """Bit flags classifying an :class:`Error`."""

    BIND = 1 << 63
    RENDER = 1 << 62
    PRIVATE = 1 << 0
    PUBLIC = 1 << 1
    ANY = (1 << 64) - 1
    NU = 2


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, Error):
        return value.json()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _format_value(value: Any) -> str:
    """Render a value the way the plain-text error report shows it."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda item: str(item[0]))
        body = " ".join(f"{_format_value(k)}:{_format_value(v)}" for k, v in items)
        return f"map[{body}]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format_value(v) for v in value) + "]"
    return str(value)


class Error(Exception):
    """An error attached to a request, with a type and optional metadata."""

    def __init__(self, err: BaseException | str, type: ErrorType = ErrorType(0), meta: Any = None):
        self.err = err if isinstance(err, BaseException) else Exception(err)
        self.type = ErrorType(type)
        self.meta = meta
        super().__init__(str(self.err))
        self.__cause__ = self.err

    def __str__(self) -> str:
        return str(self.err)

    def __repr__(self) -> str:
        return f"Error(err={self.err!r}, type={self.type!r}, meta={self.meta!r})"

    def set_type(self, flags: ErrorType) -> Error:
        """Set the error's type and return the error."""
        self.type = ErrorType(flags)
        return self

    def set_meta(self, data: Any) -> Error:
        """Set the error's metadata and return the error."""
        self.meta = data
        return self

    def json(self) -> Any:
        """Return a JSON-ready representation of the error."""
        data: dict[str, Any] = {}
        if self.meta is not None:
            meta = self.meta
            if dataclasses.is_dataclass(meta) and not isinstance(meta, type):
                return meta
            if isinstance(meta, Mapping):
                for key, value in meta.items():
                    data[str(key)] = value
            else:
                data["meta"] = meta
        data.setdefault("error", str(self))
        return data

    def marshal(self) -> str:
        """Encode the error as a JSON document."""
        return _json.dumps(self.json(), default=_json_default)

    def is_type(self, flags: ErrorType) -> bool:
        """Tell whether the error carries any of the given flags."""
        return (int(self.type) & int(flags)) > 0


class ErrorList(list):
    """An ordered collection of :class:`Error` values."""

    def __init__(self, errors: Iterable[Error] = ()):
        super().__init__(errors)

    def by_type(self, typ: ErrorType) -> ErrorList:
        """Return the errors that carry any of the given flags."""
        if not self:
            return ErrorList()
        if typ == ErrorType.ANY:
            return self
        return ErrorList(err for err in self if err.is_type(typ))

    def last(self) -> Error | None:
        """Return the last error, or None when there is none."""
        return self[-1] if self else None

    def errors(self) -> list[str]:
        """Return the messages of all errors."""
        return [str(err) for err in self]

    def json(self) -> Any:
        """Return a JSON-ready representation of the errors."""
        if not self:
            return None
        if len(self) == 1:
            return self[0].json()
        return [err.json() for err in self]

    def marshal(self) -> str:
        """Encode the errors as a JSON document."""
        return _json.dumps(self.json(), default=_json_default)

    def __str__(self) -> str:
        lines = []
        for number, err in enumerate(self, start=1):
            lines.append(f"Error #{number:02d}: {err.err}\n")
            if err.meta is not None:
                lines.append(f"     Meta: {_format_value(err.meta)}\n")
        return "".join(lines)