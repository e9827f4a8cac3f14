"""HTML template rendering."""

from __future__ import annotations

import glob as _glob
import os
import posixpath
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import jinja2

from ginweb.fs import TemplateFileSystem
from ginweb.render.base import Render, write_content_type

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
_GLOB_CHARS = frozenset("*?[")


@dataclass(frozen=True)
class Delims:
    """Left and right delimiters of template expressions."""

    left: str = "{{"
    right: str = "}}"


def _environment(
    sources: Mapping[str, str], delims: Delims, func_map: Mapping[str, Callable[..., Any]]
) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.DictLoader(dict(sources)),
        autoescape=True,
        keep_trailing_newline=True,
        variable_start_string=delims.left,
        variable_end_string=delims.right,
    )
    env.globals.update(func_map)
    env.filters.update(func_map)
    for name in sources:
        env.get_template(name)
    return env


def _read_files(paths: Iterable[str]) -> dict[str, str]:
    sources: dict[str, str] = {}
    for path in paths:
        with open(path, encoding="utf-8") as handle:
            sources[os.path.basename(path)] = handle.read()
    return sources


def _root_of(file_system: Any) -> str | None:
    while file_system is not None:
        root = getattr(file_system, "root", None)
        if isinstance(root, str):
            return root or "."
        file_system = getattr(file_system, "file_system", None)
    return None


def _match(file_system: Any, pattern: str) -> list[str]:
    if not _GLOB_CHARS.intersection(pattern):
        return [pattern]
    root = _root_of(file_system)
    if root is None:
        raise ValueError(f"cannot match pattern {pattern!r} on this file system")
    matches = _glob.glob(pattern, root_dir=root)
    return sorted(m for m in matches if os.path.isfile(os.path.join(root, m)))


@dataclass
class HTML(Render):
    """A named template rendered with the given data.

    ``template`` is a jinja2 environment or template. With an empty ``name`` a
    template is rendered itself. Mapping data supplies the template variables;
    any other value is available as ``data``.
    """

    template: Any
    name: str
    data: Any = None

    def _resolve(self) -> jinja2.Template:
        template = self.template
        if isinstance(template, jinja2.Template):
            if not self.name or template.name == self.name:
                return template
            return template.environment.get_template(self.name)
        if not self.name:
            raise ValueError("a template name is required for a template set")
        return template.get_template(self.name)

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        template = self._resolve()
        if self.data is None:
            context: dict[str, Any] = {}
        elif isinstance(self.data, Mapping):
            context = dict(self.data)
        else:
            context = {"data": self.data}
        w.write(template.render(context).encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, HTML_CONTENT_TYPE)


@dataclass
class HTMLProduction:
    """Renders from templates loaded once."""

    template: Any
    delims: Delims = field(default_factory=Delims)

    def instance(self, name: str, data: Any) -> HTML:
        """Return a renderer for the template ``name`` with ``data``."""
        return HTML(template=self.template, name=name, data=data)


@dataclass
class HTMLDebug:
    """Renders from templates reloaded on every use."""

    files: list[str] = field(default_factory=list)
    glob: str = ""
    file_system: Any = None
    patterns: list[str] = field(default_factory=list)
    delims: Delims = field(default_factory=Delims)
    func_map: Mapping[str, Callable[..., Any]] | None = None

    def instance(self, name: str, data: Any) -> HTML:
        """Load the templates afresh and return a renderer for ``name``."""
        return HTML(template=self._load_template(), name=name, data=data)

    def _load_template(self) -> jinja2.Environment:
        func_map = self.func_map or {}
        if self.files:
            return _environment(_read_files(self.files), self.delims, func_map)
        if self.glob:
            matches = sorted(_glob.glob(self.glob))
            if not matches:
                raise ValueError(f"pattern matches no files: {self.glob!r}")
            return _environment(_read_files(matches), self.delims, func_map)
        if self.file_system is not None and self.patterns:
            return _environment(self._read_file_system(), self.delims, func_map)
        raise ValueError(
            "the HTML debug render was created without files or glob pattern "
            "or file system with patterns"
        )

    def _read_file_system(self) -> dict[str, str]:
        names: list[str] = []
        for pattern in self.patterns:
            matched = _match(self.file_system, pattern)
            if not matched:
                raise ValueError(f"pattern matches no files: {pattern!r}")
            names.extend(matched)
        file_system = TemplateFileSystem(self.file_system)
        sources: dict[str, str] = {}
        for name in names:
            handle = file_system.open(name)
            try:
                content = handle.read()
            finally:
                close = getattr(handle, "close", None)
                if callable(close):
                    close()
            if isinstance(content, bytes):
                content = content.decode("utf-8")
            sources[posixpath.basename(name)] = content
        return sources