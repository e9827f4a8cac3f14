"""Renderers for MessagePack, Protocol Buffers, TOML, XML and YAML."""

from __future__ import annotations

import dataclasses
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import msgpack
import tomli_w
import yaml

from ginweb.render.base import Render, write_content_type

MSGPACK_CONTENT_TYPE = "application/msgpack; charset=utf-8"
PROTOBUF_CONTENT_TYPE = "application/x-protobuf"
TOML_CONTENT_TYPE = "application/toml; charset=utf-8"
XML_CONTENT_TYPE = "application/xml; charset=utf-8"
YAML_CONTENT_TYPE = "application/yaml; charset=utf-8"


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def write_msgpack(w: Any, obj: Any) -> None:
    """Write the MessagePack content type and ``obj`` encoded as MessagePack."""
    write_content_type(w, MSGPACK_CONTENT_TYPE)
    w.write(msgpack.packb(obj))


@dataclass
class MsgPack(Render):
    """MessagePack-encoded data."""

    data: Any

    def render(self, w: Any) -> None:
        write_msgpack(w, self.data)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, MSGPACK_CONTENT_TYPE)


@dataclass
class ProtoBuf(Render):
    """A protocol buffer message in its binary wire form.

    ``data`` must be a message object offering ``SerializeToString()``.
    """

    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        serialize = getattr(self.data, "SerializeToString", None)
        if not callable(serialize):
            raise TypeError(f"not a protocol buffer message: {type(self.data).__name__}")
        w.write(bytes(serialize()))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, PROTOBUF_CONTENT_TYPE)


def _toml_ready(value: Any) -> Any:
    if _is_dataclass_instance(value):
        return {f.name: _toml_ready(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {key: _toml_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_toml_ready(item) for item in value]
    return value


@dataclass
class TOML(Render):
    """A TOML document; ``data`` must be a table (a mapping or a dataclass)."""

    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        table = _toml_ready(self.data)
        if not isinstance(table, Mapping):
            raise TypeError(
                f"toml: only a table can be marshaled at the top level, "
                f"not {type(self.data).__name__}"
            )
        w.write(tomli_w.dumps(dict(table)).encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, TOML_CONTENT_TYPE)


def _xml_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)
    if _is_dataclass_instance(value):
        for f in dataclasses.fields(value):
            _xml_append(element, f.name, getattr(value, f.name))
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    elif isinstance(value, (bytes, bytearray)):
        element.text = bytes(value).decode("utf-8")
    elif isinstance(value, Mapping):
        raise TypeError(f"xml: unsupported type: {type(value).__name__}")
    else:
        element.text = str(value)
    return element


def _xml_append(parent: ET.Element, name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, ET.Element):
        parent.append(value)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _xml_append(parent, name, item)
    else:
        parent.append(_xml_element(name, value))


def _to_xml(data: Any) -> ET.Element:
    hook = getattr(data, "marshal_xml", None)
    if callable(hook) and not isinstance(data, type):
        data = hook()
    if isinstance(data, ET.Element):
        return data
    if _is_dataclass_instance(data):
        return _xml_element(type(data).__name__, data)
    raise TypeError(f"xml: unsupported type: {type(data).__name__}")


@dataclass
class XML(Render):
    """An XML document.

    ``data`` may be an ElementTree element, a dataclass (encoded as an element
    named after its class with one child per field) or an object whose
    ``marshal_xml()`` returns an element.
    """

    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        element = _to_xml(self.data)
        text = ET.tostring(element, encoding="unicode", short_empty_elements=False)
        w.write(text.encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, XML_CONTENT_TYPE)


def _yaml_ready(value: Any) -> Any:
    hook = getattr(value, "marshal_yaml", None)
    if callable(hook) and not isinstance(value, type):
        return _yaml_ready(hook())
    if _is_dataclass_instance(value):
        return {f.name: _yaml_ready(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {key: _yaml_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_yaml_ready(item) for item in value]
    return value


@dataclass
class YAML(Render):
    """A YAML document; objects may supply ``marshal_yaml()`` to choose their form."""

    data: Any

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        text = yaml.safe_dump(
            _yaml_ready(self.data),
            allow_unicode=True,
            sort_keys=True,
            default_flow_style=False,
        )
        w.write(text.encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, YAML_CONTENT_TYPE)