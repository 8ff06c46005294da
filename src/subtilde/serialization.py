"""JSON dump and load for subtilde trees.

The dump is the debugging view of a parse: every node becomes a dict
tagged with ``_type``, carrying its location, its children and, for
subscripts, the attribute pairs attached by transforms. ``from_json``
turns a dump back into an equal tree, so parsed documents can be cached.

Keys are sorted, so equal trees always dump to the same string.

    doc = parse("H~2~O", plugins=["subscript"])
    assert from_json(to_json(doc)) == doc

Thread Safety:
    All functions are pure.

"""

import json
from dataclasses import fields
from typing import Any

from subtilde.location import SourceLocation
from subtilde.nodes import (
    Document,
    Emphasis,
    LineBreak,
    Node,
    SoftBreak,
    Strikethrough,
    Strong,
    Subscript,
    Text,
)

_KINDS: dict[str, type[Node]] = {
    kind.__name__: kind
    for kind in (Document, Text, Emphasis, Strong, Strikethrough, Subscript, SoftBreak, LineBreak)
}


def to_dict(node: Node) -> dict[str, Any]:
    """Dump one node (and its subtree) to JSON-compatible values."""
    dumped = {f.name: _encode(getattr(node, f.name)) for f in fields(node)}
    dumped["_type"] = type(node).__name__
    return dumped


def _encode(value: Any) -> Any:
    match value:
        case Node():
            return to_dict(value)
        case SourceLocation():
            dumped = {f.name: getattr(value, f.name) for f in fields(SourceLocation)}
            dumped["_type"] = "SourceLocation"
            return dumped
        case tuple():
            return [_encode(item) for item in value]
        case _:
            return value


def from_dict(data: dict[str, Any]) -> Node:
    """Load a node dumped by ``to_dict``.

    Raises:
        ValueError: If ``_type`` is missing or names no node kind.

    """
    if "_type" not in data:
        msg = "serialized node has no '_type' field"
        raise ValueError(msg)
    kind = _KINDS.get(data["_type"])
    if kind is None:
        msg = f"unknown node type {data['_type']!r}"
        raise ValueError(msg)
    return kind(**{f.name: _decode(data[f.name]) for f in fields(kind) if f.name in data})


def _decode(value: Any) -> Any:
    match value:
        case {"_type": "SourceLocation"}:
            return SourceLocation(**{f.name: value.get(f.name) for f in fields(SourceLocation)})
        case {"_type": _}:
            return from_dict(value)
        case list():
            # children and (name, value) attribute pairs both come back as tuples
            return tuple(_decode(item) for item in value)
        case _:
            return value


def to_json(doc: Document, *, indent: int | None = None) -> str:
    return json.dumps(to_dict(doc), sort_keys=True, indent=indent)


def from_json(data: str) -> Document:
    """Load a Document from ``to_json`` output.

    Raises:
        ValueError: If the JSON is not a dumped Document.

    """
    node = from_dict(json.loads(data))
    if not isinstance(node, Document):
        msg = f"expected a Document, got {type(node).__name__}"
        raise ValueError(msg)
    return node
