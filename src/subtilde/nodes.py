"""Typed AST nodes for subtilde.

All AST nodes are frozen dataclasses with slots, so a parsed tree can be
shared between threads and rewritten only by building new nodes (see
``subtilde.visitor.transform``).

Node Hierarchy:
Node (base)
├── Document
└── Inline
    ├── Text
    ├── Emphasis
    ├── Strong
    ├── Strikethrough
    ├── Subscript
    ├── LineBreak
    └── SoftBreak

The inline kinds form a closed union (``Inline``); renderers and visitors
dispatch on it with ``match`` statements.

"""

from __future__ import annotations

from dataclasses import dataclass

from subtilde.location import SourceLocation


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes."""

    location: SourceLocation


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text, already unescaped. Rendered HTML-escaped."""

    content: str


@dataclass(frozen=True, slots=True)
class Emphasis(Node):
    """Emphasized text.

    Markdown: *text* or _text_
    HTML: <em>text</em>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strong(Node):
    """Strong text.

    Markdown: **text** or __text__
    HTML: <strong>text</strong>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class LineBreak(Node):
    """Hard line break (two trailing spaces or a trailing backslash)."""


@dataclass(frozen=True, slots=True)
class SoftBreak(Node):
    """Soft line break between two lines of inline text."""


# =============================================================================
# Plugin Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Strikethrough(Node):
    """Strikethrough (deleted) text.

    Markdown: ~~deleted~~ or ~deleted~
    HTML: <del>deleted</del>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Subscript(Node):
    """Subscript text.

    Markdown: H~2~O
    HTML: H<sub>2</sub>O

    The parser always produces exactly one Text child holding the content
    between the tildes. ``attributes`` is never set by parsing; tree
    transforms may attach (name, value) pairs that the renderer filters
    against the subscript attribute whitelist.

    """

    children: tuple[Inline, ...]
    attributes: tuple[tuple[str, str], ...] | None = None


# PEP 695 type alias for inline elements
type Inline = (
    Text
    | Emphasis
    | Strong
    | Strikethrough
    | Subscript
    | LineBreak
    | SoftBreak
)


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root node holding the inline content of one source text."""

    children: tuple[Inline, ...]
