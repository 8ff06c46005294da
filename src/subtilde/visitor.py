"""Walking and rewriting subtilde trees.

Nodes are frozen, so there are two tools here: ``BaseVisitor`` reads a
tree (collect subscripts, count nodes, lint), and ``transform`` builds a
new one (attach attributes to subscripts, drop strikethrough).

    class SubscriptCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.found: list[str] = []

        def visit_subscript(self, node: Subscript) -> None:
            self.found.append(node.children[0].content)

    def classify(node: Node) -> Node:
        if isinstance(node, Subscript):
            return dataclasses.replace(node, attributes=(("class", "chem"),))
        return node

    new_doc = transform(doc, classify)

Thread Safety:
    A visitor may keep state, so use one instance per thread.
    ``walk`` and ``transform`` keep none and may run anywhere.

"""

import dataclasses
from collections.abc import Callable, Iterator

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

type NodeFn = Callable[[Node], Node | None]


def _children_of(node: Node) -> tuple[Node, ...]:
    match node:
        case (
            Document(children=children)
            | Emphasis(children=children)
            | Strong(children=children)
            | Strikethrough(children=children)
            | Subscript(children=children)
        ):
            return children
        case _:
            return ()


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants, parents before children.

    Usage:
        >>> doc = parse("H~2~O", plugins=["subscript"])
        >>> [type(n).__name__ for n in walk(doc)]
        ['Document', 'Text', 'Subscript', 'Text', 'Text']

    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(_children_of(current)))


class BaseVisitor[T]:
    """Visitor with one ``visit_*`` hook per node kind.

    Override the hooks for the kinds you care about; everything else goes
    to ``visit_default``. Children are visited after their parent's hook
    returns, and the parent's result is what ``visit`` returns.

    """

    def visit(self, node: Node) -> T:
        result = self._dispatch(node)
        for child in _children_of(node):
            self.visit(child)
        return result

    def visit_default(self, node: Node) -> T:
        return None  # type: ignore[return-value]

    def visit_document(self, node: Document) -> T:
        return self.visit_default(node)

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_emphasis(self, node: Emphasis) -> T:
        return self.visit_default(node)

    def visit_strong(self, node: Strong) -> T:
        return self.visit_default(node)

    def visit_strikethrough(self, node: Strikethrough) -> T:
        return self.visit_default(node)

    def visit_subscript(self, node: Subscript) -> T:
        return self.visit_default(node)

    def visit_line_break(self, node: LineBreak) -> T:
        return self.visit_default(node)

    def visit_soft_break(self, node: SoftBreak) -> T:
        return self.visit_default(node)

    def _dispatch(self, node: Node) -> T:
        match node:
            case Subscript():
                return self.visit_subscript(node)
            case Text():
                return self.visit_text(node)
            case Strikethrough():
                return self.visit_strikethrough(node)
            case Emphasis():
                return self.visit_emphasis(node)
            case Strong():
                return self.visit_strong(node)
            case SoftBreak():
                return self.visit_soft_break(node)
            case LineBreak():
                return self.visit_line_break(node)
            case Document():
                return self.visit_document(node)
            case _:
                return self.visit_default(node)


def transform(doc: Document, fn: NodeFn) -> Document:
    """Rewrite a tree bottom-up into a new Document.

    ``fn`` sees each node after its children have been rewritten, and
    returns the replacement node or None to drop it. Unchanged subtrees
    are shared with the input.

    Raises:
        TypeError: If ``fn`` drops the root or replaces it with a
            non-Document node.

    """
    result = _rewrite(doc, fn)
    if not isinstance(result, Document):
        msg = f"transform must keep a Document at the root, got {type(result).__name__}"
        raise TypeError(msg)
    return result


def _rewrite(node: Node, fn: NodeFn) -> Node | None:
    children = _children_of(node)
    if children:
        rewritten = tuple(new for child in children if (new := _rewrite(child, fn)) is not None)
        if rewritten != children:
            node = dataclasses.replace(node, children=rewritten)  # type: ignore[call-arg]
    return fn(node)
