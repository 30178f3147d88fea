"""
Builders - Terse construction of documents for a schema.

Usage:
    b = DocBuilder(schema)
    doc = b.doc(
        b.paragraph("Hello ", b.text("world", "bold")),
        b.bullet_list(b.list_item(b.paragraph("one"))),
    )
"""

from __future__ import annotations
from functools import partial
from typing import Any, Callable

from prosemirror.model import Node, Schema


NodeContent = Node | str | None


class DocBuilder:

    def __init__(self, schema: Schema):
        self.schema = schema

    def text(self, text: str, *marks: str, **attrs: Any) -> Node:
        """Text node with the named marks. `attrs` go to every mark (e.g. href)."""
        mark_objs = []
        for name in marks:
            mark_type = self.schema.marks[name]
            mark_attrs = {key: value for key, value in attrs.items() if key in mark_type.attrs}
            mark_objs.append(mark_type.create(mark_attrs or None))
        return self.schema.text(text, mark_objs)

    def node(self, type_name: str, *content: NodeContent, **attrs: Any) -> Node:
        children = []
        for item in content:
            if item is None:
                continue
            if isinstance(item, str):
                if item:
                    children.append(self.schema.text(item))
            else:
                children.append(item)
        return self.schema.nodes[type_name].create(attrs or None, children)

    def __getattr__(self, name: str) -> Callable[..., Node]:
        if name.startswith("_") or name not in self.schema.nodes:
            raise AttributeError(f"Schema has no node type named '{name}'")
        return partial(self.node, name)


def find_text(doc: Node, text: str) -> int:
    """
    Position of the first occurrence of `text` inside a single text node.

    Raises:
        ValueError: if the text is not found
    """
    found: list[int] = []

    def visit(node: Node, pos: int, parent: Node | None = None, index: int | None = None):
        if found:
            return False
        if node.is_text and text in node.text:
            found.append(pos + node.text.index(text))
            return False
        return None

    doc.descendants(visit)
    if not found:
        raise ValueError(f"Text {text!r} not found in document")
    return found[0]
