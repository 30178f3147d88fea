"""
Helpers - Read-only queries over a selection.

- find_parent_node: nearest ancestor of the selection matching a predicate
- find_block_range: minimal sibling range covering the selection
- get_node_type: resolve a type name (or handle) against a schema
- get_active_splittable_marks: marks that should survive a structural split
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Callable, Iterable

from pydantic import BaseModel
from prosemirror.model import Mark, Node, NodeRange, NodeType, ResolvedPos, Schema

from .errors import UnknownNodeTypeError

if TYPE_CHECKING:
    from .state import Selection, Transaction


NodePredicate = Callable[[Node], bool]


class AncestorMatch(BaseModel):
    """
    An ancestor of a position that satisfied a predicate.

    Attributes:
        node: The matching node
        pos: Position directly before the node
        start: Position of the node's first child
        depth: Depth of the node in the document
    """
    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    node: Node
    pos: int
    start: int
    depth: int

    @property
    def end(self) -> int:
        """Position directly after the node."""
        return self.pos + self.node.node_size


def find_parent_node_closest_to_pos(resolved: ResolvedPos, predicate: NodePredicate) -> AncestorMatch | None:
    """
    Walk the ancestors of `resolved` from innermost to outermost and return
    the first one accepted by `predicate`. The document node never matches.
    """
    for depth in range(resolved.depth, 0, -1):
        node = resolved.node(depth)
        if predicate(node):
            return AncestorMatch(
                node=node,
                pos=resolved.before(depth),
                start=resolved.start(depth),
                depth=depth,
            )
    return None


def find_parent_node(predicate: NodePredicate) -> Callable[["Selection"], AncestorMatch | None]:
    """
    Build a matcher that finds the closest ancestor of a selection's start.

    Example:
        match = find_parent_node(lambda node: node.type.name == "bullet_list")(selection)
    """
    def finder(selection: "Selection") -> AncestorMatch | None:
        return find_parent_node_closest_to_pos(selection.resolved_from, predicate)
    return finder


def _crosses_isolating(resolved: ResolvedPos, depth: int) -> bool:
    for d in range(resolved.depth, depth, -1):
        if resolved.node(d).type.spec.get("isolating"):
            return True
    return False


def find_block_range(selection: "Selection") -> NodeRange | None:
    """
    Minimal range of sibling blocks that covers the selection.

    Returns None when the ends share no block ancestor, or when covering
    them would cut through an isolating node.
    """
    resolved_from, resolved_to = selection.resolved_from, selection.resolved_to
    node_range = resolved_from.block_range(resolved_to)
    if node_range is None:
        return None
    if _crosses_isolating(resolved_from, node_range.depth) or _crosses_isolating(resolved_to, node_range.depth):
        return None
    return node_range


def get_node_type(name_or_type: str | NodeType, schema: Schema) -> NodeType:
    if isinstance(name_or_type, NodeType):
        return name_or_type
    node_type = schema.nodes.get(name_or_type)
    if node_type is None:
        raise UnknownNodeTypeError(
            f"There is no node type named '{name_or_type}'. Maybe you forgot to add the extension?"
        )
    return node_type


def get_active_splittable_marks(tr: "Transaction", splittable: Iterable[str]) -> list[Mark]:
    """
    Marks active at the selection that may be carried over a split.

    Stored marks win; otherwise the marks at the selection start are used,
    but only when the selection does not sit at the very start of its block.
    """
    marks = tr.stored_marks
    if marks is None:
        selection = tr.selection
        marks = selection.resolved_from.marks() if selection.resolved_to.parent_offset else []
    names = set(splittable)
    return [mark for mark in marks if mark.type.name in names]
