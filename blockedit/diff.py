"""
Doc Diff - Compare two document trees and identify changes.

Provides tree-structured diffs used to check that a failed command left the
document untouched and to log what a command changed.

Usage:
    from blockedit.diff import diff_docs

    diff = diff_docs(doc_a, doc_b)

    if not diff.is_identical:
        print(f"Found {diff.change_count} changes")
        print(format_diff_tree(diff))
"""

from __future__ import annotations
import difflib
import hashlib
import json
from typing import Any, Iterator, Literal

from prosemirror.model import Node
from pydantic import BaseModel, Field


# =============================================================================
# Diff Models
# =============================================================================

Status = Literal["unchanged", "modified", "added", "removed"]

STATUS_MARKERS: dict[str, str] = {"unchanged": " ", "modified": "~", "added": "+", "removed": "-"}


class FieldChange(BaseModel):
    """One changed property of a node (type, text, attrs or marks)."""
    field: str
    old_value: Any
    new_value: Any

    def __repr__(self) -> str:
        return f"FieldChange({self.field}: {self.old_value!r} -> {self.new_value!r})"


class NodeDiff(BaseModel):
    """
    Diff of the nodes found at the same index path in both documents.

    `path` is the dotted child-index path from the document root ("" for the
    root itself, "0.1" for the second child of the first block).
    """

    path: str = ""
    status: Status = "unchanged"

    type_change: tuple[str, str] | None = None
    text_change: tuple[str, str] | None = None
    attrs_change: tuple[dict, dict] | None = None
    marks_change: tuple[list[str], list[str]] | None = None

    # json of the node that exists on one side only
    node_data: dict | None = None

    children: list["NodeDiff"] = Field(default_factory=list)

    @property
    def field_changes(self) -> list[FieldChange]:
        pairs = {
            "type": self.type_change,
            "text": self.text_change,
            "attrs": self.attrs_change,
            "marks": self.marks_change,
        }
        return [
            FieldChange(field=name, old_value=pair[0], new_value=pair[1])
            for name, pair in pairs.items()
            if pair is not None
        ]

    def walk(self, changed_only: bool = False) -> Iterator["NodeDiff"]:
        """Depth-first walk over this diff and its children."""
        if not changed_only or self.status != "unchanged":
            yield self
        for child in self.children:
            yield from child.walk(changed_only)

    def __repr__(self) -> str:
        if self.status == "modified":
            return f"NodeDiff({self.path or '(root)'} modified {[fc.field for fc in self.field_changes]})"
        return f"NodeDiff({self.path or '(root)'} {self.status})"


class DocDiff(BaseModel):
    """Diff between two documents, keyed by their content hashes."""

    hash_a: str
    hash_b: str
    root: NodeDiff

    @property
    def is_identical(self) -> bool:
        return self.hash_a == self.hash_b

    def iter_changes(self) -> Iterator[NodeDiff]:
        return self.root.walk(changed_only=True)

    @property
    def change_count(self) -> int:
        return len(list(self.iter_changes()))

    @property
    def has_structural_changes(self) -> bool:
        """Nodes were added, removed or retyped."""
        return any(node.status != "modified" or node.type_change for node in self.iter_changes())

    def changes_by_status(self) -> dict[str, list[NodeDiff]]:
        grouped: dict[str, list[NodeDiff]] = {"modified": [], "added": [], "removed": []}
        for node in self.iter_changes():
            grouped[node.status].append(node)
        return grouped

    def summary(self) -> str:
        if self.is_identical:
            return "Documents are identical"
        counts = [f"{len(nodes)} {status}" for status, nodes in self.changes_by_status().items() if nodes]
        return ", ".join(counts)

    def __bool__(self) -> bool:
        return not self.is_identical

    def __repr__(self) -> str:
        return f"DocDiff({self.summary()})"


# =============================================================================
# Diff Computation
# =============================================================================

def compute_doc_hash(node: Node) -> str:
    payload = json.dumps(node.to_json(), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _mark_names(node: Node) -> list[str]:
    return [mark.type.name for mark in node.marks]


def _changed(old: Any, new: Any) -> tuple[Any, Any] | None:
    return None if old == new else (old, new)


def _compute_node_diff(node_a: Node | None, node_b: Node | None, path: str = "") -> NodeDiff:
    if node_a is None or node_b is None:
        present = node_b if node_a is None else node_a
        return NodeDiff(
            path=path,
            status="added" if node_a is None else "removed",
            node_data=present.to_json(),
        )

    diff = NodeDiff(
        path=path,
        type_change=_changed(node_a.type.name, node_b.type.name),
        attrs_change=_changed(dict(node_a.attrs), dict(node_b.attrs)),
        marks_change=_changed(_mark_names(node_a), _mark_names(node_b)),
    )
    if node_a.is_text or node_b.is_text:
        diff.text_change = _changed(
            node_a.text if node_a.is_text else "",
            node_b.text if node_b.is_text else "",
        )

    count = max(node_a.child_count, node_b.child_count)
    for i in range(count):
        child_a = node_a.child(i) if i < node_a.child_count else None
        child_b = node_b.child(i) if i < node_b.child_count else None
        diff.children.append(_compute_node_diff(child_a, child_b, f"{path}.{i}" if path else str(i)))

    if diff.field_changes or any(child.status != "unchanged" for child in diff.children):
        diff.status = "modified"
    return diff


def diff_docs(doc_a: Node, doc_b: Node) -> DocDiff:
    """
    Compute the diff between two documents.

    Documents with equal content hashes are not walked at all.

    Example:
        diff = diff_docs(before, after)
        if diff:
            for change in diff.iter_changes():
                print(f"  {change.path}: {change.status}")
    """
    hash_a, hash_b = compute_doc_hash(doc_a), compute_doc_hash(doc_b)
    root = NodeDiff() if hash_a == hash_b else _compute_node_diff(doc_a, doc_b)
    return DocDiff(hash_a=hash_a, hash_b=hash_b, root=root)


# =============================================================================
# Display Utilities
# =============================================================================

def format_doc(node: Node, indent: int = 2) -> str:
    """
    Render a document as an indented outline, one node per line.

        doc
          ordered_list {'order': 1}
            list_item
              paragraph
                'foo' [bold]
    """
    lines: list[str] = []

    def visit(current: Node, depth: int):
        if current.is_text:
            label = repr(current.text)
        else:
            label = current.type.name
            attrs = {key: value for key, value in dict(current.attrs).items() if value is not None}
            if attrs:
                label += f" {attrs}"
        if current.marks:
            label += f" [{', '.join(_mark_names(current))}]"
        lines.append(" " * (indent * depth) + label)
        current.for_each(lambda child, offset, index: visit(child, depth + 1))

    visit(node, 0)
    return "\n".join(lines)


def get_text_diff(doc_a: Node, doc_b: Node, context_lines: int = 3) -> str:
    """Unified diff of the two documents' outlines."""
    diff = difflib.unified_diff(
        format_doc(doc_a).splitlines(keepends=True),
        format_doc(doc_b).splitlines(keepends=True),
        fromfile="before",
        tofile="after",
        n=context_lines,
    )
    return "".join(diff)


def format_diff_tree(diff: DocDiff, indent: int = 2) -> str:
    lines: list[str] = []

    def visit(node: NodeDiff, depth: int):
        line = f"{' ' * (indent * depth)}{STATUS_MARKERS[node.status]} {node.path or '(root)'}"
        fields = [fc.field for fc in node.field_changes]
        if node.status == "modified" and fields:
            line += f" [{', '.join(fields)}]"
        lines.append(line)
        for child in node.children:
            visit(child, depth + 1)

    visit(diff.root, 0)
    return "\n".join(lines)
