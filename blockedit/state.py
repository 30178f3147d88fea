"""
State - Immutable editor snapshots and the pending transaction.

EditorState holds a document, a text selection and the stored marks for the
next insertion. A Transaction is the mutable draft of the next state: it is
a prosemirror Transform that also tracks the selection and stored marks
through every step it applies.

Usage:
    state = EditorState.create(doc, Selection.create(doc, 1))
    tr = state.tr
    tr.insert_text("Hello")
    state = state.apply(tr)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

from prosemirror.model import Mark, Node, ResolvedPos
from prosemirror.transform import Transform

from .errors import SelectionError


def same_mark_set(a: Sequence[Mark], b: Sequence[Mark]) -> bool:
    if len(a) != len(b):
        return False
    return all(mark_a.eq(mark_b) for mark_a, mark_b in zip(a, b))


class Selection:
    """
    Text selection between an anchor and a head position.

    Both ends always point into inline content. `resolved_from` and
    `resolved_to` are the ordered ends as resolved positions.
    """

    __slots__ = ["resolved_anchor", "resolved_head"]

    def __init__(self, resolved_anchor: ResolvedPos, resolved_head: ResolvedPos | None = None):
        self.resolved_anchor = resolved_anchor
        self.resolved_head = resolved_head if resolved_head is not None else resolved_anchor

    @classmethod
    def create(cls, doc: Node, anchor: int, head: int | None = None) -> Selection:
        """
        Create a selection, snapping each end to the nearest text position.

        Raises:
            SelectionError: if a position is outside the document
        """
        head = anchor if head is None else head
        size = doc.content.size
        for pos in (anchor, head):
            if pos < 0 or pos > size:
                raise SelectionError(f"Position {pos} is outside of the document (size {size})")
        resolved_head = _nearest_inline(doc.resolve(head))
        resolved_anchor = _nearest_inline(doc.resolve(anchor)) if anchor != head else resolved_head
        return cls(resolved_anchor, resolved_head)

    @classmethod
    def at_start(cls, doc: Node) -> Selection:
        return cls.create(doc, 0)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def anchor(self) -> int:
        return self.resolved_anchor.pos

    @property
    def head(self) -> int:
        return self.resolved_head.pos

    @property
    def from_(self) -> int:
        return min(self.anchor, self.head)

    @property
    def to(self) -> int:
        return max(self.anchor, self.head)

    @property
    def resolved_from(self) -> ResolvedPos:
        return self.resolved_anchor if self.anchor <= self.head else self.resolved_head

    @property
    def resolved_to(self) -> ResolvedPos:
        return self.resolved_head if self.anchor <= self.head else self.resolved_anchor

    @property
    def empty(self) -> bool:
        return self.anchor == self.head

    # -------------------------------------------------------------------------
    # Mapping
    # -------------------------------------------------------------------------

    def map(self, doc: Node, map_pos: Callable[[int], int]) -> Selection:
        """Map this selection into `doc` through a position mapping function."""
        resolved_head = doc.resolve(map_pos(self.head))
        if not resolved_head.parent.inline_content:
            near = _nearest_inline(resolved_head)
            return Selection(near, near)
        resolved_anchor = doc.resolve(map_pos(self.anchor))
        if not resolved_anchor.parent.inline_content:
            resolved_anchor = resolved_head
        return Selection(resolved_anchor, resolved_head)

    def to_json(self) -> dict[str, int]:
        return {"anchor": self.anchor, "head": self.head}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Selection):
            return NotImplemented
        return self.anchor == other.anchor and self.head == other.head

    def __hash__(self) -> int:
        return hash((self.anchor, self.head))

    def __repr__(self) -> str:
        if self.empty:
            return f"Selection({self.head})"
        return f"Selection({self.anchor}->{self.head})"


def _scan_positions(pos: int, size: int) -> Iterator[int]:
    yield from range(pos, size + 1)
    yield from range(pos - 1, -1, -1)


def _nearest_inline(resolved: ResolvedPos) -> ResolvedPos:
    if resolved.parent.inline_content:
        return resolved
    doc = resolved.doc
    for pos in _scan_positions(resolved.pos, doc.content.size):
        candidate = doc.resolve(pos)
        if candidate.parent.inline_content:
            return candidate
    raise SelectionError("Document has no position that can hold a text selection")


@dataclass(frozen=True)
class EditorState:
    """
    Immutable editor snapshot.

    Attributes:
        doc: The document tree
        selection: Current text selection
        stored_marks: Marks applied to the next inserted text, or None to
            use the marks at the cursor
    """

    doc: Node
    selection: Selection
    stored_marks: tuple[Mark, ...] | None = None

    @classmethod
    def create(
        cls,
        doc: Node,
        selection: Selection | None = None,
        stored_marks: Sequence[Mark] | None = None,
    ) -> EditorState:
        if selection is None:
            selection = Selection.at_start(doc)
        return cls(doc, selection, tuple(stored_marks) if stored_marks is not None else None)

    @property
    def schema(self):
        return self.doc.type.schema

    @property
    def tr(self) -> Transaction:
        """Open a new transaction on this state."""
        return Transaction(self)

    def apply(self, tr: Transaction) -> EditorState:
        """Produce the state that results from applying `tr`."""
        return EditorState(tr.doc, tr.selection, tr.stored_marks)


class Transaction(Transform):
    """
    Mutable draft of the next editor state.

    Stored marks are dropped by any step added after they were set, so they
    only survive when set after the last structural change.
    """

    def __init__(self, state: EditorState):
        super().__init__(state.doc)
        self._selection = state.selection
        self._selection_for = 0
        self._stored_marks = state.stored_marks
        self._stored_marks_for = 0

    def map_from(self, step_index: int, pos: int, assoc: int = 1) -> int:
        """Map a position from the doc as it was after `step_index` steps to the current doc."""
        for step_map in self.mapping.maps[step_index:]:
            pos = step_map.map(pos, assoc)
        return pos

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    @property
    def selection(self) -> Selection:
        if self._selection_for < len(self.steps):
            start = self._selection_for
            self._selection = self._selection.map(self.doc, lambda pos: self.map_from(start, pos))
            self._selection_for = len(self.steps)
        return self._selection

    def set_selection(self, selection: Selection) -> Transaction:
        self._selection = selection
        self._selection_for = len(self.steps)
        return self

    # -------------------------------------------------------------------------
    # Stored marks
    # -------------------------------------------------------------------------

    @property
    def stored_marks(self) -> tuple[Mark, ...] | None:
        if self._stored_marks_for < len(self.steps):
            return None
        return self._stored_marks

    def set_stored_marks(self, marks: Sequence[Mark] | None) -> Transaction:
        self._stored_marks = tuple(marks) if marks is not None else None
        self._stored_marks_for = len(self.steps)
        return self

    def ensure_marks(self, marks: Sequence[Mark]) -> Transaction:
        """Store `marks` unless they already match what the next insertion would get."""
        current = self.stored_marks
        if current is None:
            current = self.selection.resolved_from.marks()
        if not same_mark_set(current, marks):
            self.set_stored_marks(marks)
        return self

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def insert_text(self, text: str, from_: int | None = None, to: int | None = None) -> Transaction:
        """Replace the range (default: the selection) with text and put the cursor after it."""
        if from_ is None:
            from_, to = self.selection.from_, self.selection.to
        elif to is None:
            to = from_
        if not text:
            if to > from_:
                self.delete(from_, to)
            return self
        marks = self.stored_marks
        if marks is None:
            resolved = self.doc.resolve(from_)
            marks = resolved.marks() if to == from_ else resolved.marks_across(self.doc.resolve(to))
        self.replace_with(from_, to, self.doc.type.schema.text(text, list(marks or [])))
        return self.set_selection(Selection.create(self.doc, from_ + len(text)))

    # -------------------------------------------------------------------------
    # Drafts
    # -------------------------------------------------------------------------

    def fork(self) -> Transaction:
        """Scratch transaction over the current (immutable) doc, selection and stored marks."""
        return Transaction(EditorState(self.doc, self.selection, self.stored_marks))

    def absorb(self, draft: Transaction) -> Transaction:
        """Replay a draft forked from this transaction onto it."""
        for step in draft.steps:
            self.step(step)
        selection = draft.selection
        self.set_selection(Selection(self.doc.resolve(selection.anchor), self.doc.resolve(selection.head)))
        self._stored_marks = draft.stored_marks
        self._stored_marks_for = len(self.steps)
        return self
