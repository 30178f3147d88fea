"""
Primitives - Generic structural edits used by the list commands.

Every primitive is a factory returning a step function that takes a
Transaction, applies its change and reports success. A step that reports
False may have left partial changes in the transaction it was given; the
plan executor only ever hands steps a disposable draft.
"""

from __future__ import annotations
import logging
from typing import Sequence

from prosemirror.model import Fragment, Mark, Node, NodeRange, NodeType, ResolvedPos, Slice
from prosemirror.schema.list import wrap_range_in_list
from prosemirror.transform import ReplaceAroundStep, can_join, lift_target

from ..state import Transaction
from .plan import StepFn


logger = logging.getLogger(__name__)


# =========================================================================
# Wrapping
# =========================================================================


def _selection_range(tr: Transaction) -> NodeRange | None:
    selection = tr.selection
    return selection.resolved_from.block_range(selection.resolved_to)


def can_wrap_in_list(tr: Transaction, list_type: NodeType, attrs: dict | None = None) -> bool:
    """Whether the selected blocks can be wrapped in `list_type` as they are."""
    node_range = _selection_range(tr)
    return node_range is not None and wrap_range_in_list(None, node_range, list_type, attrs)


def wrap_in_list(list_type: NodeType, attrs: dict | None = None) -> StepFn:
    """
    Wrap the blocks in the selection in a list of `list_type`.

    When the selection is at the start of a list item that is not the first
    one, the new list is nested into the previous item instead.
    """
    def command(tr: Transaction) -> bool:
        node_range = _selection_range(tr)
        if node_range is None:
            return False
        return wrap_range_in_list(tr, node_range, list_type, attrs)

    return command


# =========================================================================
# Lifting
# =========================================================================


def lift_list_item(item_type: NodeType) -> StepFn:
    """Lift the selected list items out of their list, one level up."""
    def command(tr: Transaction) -> bool:
        selection = tr.selection
        resolved_from, resolved_to = selection.resolved_from, selection.resolved_to
        node_range = resolved_from.block_range(
            resolved_to,
            lambda node: node.child_count > 0 and node.first_child.type is item_type,
        )
        if node_range is None:
            return False
        if resolved_from.node(node_range.depth - 1).type is item_type:
            return _lift_to_outer_list(tr, item_type, node_range, resolved_from, resolved_to)
        return _lift_out_of_list(tr, node_range)

    return command


def _lift_to_outer_list(
    tr: Transaction,
    item_type: NodeType,
    node_range: NodeRange,
    resolved_from: ResolvedPos,
    resolved_to: ResolvedPos,
) -> bool:
    start_step = len(tr.steps)
    end = node_range.end
    end_of_list = resolved_to.end(node_range.depth)
    if end < end_of_list:
        # items after the selection become children of the last lifted item
        tr.step(ReplaceAroundStep(
            end - 1,
            end_of_list,
            end,
            end_of_list,
            Slice(Fragment.from_(item_type.create(None, node_range.parent.copy())), 1, 0),
            1,
            True,
        ))
        node_range = NodeRange(tr.doc.resolve(resolved_from.pos), tr.doc.resolve(end_of_list), node_range.depth)
    target = lift_target(node_range)
    if target is None:
        return False
    tr.lift(node_range, target)
    after = tr.doc.resolve(tr.map_from(start_step, end, -1) - 1)
    if can_join(tr.doc, after.pos) and after.node_before.type is after.node_after.type:
        tr.join(after.pos)
    return True


def _lift_out_of_list(tr: Transaction, node_range: NodeRange) -> bool:
    start_step = len(tr.steps)
    list_node = node_range.parent

    # merge the selected items into one big item
    pos = node_range.end
    for i in range(node_range.end_index - 1, node_range.start_index, -1):
        pos -= list_node.child(i).node_size
        tr.delete(pos - 1, pos + 1)

    resolved_start = tr.doc.resolve(node_range.start)
    item = resolved_start.node_after
    if tr.map_from(start_step, node_range.end) != node_range.start + item.node_size:
        return False

    at_start = node_range.start_index == 0
    at_end = node_range.end_index == list_node.child_count
    parent = resolved_start.node(-1)
    index_before = resolved_start.index(-1)
    remainder = Fragment.empty if at_end else Fragment.from_(list_node)
    if not parent.can_replace(index_before + (0 if at_start else 1), index_before + 1, item.content.append(remainder)):
        return False

    start = resolved_start.pos
    end = start + item.node_size
    before = Fragment.empty if at_start else Fragment.from_(list_node.copy(Fragment.empty))
    after = Fragment.empty if at_end else Fragment.from_(list_node.copy(Fragment.empty))
    # strip the surrounding list; sides that are not at the list's edge keep a closed list
    tr.step(ReplaceAroundStep(
        start - (1 if at_start else 0),
        end + (1 if at_end else 0),
        start + 1,
        end - 1,
        Slice(before.append(after), 0 if at_start else 1, 0 if at_end else 1),
        0 if at_start else 1,
    ))
    return True


def clear_nodes() -> StepFn:
    """
    Turn the selected blocks into plain default blocks.

    Textblocks are retyped to their parent's default block type and every
    node that can be lifted out of its wrappers is lifted.
    """
    def command(tr: Transaction) -> bool:
        selection = tr.selection
        doc = tr.doc
        start_step = len(tr.steps)

        def clear(node: Node, pos: int, parent: Node | None = None, index: int | None = None):
            if node.is_text:
                return None
            mapped_from = tr.doc.resolve(tr.map_from(start_step, pos))
            mapped_to = tr.doc.resolve(tr.map_from(start_step, pos + node.node_size))
            node_range = mapped_from.block_range(mapped_to)
            if node_range is None:
                return None
            target = lift_target(node_range)
            if node.is_textblock:
                default_type = mapped_from.parent.content_match_at(mapped_from.index()).default_type
                if default_type is not None:
                    tr.set_node_markup(node_range.start, default_type, None)
            if target is not None:
                tr.lift(node_range, target)
            return None

        doc.nodes_between(selection.from_, selection.to, clear)
        return True

    return command


# =========================================================================
# Low-level mutators
# =========================================================================


def set_node_type(pos: int, node_type: NodeType, attrs: dict | None = None) -> StepFn:
    """Retype the node at `pos` in place, keeping its children."""
    def command(tr: Transaction) -> bool:
        node = tr.doc.node_at(pos)
        if node is None:
            return False
        if not node_type.valid_content(node.content):
            logger.debug("%s rejects the content of %s at %d", node_type.name, node.type.name, pos)
            return False
        tr.set_node_markup(pos, node_type, attrs)
        return True

    return command


def join_at(pos: int) -> StepFn:
    def command(tr: Transaction) -> bool:
        if not can_join(tr.doc, pos):
            return False
        tr.join(pos)
        return True

    return command


def set_stored_marks(marks: Sequence[Mark] | None) -> StepFn:
    def command(tr: Transaction) -> bool:
        tr.set_stored_marks(marks)
        return True

    return command


def ensure_marks(marks: Sequence[Mark]) -> StepFn:
    def command(tr: Transaction) -> bool:
        tr.ensure_marks(marks)
        return True

    return command
