"""
Toggle List - Switch the selected blocks between plain blocks and a list.

The decision is made once per invocation by plan_toggle_list:

- the selection sits directly in a list of the target type: lift the items
  out (unwrap)
- it sits directly in another kind of list whose items the target type
  accepts: retype that list in place, then merge with same-typed neighbours
- otherwise: clear the blocks if they cannot be wrapped as they are, wrap
  them, merge with neighbours and optionally keep the active marks

The same plan drives both the feasibility check and the real edit.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any

from prosemirror.model import NodeType

from ..extensions import ListCapabilities
from ..helpers import find_block_range, find_parent_node
from ..state import Transaction
from .join import join_backwards_step, join_forwards_step
from .plan import CommandProps, Plan, StepFn, can_apply
from .primitives import (
    can_wrap_in_list,
    clear_nodes,
    ensure_marks,
    lift_list_item,
    set_node_type,
    wrap_in_list,
)


logger = logging.getLogger(__name__)


def clear_unless_wrappable(list_type: NodeType, attributes: dict[str, Any] | None = None) -> StepFn:
    """Leave the blocks alone if they can be wrapped, otherwise clear them to plain blocks."""
    def command(tr: Transaction) -> bool:
        if can_wrap_in_list(tr, list_type, attributes):
            return True
        logger.debug("selection cannot be wrapped in %s, clearing blocks first", list_type.name)
        return clear_nodes()(tr)

    return command


def plan_toggle_list(
    tr: Transaction,
    list_type: NodeType,
    item_type: NodeType,
    capabilities: ListCapabilities,
    keep_marks: bool = False,
    attributes: dict[str, Any] | None = None,
) -> Plan | None:
    """
    Build the toggle plan for the current selection of `tr`.

    Returns None when the selection has no usable block range; the command
    then fails without touching the document.
    """
    selection = tr.selection
    node_range = find_block_range(selection)
    if node_range is None:
        return None

    active_marks = capabilities.active_splittable_marks(tr)
    parent_list = find_parent_node(lambda node: capabilities.is_list_kind(node.type.name))(selection)

    if node_range.depth >= 1 and parent_list is not None and node_range.depth - parent_list.depth <= 1:
        if parent_list.node.type is list_type:
            return Plan().then("lift_list_item", lift_list_item(item_type))

        retype = (
            Plan()
            .then("set_node_type", set_node_type(parent_list.pos, list_type))
            .cosmetic("join_backwards", join_backwards_step(list_type))
            .cosmetic("join_forwards", join_forwards_step(list_type))
        )
        if can_apply(retype, tr):
            return retype
        logger.debug(
            "%s does not accept the items of %s, wrapping instead",
            list_type.name,
            parent_list.node.type.name,
        )

    plan = (
        Plan()
        .then("clear_nodes", clear_unless_wrappable(list_type, attributes))
        .then("wrap_in_list", wrap_in_list(list_type, attributes))
        .cosmetic("join_backwards", join_backwards_step(list_type))
        .cosmetic("join_forwards", join_forwards_step(list_type))
    )
    if keep_marks and active_marks:
        plan.then("keep_marks", ensure_marks(active_marks), commit_only=True)
    return plan


@dataclass(frozen=True)
class ToggleListCommand:
    """
    Toggle between a list of `list_type` and plain blocks.

    Types are resolved before the command is built, so an unknown type name
    fails at construction time rather than inside the algorithm.

    Attributes:
        list_type: The list node type to toggle
        item_type: Item node type of that list
        keep_marks: Carry the active marks over to the new list item
        attributes: Attributes for a newly created list node
    """
    list_type: NodeType
    item_type: NodeType
    keep_marks: bool = False
    attributes: dict[str, Any] | None = None

    def plan(self, tr: Transaction, capabilities: ListCapabilities) -> Plan | None:
        return plan_toggle_list(
            tr,
            self.list_type,
            self.item_type,
            capabilities,
            keep_marks=self.keep_marks,
            attributes=self.attributes,
        )

    def __call__(self, props: CommandProps) -> bool:
        plan = self.plan(props.tr, props.capabilities)
        if plan is None:
            logger.debug("toggle %s: no block range for %r", self.list_type.name, props.tr.selection)
            return False
        logger.debug("toggle %s: %s %r", self.list_type.name, props.mode.value, plan)
        return props.executor.execute(plan, props.tr)
