"""
Commands - Editing operations built from ordered plan steps.

- Plan / PlanExecutor: run steps atomically, as a feasibility check or for real
- primitives: wrap, lift, clear and low-level mutators
- join: merge adjacent lists of the same type
- ToggleListCommand: toggle blocks between plain blocks and lists
"""

from .plan import (
    Command,
    CommandProps,
    ExecutionMode,
    Plan,
    PlanExecutor,
    PlanStep,
    can_apply,
)
from .primitives import (
    can_wrap_in_list,
    clear_nodes,
    ensure_marks,
    join_at,
    lift_list_item,
    set_node_type,
    set_stored_marks,
    wrap_in_list,
)
from .join import join_list_backwards, join_list_forwards
from .toggle_list import ToggleListCommand, plan_toggle_list

__all__ = [
    "Command",
    "CommandProps",
    "ExecutionMode",
    "Plan",
    "PlanExecutor",
    "PlanStep",
    "can_apply",
    "can_wrap_in_list",
    "clear_nodes",
    "ensure_marks",
    "join_at",
    "lift_list_item",
    "set_node_type",
    "set_stored_marks",
    "wrap_in_list",
    "join_list_backwards",
    "join_list_forwards",
    "ToggleListCommand",
    "plan_toggle_list",
]
