"""
blockedit - List toggling for tree-structured documents.

This package provides:
- Editor: Current state plus command running (commit or feasibility check)
- EditorState / Transaction / Selection: Immutable snapshots and the pending draft
- ExtensionManager: Schema built from node and mark extensions
- ToggleListCommand: Toggle, convert and join lists
- Plan / PlanExecutor: Atomic ordered command steps
- DocBuilder: Terse document construction
- diff_docs: Tree-structured document comparison
"""

from .extensions import (
    Extension,
    ExtensionManager,
    ExtensionMeta,
    ListCapabilities,
    ListExtension,
    MarkExtension,
    NodeExtension,
)
from .errors import SelectionError, UnknownExtensionError, UnknownNodeTypeError
from .state import EditorState, Selection, Transaction
from .helpers import AncestorMatch, find_block_range, find_parent_node, get_node_type
from .commands import (
    CommandProps,
    ExecutionMode,
    Plan,
    PlanExecutor,
    PlanStep,
    ToggleListCommand,
    can_apply,
    plan_toggle_list,
)
from .config import EditorSettings
from .editor import Editor
from .builders import DocBuilder, find_text
from .diff import DocDiff, NodeDiff, diff_docs, format_diff_tree, format_doc

__all__ = [
    "Editor",
    "EditorSettings",
    "EditorState",
    "Selection",
    "SelectionError",
    "Transaction",
    "Extension",
    "ExtensionManager",
    "ExtensionMeta",
    "ListCapabilities",
    "ListExtension",
    "MarkExtension",
    "NodeExtension",
    "UnknownExtensionError",
    "UnknownNodeTypeError",
    "AncestorMatch",
    "find_block_range",
    "find_parent_node",
    "get_node_type",
    "CommandProps",
    "ExecutionMode",
    "Plan",
    "PlanExecutor",
    "PlanStep",
    "ToggleListCommand",
    "can_apply",
    "plan_toggle_list",
    "DocBuilder",
    "find_text",
    "DocDiff",
    "NodeDiff",
    "diff_docs",
    "format_diff_tree",
    "format_doc",
]
