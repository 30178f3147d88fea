"""
Join - Merge a freshly typed list with a neighbouring list of the same type.

Both directions always report success: a join that cannot happen (no list
at the selection, no neighbour, a neighbour of another type, or a boundary
the schema will not let us merge) is simply skipped.
"""

from __future__ import annotations
import logging
from typing import Literal

from prosemirror.model import NodeType
from prosemirror.transform import can_join

from ..helpers import find_parent_node
from ..state import Transaction
from .plan import StepFn


logger = logging.getLogger(__name__)


Direction = Literal["backwards", "forwards"]


def join_list(tr: Transaction, list_type: NodeType, direction: Direction) -> bool:
    found = find_parent_node(lambda node: node.type is list_type)(tr.selection)
    if found is None:
        return True

    if direction == "backwards":
        boundary = found.pos
        neighbour = tr.doc.resolve(boundary).node_before
    else:
        boundary = found.end
        neighbour = tr.doc.resolve(boundary).node_after

    if neighbour is None or neighbour.type is not found.node.type:
        return True
    if not can_join(tr.doc, boundary):
        logger.debug("cannot join %s %s at %d", list_type.name, direction, boundary)
        return True

    tr.join(boundary)
    logger.debug("joined %s %s at %d", list_type.name, direction, boundary)
    return True


def join_list_backwards(tr: Transaction, list_type: NodeType) -> bool:
    return join_list(tr, list_type, "backwards")


def join_list_forwards(tr: Transaction, list_type: NodeType) -> bool:
    return join_list(tr, list_type, "forwards")


def join_backwards_step(list_type: NodeType) -> StepFn:
    return lambda tr: join_list_backwards(tr, list_type)


def join_forwards_step(list_type: NodeType) -> StepFn:
    return lambda tr: join_list_forwards(tr, list_type)
