"""
Editor - Holds the current state and runs commands against it.

A command gets a fresh transaction. If it reports success the transaction
is applied; otherwise it is dropped and the state stays exactly as it was.

Usage:
    editor = Editor(doc)
    editor.set_selection(3)
    editor.toggle_bullet_list()
"""

from __future__ import annotations
import logging
from typing import Any, Sequence

from prosemirror.model import Mark, Node, NodeType

from .commands import Command, CommandProps, ExecutionMode, ToggleListCommand, set_stored_marks
from .config import EditorSettings
from .diff import diff_docs, format_diff_tree
from .errors import UnknownExtensionError
from .extensions import Extension, ExtensionManager, ListExtension
from .state import EditorState, Selection


logger = logging.getLogger(__name__)


class Editor:
    """
    Attributes:
        settings: Validated editor settings
        extension_manager: Schema and list/mark classification
        state: Current EditorState
    """

    def __init__(
        self,
        content: Node | dict | None = None,
        extensions: Sequence[str | type[Extension]] | None = None,
        settings: EditorSettings | None = None,
        selection: int | tuple[int, int] | None = None,
    ):
        self.settings = settings or EditorSettings()
        self.extension_manager = ExtensionManager(
            extensions or self.settings.extensions,
            list_group=self.settings.list_group,
        )
        doc = self._create_doc(content)
        self.state = EditorState.create(doc)
        if selection is not None:
            if isinstance(selection, tuple):
                self.set_selection(*selection)
            else:
                self.set_selection(selection)

    def _create_doc(self, content: Node | dict | None) -> Node:
        if content is None:
            return self.schema.nodes["doc"].create_and_fill()
        if isinstance(content, Node):
            if content.type.schema is self.schema:
                return content
            # node types of another schema never match ours; rebuild in this one
            logger.debug("re-creating document from schema %r", content.type.schema)
            content = content.to_json()
        return Node.from_json(self.schema, content)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def schema(self):
        return self.extension_manager.schema

    @property
    def doc(self) -> Node:
        return self.state.doc

    @property
    def selection(self) -> Selection:
        return self.state.selection

    # =========================================================================
    # Command running
    # =========================================================================

    def run(self, command: Command) -> bool:
        """Run `command` for effect. Returns False and changes nothing if it fails."""
        tr = self.state.tr
        props = CommandProps(tr, self.extension_manager, ExecutionMode.COMMIT)
        if not command(props):
            logger.debug("command %r rejected, state unchanged", command)
            return False
        before = self.state.doc
        self.state = self.state.apply(tr)
        if self.settings.log_plans and logger.isEnabledFor(logging.DEBUG):
            logger.debug("command %r applied:\n%s", command, format_diff_tree(diff_docs(before, self.state.doc)))
        return True

    def can(self, command: Command) -> bool:
        """Check whether `command` would succeed, without changing anything."""
        props = CommandProps(self.state.tr, self.extension_manager, ExecutionMode.FEASIBILITY)
        return command(props)

    # =========================================================================
    # Lists
    # =========================================================================

    def toggle_list_command(
        self,
        list_type: str | NodeType,
        item_type: str | NodeType,
        keep_marks: bool | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> ToggleListCommand:
        return ToggleListCommand(
            list_type=self.extension_manager.node_type(list_type),
            item_type=self.extension_manager.node_type(item_type),
            keep_marks=self.settings.keep_marks if keep_marks is None else keep_marks,
            attributes=attributes or {},
        )

    def toggle_list(
        self,
        list_type: str | NodeType,
        item_type: str | NodeType,
        keep_marks: bool | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> bool:
        return self.run(self.toggle_list_command(list_type, item_type, keep_marks, attributes))

    def can_toggle_list(
        self,
        list_type: str | NodeType,
        item_type: str | NodeType,
        keep_marks: bool | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> bool:
        return self.can(self.toggle_list_command(list_type, item_type, keep_marks, attributes))

    def _toggle_named_list(self, name: str, keep_marks: bool | None, attributes: dict[str, Any] | None) -> bool:
        ext = self.extension_manager.get(name)
        if not issubclass(ext, ListExtension):
            raise UnknownExtensionError(f"Extension '{name}' is not a list")
        if keep_marks is None:
            keep_marks = self.settings.keep_marks or ext.keep_marks
        return self.toggle_list(name, ext.item_name, keep_marks, attributes)

    def toggle_bullet_list(self, keep_marks: bool | None = None) -> bool:
        return self._toggle_named_list("bullet_list", keep_marks, None)

    def toggle_ordered_list(self, keep_marks: bool | None = None, attributes: dict[str, Any] | None = None) -> bool:
        return self._toggle_named_list("ordered_list", keep_marks, attributes)

    def toggle_task_list(self, keep_marks: bool | None = None) -> bool:
        return self._toggle_named_list("task_list", keep_marks, None)

    # =========================================================================
    # Selection and text
    # =========================================================================

    def set_selection(self, anchor: int, head: int | None = None) -> None:
        tr = self.state.tr
        tr.set_selection(Selection.create(tr.doc, anchor, head))
        self.state = self.state.apply(tr)

    def set_stored_marks(self, marks: Sequence[Mark | str] | None) -> bool:
        if marks is not None:
            marks = [self.schema.marks[mark].create() if isinstance(mark, str) else mark for mark in marks]
        return self.run(lambda props: set_stored_marks(marks)(props.tr))

    def insert_text(self, text: str) -> bool:
        def command(props: CommandProps) -> bool:
            props.tr.insert_text(text)
            return True
        return self.run(command)

    def __repr__(self) -> str:
        return f"Editor({self.extension_manager!r}, {self.selection!r})"
