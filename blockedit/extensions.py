"""
Extensions - Node and mark definitions that make up an editor schema.

Each Extension subclass describes one node or mark type. ExtensionMeta is a
metaclass that registers extensions by their names, so an editor can be
configured with plain strings.

ExtensionManager turns a list of extensions into a prosemirror Schema and
answers the classification queries the list commands need (is this type a
list, which marks survive a split).
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, ClassVar, Literal, Protocol, Sequence

from prosemirror.model import Mark, NodeType, Schema

from .errors import UnknownExtensionError
from .helpers import get_active_splittable_marks, get_node_type

if TYPE_CHECKING:
    from .state import Transaction


# Global registry of name -> extension class
_extension_registry: dict[str, type[Extension]] = {}

# One schema per resolved extension tuple
_schema_cache: dict[tuple[type[Extension], ...], Schema] = {}


class ExtensionMeta(type):
    """
    Metaclass that registers Extension subclasses by their names.

    When a class with `name = "bullet_list"` is defined, this metaclass
    registers it in the global extension registry for lookup.
    """

    def __new__(mcs, name: str, bases: tuple, attrs: dict):
        new_cls = super().__new__(mcs, name, bases, attrs)

        if ext_name := attrs.get("name"):
            _extension_registry[ext_name] = new_cls

        return new_cls

    @classmethod
    def get_extension(mcs, name: str) -> type[Extension]:
        """Get the Extension class registered under `name`."""
        try:
            return _extension_registry[name]
        except KeyError:
            raise UnknownExtensionError(f"There is no extension named '{name}'") from None

    @classmethod
    def list_extensions(mcs) -> list[str]:
        """List all registered extension names."""
        return list(_extension_registry.keys())

    @classmethod
    def resolve(mcs, names: Sequence[str | type[Extension]]) -> list[type[Extension]]:
        resolved = []
        for item in names:
            if isinstance(item, str):
                resolved.append(mcs.get_extension(item))
            else:
                resolved.append(item)
        return resolved


class Extension(metaclass=ExtensionMeta):
    """
    Base class for schema extensions.

    Attributes:
        name: Type name in the schema (registry key)
        kind: "node" or "mark"
    """

    name: ClassVar[str] = ""
    kind: ClassVar[Literal["node", "mark"]] = "node"

    @classmethod
    def spec(cls) -> dict[str, Any]:
        raise NotImplementedError(f"{cls.__name__}.spec is not implemented")


class NodeExtension(Extension):
    kind = "node"
    content: ClassVar[str | None] = None
    group: ClassVar[str | None] = None
    attrs: ClassVar[dict[str, Any]] = {}
    isolating: ClassVar[bool] = False
    defining: ClassVar[bool] = False
    marks: ClassVar[str | None] = None

    @classmethod
    def groups(cls) -> list[str]:
        return cls.group.split() if cls.group else []

    @classmethod
    def spec(cls) -> dict[str, Any]:
        spec: dict[str, Any] = {}
        if cls.content is not None:
            spec["content"] = cls.content
        if cls.group:
            spec["group"] = cls.group
        if cls.attrs:
            spec["attrs"] = {key: {"default": value} for key, value in cls.attrs.items()}
        if cls.isolating:
            spec["isolating"] = True
        if cls.defining:
            spec["defining"] = True
        if cls.marks is not None:
            spec["marks"] = cls.marks
        return spec


class MarkExtension(Extension):
    kind = "mark"
    attrs: ClassVar[dict[str, Any]] = {}
    inclusive: ClassVar[bool] = True
    keep_on_split: ClassVar[bool] = True

    @classmethod
    def spec(cls) -> dict[str, Any]:
        spec: dict[str, Any] = {}
        if cls.attrs:
            spec["attrs"] = {key: {"default": value} for key, value in cls.attrs.items()}
        if not cls.inclusive:
            spec["inclusive"] = False
        return spec


class ListExtension(NodeExtension):
    """A node that holds list items. `item_name` is the item type it toggles with."""
    group = "block list"
    item_name: ClassVar[str] = "list_item"
    keep_marks: ClassVar[bool] = False


# =========================================================================
# Built-in nodes
# =========================================================================


class Doc(NodeExtension):
    name = "doc"
    content = "block+"


class Paragraph(NodeExtension):
    name = "paragraph"
    content = "inline*"
    group = "block"


class Heading(NodeExtension):
    name = "heading"
    content = "inline*"
    group = "block"
    attrs = {"level": 1}
    defining = True


class Blockquote(NodeExtension):
    name = "blockquote"
    content = "block+"
    group = "block"
    defining = True


class CodeBlock(NodeExtension):
    name = "code_block"
    content = "text*"
    group = "block"
    marks = ""
    defining = True


class Callout(NodeExtension):
    """Boxed note. Isolating: selections and lifts never cross its edges."""
    name = "callout"
    content = "paragraph+"
    group = "block"
    isolating = True


class Text(NodeExtension):
    name = "text"
    group = "inline"


class ListItem(NodeExtension):
    name = "list_item"
    content = "paragraph block*"
    defining = True


class TaskItem(NodeExtension):
    name = "task_item"
    content = "paragraph block*"
    attrs = {"checked": False}
    defining = True


class BulletList(ListExtension):
    name = "bullet_list"
    content = "list_item+"


class OrderedList(ListExtension):
    name = "ordered_list"
    content = "list_item+"
    attrs = {"order": 1}


class TaskList(ListExtension):
    name = "task_list"
    content = "task_item+"
    item_name = "task_item"


# =========================================================================
# Built-in marks
# =========================================================================


class Bold(MarkExtension):
    name = "bold"


class Italic(MarkExtension):
    name = "italic"


class Code(MarkExtension):
    name = "code"


class Link(MarkExtension):
    name = "link"
    attrs = {"href": None}
    inclusive = False
    keep_on_split = False


# Schema order matters: the first node in a group is its default type.
DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "doc",
    "paragraph",
    "heading",
    "blockquote",
    "code_block",
    "callout",
    "text",
    "bullet_list",
    "ordered_list",
    "list_item",
    "task_list",
    "task_item",
    "bold",
    "italic",
    "code",
    "link",
)


class ListCapabilities(Protocol):
    """Classification queries the list commands depend on."""

    def is_list_kind(self, type_name: str) -> bool: ...

    def active_splittable_marks(self, tr: "Transaction") -> list[Mark]: ...


class ExtensionManager:
    """
    Resolves a set of extensions into a schema.

    Attributes:
        extensions: Resolved extension classes, in schema order
        schema: The prosemirror Schema built from the extensions
    """

    def __init__(
        self,
        extensions: Sequence[str | type[Extension]] | None = None,
        list_group: str = "list",
    ):
        self.extensions = ExtensionMeta.resolve(extensions or DEFAULT_EXTENSIONS)
        self.list_group = list_group
        self._by_name = {ext.name: ext for ext in self.extensions}
        self.schema = self._build_schema()

    def _build_schema(self) -> Schema:
        # node types compare by identity, so one extension set maps to one schema
        key = tuple(self.extensions)
        if key not in _schema_cache:
            _schema_cache[key] = self._create_schema()
        return _schema_cache[key]

    def _create_schema(self) -> Schema:
        nodes = {ext.name: ext.spec() for ext in self.extensions if ext.kind == "node"}
        marks = {ext.name: ext.spec() for ext in self.extensions if ext.kind == "mark"}
        return Schema({"nodes": nodes, "marks": marks})

    def get(self, name: str) -> type[Extension]:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownExtensionError(f"Extension '{name}' is not enabled in this editor") from None

    def node_type(self, name_or_type: str | NodeType) -> NodeType:
        return get_node_type(name_or_type, self.schema)

    def is_list_kind(self, type_name: str) -> bool:
        ext = self._by_name.get(type_name)
        if ext is None or not issubclass(ext, NodeExtension):
            return False
        return self.list_group in ext.groups()

    def splittable_mark_names(self) -> set[str]:
        return {
            ext.name
            for ext in self.extensions
            if issubclass(ext, MarkExtension) and ext.keep_on_split
        }

    def active_splittable_marks(self, tr: "Transaction") -> list[Mark]:
        return get_active_splittable_marks(tr, self.splittable_mark_names())

    def __repr__(self) -> str:
        return f"ExtensionManager({[ext.name for ext in self.extensions]})"
