"""Editor settings."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .extensions import DEFAULT_EXTENSIONS, ExtensionMeta


class EditorSettings(BaseModel):
    """
    Settings validated once when an Editor is created.

    Attributes:
        extensions: Names of the extensions that make up the schema, in order
        keep_marks: Default for carrying active marks into new list items
        list_group: Schema group that marks a node type as a list
        log_plans: Log each command plan at DEBUG level
    """
    extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    keep_marks: bool = False
    list_group: str = "list"
    log_plans: bool = False

    @field_validator("extensions")
    @classmethod
    def _known_extensions(cls, value: list[str]) -> list[str]:
        for name in value:
            # raises UnknownExtensionError for typos
            ExtensionMeta.get_extension(name)
        if "doc" not in value or "text" not in value:
            raise ValueError("extensions must include 'doc' and 'text'")
        return value
