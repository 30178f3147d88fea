import pytest

from blockedit import DocBuilder, Editor, EditorState, ExtensionManager, Selection, find_text


@pytest.fixture
def manager():
    return ExtensionManager()


@pytest.fixture
def schema(manager):
    # shared with every default Editor
    return manager.schema


@pytest.fixture
def b(schema):
    return DocBuilder(schema)


@pytest.fixture
def make_editor():
    """Editor with the cursor (or selection) placed at the given text."""
    def factory(doc, anchor_text: str, head_text: str | None = None, **kwargs) -> Editor:
        anchor = find_text(doc, anchor_text)
        head = find_text(doc, head_text) if head_text is not None else anchor
        editor = Editor(doc, selection=(anchor, head), **kwargs)
        assert editor.doc is doc, "documents must be built from the editor schema"
        return editor
    return factory


@pytest.fixture
def make_tr():
    """Fresh transaction with the cursor (or selection) placed at the given text."""
    def factory(doc, anchor_text: str, head_text: str | None = None):
        anchor = find_text(doc, anchor_text)
        head = find_text(doc, head_text) if head_text is not None else anchor
        return EditorState.create(doc, Selection.create(doc, anchor, head)).tr
    return factory
