"""Tests for selections, states and transactions."""
import pytest

from blockedit import EditorState, Selection, SelectionError
from blockedit.state import same_mark_set


class TestSelection:
    """Tests for text selections."""

    def test_out_of_range(self, b):
        doc = b.doc(b.paragraph("foo"))

        with pytest.raises(SelectionError):
            Selection.create(doc, 99)
        with pytest.raises(SelectionError):
            Selection.create(doc, 1, -1)

    def test_snaps_into_text(self, b):
        doc = b.doc(b.bullet_list(b.list_item(b.paragraph("a"))))

        selection = Selection.create(doc, 0)
        assert selection.head == 3
        assert selection.resolved_from.parent.type.name == "paragraph"

    def test_ordered_ends(self, b):
        doc = b.doc(b.paragraph("one"), b.paragraph("two"))

        selection = Selection.create(doc, 8, 2)
        assert selection.from_ == 2
        assert selection.to == 8
        assert not selection.empty

    def test_equality(self, b):
        doc = b.doc(b.paragraph("foo"))

        assert Selection.create(doc, 2) == Selection.create(doc, 2)
        assert Selection.create(doc, 2) != Selection.create(doc, 3)
        assert Selection.create(doc, 1, 3).to_json() == {"anchor": 1, "head": 3}


class TestTransaction:
    """Tests for the pending transaction."""

    def test_selection_follows_steps(self, b):
        doc = b.doc(b.paragraph("foo"))
        tr = EditorState.create(doc, Selection.create(doc, 2)).tr

        tr.insert_text("ab", 1)
        assert tr.doc.eq(b.doc(b.paragraph("abfoo")))
        assert tr.selection.head == 3

    def test_map_from(self, b):
        doc = b.doc(b.paragraph("foo"))
        tr = EditorState.create(doc).tr

        tr.insert_text("ab", 1)
        assert tr.map_from(0, 1) == 3
        assert tr.map_from(1, 1) == 1

    def test_stored_marks_used_then_dropped(self, b, schema):
        doc = b.doc(b.paragraph("foo"))
        tr = EditorState.create(doc, Selection.create(doc, 1)).tr
        tr.set_stored_marks([schema.marks["bold"].create()])

        assert [mark.type.name for mark in tr.stored_marks] == ["bold"]
        tr.insert_text("x")
        assert tr.doc.first_child.first_child.text == "x"
        assert [mark.type.name for mark in tr.doc.first_child.first_child.marks] == ["bold"]
        assert tr.stored_marks is None

    def test_ensure_marks_skips_matching_marks(self, b, schema):
        doc = b.doc(b.paragraph(b.text("foo", "bold")))
        tr = EditorState.create(doc, Selection.create(doc, 2)).tr

        tr.ensure_marks([schema.marks["bold"].create()])
        assert tr.stored_marks is None

        tr.ensure_marks([])
        assert tr.stored_marks == ()

    def test_empty_text_deletes_selection(self, b):
        doc = b.doc(b.paragraph("foo"))
        tr = EditorState.create(doc, Selection.create(doc, 1, 3)).tr

        tr.insert_text("")
        assert tr.doc.eq(b.doc(b.paragraph("o")))

    def test_fork_is_independent(self, b):
        doc = b.doc(b.paragraph("foo"))
        tr = EditorState.create(doc, Selection.create(doc, 1)).tr

        draft = tr.fork()
        draft.insert_text("x")
        assert tr.doc is doc
        assert len(tr.steps) == 0
        assert draft.doc.eq(b.doc(b.paragraph("xfoo")))

    def test_absorb_replays_draft(self, b):
        doc = b.doc(b.paragraph("foo"))
        tr = EditorState.create(doc, Selection.create(doc, 1)).tr

        draft = tr.fork()
        draft.insert_text("x")
        tr.absorb(draft)
        assert tr.doc.eq(draft.doc)
        assert len(tr.steps) == 1
        assert tr.selection.head == 2


class TestEditorState:
    """Tests for immutable editor states."""

    def test_apply(self, b):
        doc = b.doc(b.paragraph("foo"))
        state = EditorState.create(doc)
        tr = state.tr
        tr.insert_text("x")

        new_state = state.apply(tr)
        assert state.doc is doc
        assert new_state.doc.eq(b.doc(b.paragraph("xfoo")))
        assert new_state.selection.head == 2

    def test_same_mark_set(self, schema):
        bold = schema.marks["bold"].create()
        italic = schema.marks["italic"].create()

        assert same_mark_set([bold], [schema.marks["bold"].create()])
        assert not same_mark_set([bold], [bold, italic])
        assert not same_mark_set([bold], [italic])
