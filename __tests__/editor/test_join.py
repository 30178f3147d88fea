"""Tests for merging lists with same-typed neighbours."""
from blockedit.commands import join_list_backwards, join_list_forwards


def two_lists(b, first="bullet_list", second="bullet_list"):
    return b.doc(
        b.node(first, b.list_item(b.paragraph("one"))),
        b.node(second, b.list_item(b.paragraph("two"))),
    )


class TestJoinBackwards:
    """Tests for joining with the previous sibling."""

    def test_joins_previous_list(self, b, schema, make_tr):
        tr = make_tr(two_lists(b), "two")

        assert join_list_backwards(tr, schema.nodes["bullet_list"])
        assert tr.doc.eq(b.doc(b.bullet_list(
            b.list_item(b.paragraph("one")),
            b.list_item(b.paragraph("two")),
        )))

    def test_cursor_stays_in_text(self, b, schema, make_tr):
        tr = make_tr(two_lists(b), "two")
        join_list_backwards(tr, schema.nodes["bullet_list"])

        assert tr.selection.resolved_from.parent.text_content == "two"

    def test_no_previous_node(self, b, schema, make_tr):
        tr = make_tr(two_lists(b), "one")

        assert join_list_backwards(tr, schema.nodes["bullet_list"])
        assert len(tr.steps) == 0

    def test_previous_list_of_other_type(self, b, schema, make_tr):
        tr = make_tr(two_lists(b, first="ordered_list"), "two")

        assert join_list_backwards(tr, schema.nodes["bullet_list"])
        assert len(tr.steps) == 0

    def test_no_list_at_selection(self, b, schema, make_tr):
        doc = b.doc(b.bullet_list(b.list_item(b.paragraph("one"))), b.paragraph("two"))
        tr = make_tr(doc, "two")

        assert join_list_backwards(tr, schema.nodes["bullet_list"])
        assert len(tr.steps) == 0


class TestJoinForwards:
    """Tests for joining with the next sibling."""

    def test_joins_next_list(self, b, schema, make_tr):
        tr = make_tr(two_lists(b), "one")

        assert join_list_forwards(tr, schema.nodes["bullet_list"])
        assert tr.doc.child_count == 1
        assert tr.doc.first_child.child_count == 2

    def test_no_next_node(self, b, schema, make_tr):
        tr = make_tr(two_lists(b), "two")

        assert join_list_forwards(tr, schema.nodes["bullet_list"])
        assert len(tr.steps) == 0

    def test_next_list_of_other_type(self, b, schema, make_tr):
        tr = make_tr(two_lists(b, second="ordered_list"), "one")

        assert join_list_forwards(tr, schema.nodes["bullet_list"])
        assert len(tr.steps) == 0
