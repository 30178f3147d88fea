"""Tests for running command plans."""
from blockedit import ExecutionMode, Plan, PlanExecutor, can_apply


def insert(text):
    def step(tr):
        tr.insert_text(text)
        return True
    return step


def fail(tr):
    return False


class TestPlan:
    """Tests for building plans."""

    def test_builder(self):
        plan = Plan().then("a", fail).cosmetic("b", fail).then("c", fail, commit_only=True)

        assert plan.names == ["a", "b", "c"]
        assert len(plan) == 3
        assert [step.mandatory for step in plan] == [True, False, True]
        assert [step.commit_only for step in plan] == [False, False, True]
        assert repr(plan) == "Plan(a -> b -> c)"


class TestPlanExecutor:
    """Tests for atomic plan execution."""

    def test_commit_applies_steps(self, b, make_tr):
        tr = make_tr(b.doc(b.paragraph("foo")), "foo")
        plan = Plan().then("insert", insert("x"))

        assert PlanExecutor(ExecutionMode.COMMIT).execute(plan, tr)
        assert tr.doc.eq(b.doc(b.paragraph("xfoo")))

    def test_mandatory_failure_leaves_nothing_behind(self, b, make_tr):
        doc = b.doc(b.paragraph("foo"))
        tr = make_tr(doc, "foo")
        ran = []

        def later(tr):
            ran.append(True)
            return True

        plan = Plan().then("insert", insert("x")).then("fail", fail).then("later", later)
        assert not PlanExecutor(ExecutionMode.COMMIT).execute(plan, tr)
        assert tr.doc is doc
        assert len(tr.steps) == 0
        assert ran == []

    def test_cosmetic_failure_does_not_abort(self, b, make_tr):
        tr = make_tr(b.doc(b.paragraph("foo")), "foo")
        plan = Plan().cosmetic("fail", fail).then("insert", insert("x"))

        assert PlanExecutor(ExecutionMode.COMMIT).execute(plan, tr)
        assert tr.doc.eq(b.doc(b.paragraph("xfoo")))

    def test_feasibility_does_not_mutate(self, b, make_tr):
        doc = b.doc(b.paragraph("foo"))
        tr = make_tr(doc, "foo")

        assert PlanExecutor(ExecutionMode.FEASIBILITY).execute(Plan().then("insert", insert("x")), tr)
        assert tr.doc is doc
        assert len(tr.steps) == 0

    def test_commit_only_skipped_in_feasibility(self, b, make_tr):
        tr = make_tr(b.doc(b.paragraph("foo")), "foo")
        plan = Plan().then("insert", insert("x")).then("fail", fail, commit_only=True)

        assert can_apply(plan, tr)
        assert not PlanExecutor(ExecutionMode.COMMIT).execute(plan, tr)

    def test_steps_see_earlier_changes(self, b, make_tr):
        tr = make_tr(b.doc(b.paragraph("foo")), "foo")
        seen = []

        def record(tr):
            seen.append(tr.doc.first_child.text_content)
            return True

        plan = Plan().then("insert", insert("x")).then("record", record)
        assert can_apply(plan, tr)
        assert seen == ["xfoo"]
