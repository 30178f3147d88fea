"""
Plan - Ordered command steps run against a transaction.

A Plan is a list of PlanSteps. PlanExecutor runs a plan in one of two modes
that share the exact same step logic:

- FEASIBILITY: answers "would this succeed?" without touching the caller's
  transaction.
- COMMIT: applies the plan. Either every mandatory step succeeds and the
  result is absorbed into the caller's transaction, or nothing is.

Steps always run on a forked draft, so a failing plan never leaves partial
changes behind.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterator

if TYPE_CHECKING:
    from ..extensions import ListCapabilities
    from ..state import Transaction


logger = logging.getLogger(__name__)


StepFn = Callable[["Transaction"], bool]


class ExecutionMode(str, Enum):
    FEASIBILITY = "feasibility"
    COMMIT = "commit"


@dataclass(frozen=True)
class PlanStep:
    """
    One step of a plan.

    Attributes:
        name: Label used in logs
        run: Step function; mutates the transaction and reports success
        mandatory: A failing mandatory step aborts the plan. Non-mandatory
            (cosmetic) steps never abort it.
        commit_only: Skipped during feasibility runs
    """
    name: str
    run: StepFn
    mandatory: bool = True
    commit_only: bool = False


@dataclass
class Plan:
    steps: list[PlanStep] = field(default_factory=list)

    def then(self, name: str, run: StepFn, *, mandatory: bool = True, commit_only: bool = False) -> Plan:
        self.steps.append(PlanStep(name, run, mandatory=mandatory, commit_only=commit_only))
        return self

    def cosmetic(self, name: str, run: StepFn) -> Plan:
        return self.then(name, run, mandatory=False)

    @property
    def names(self) -> list[str]:
        return [step.name for step in self.steps]

    def __iter__(self) -> Iterator[PlanStep]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __repr__(self) -> str:
        return f"Plan({' -> '.join(self.names)})"


class PlanExecutor:

    def __init__(self, mode: ExecutionMode = ExecutionMode.COMMIT):
        self.mode = mode

    @property
    def is_commit(self) -> bool:
        return self.mode is ExecutionMode.COMMIT

    def execute(self, plan: Plan, tr: "Transaction") -> bool:
        draft = tr.fork()
        if not self._run_steps(plan, draft):
            return False
        if self.is_commit:
            tr.absorb(draft)
        return True

    def _run_steps(self, plan: Plan, draft: "Transaction") -> bool:
        for step in plan:
            if step.commit_only and not self.is_commit:
                logger.debug("%s: skipping commit-only step %s", self.mode.value, step.name)
                continue
            ok = step.run(draft)
            if step.mandatory and not ok:
                logger.debug("%s: step %s failed, aborting %r", self.mode.value, step.name, plan)
                return False
            logger.debug("%s: step %s -> %s", self.mode.value, step.name, ok)
        return True


def can_apply(plan: Plan, tr: "Transaction") -> bool:
    """Check whether `plan` would succeed on `tr`, leaving `tr` untouched."""
    return PlanExecutor(ExecutionMode.FEASIBILITY).execute(plan, tr)


@dataclass
class CommandProps:
    """
    What a command gets to work with.

    Attributes:
        tr: The pending transaction
        capabilities: List/mark classification queries
        mode: Whether the command should only check or also apply
    """
    tr: "Transaction"
    capabilities: "ListCapabilities"
    mode: ExecutionMode = ExecutionMode.COMMIT

    @property
    def dispatch(self) -> bool:
        return self.mode is ExecutionMode.COMMIT

    @property
    def executor(self) -> PlanExecutor:
        return PlanExecutor(self.mode)


Command = Callable[[CommandProps], bool]
