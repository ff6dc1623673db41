import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from dotdep.models import Action, ActionResult, ActionStatus
from dotdep.utils import get_revert_actions


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionOutcome:
    title: str
    result: ActionResult

    def as_dict(self) -> dict[str, Optional[str]]:
        return {"title": self.title, **self.result.as_dict()}


@dataclass
class RunReport:
    mode: str
    outcomes: list[ActionOutcome] = field(default_factory=list)
    stopped_early: bool = False

    @property
    def failed(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.result.ok)

    def counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in ActionStatus}
        counts.update(Counter(outcome.result.status.value for outcome in self.outcomes))
        return counts


class ActionRunner:
    """Drive ``plan``/``apply`` over an ordered list of actions.

    Actions are awaited one at a time in list order. There is no dependency
    handling; callers order the list themselves.
    """

    def __init__(self, actions: Iterable[Action], stop_on_error: bool = False) -> None:
        self.actions: list[Action] = list(actions)
        self.stop_on_error = stop_on_error

    @classmethod
    def reverted(
        cls, actions: Iterable[Action], stop_on_error: bool = False
    ) -> "ActionRunner":
        return cls(get_revert_actions(actions), stop_on_error=stop_on_error)

    async def plan(self) -> RunReport:
        report = RunReport(mode="plan")
        for action in self.actions:
            result = await action.plan()
            report.outcomes.append(ActionOutcome(action.title, result))
        return report

    async def apply(self) -> RunReport:
        report = RunReport(mode="apply")
        for index, action in enumerate(self.actions):
            result = await action.apply()
            logger.info("[%s] %s", result.status.value, action.title)
            report.outcomes.append(ActionOutcome(action.title, result))
            if not result.ok and self.stop_on_error:
                remaining = len(self.actions) - index - 1
                if remaining:
                    logger.warning(
                        "stopping after error; %d action(s) not applied", remaining
                    )
                    report.stopped_early = True
                break
        return report
