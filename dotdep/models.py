from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, TypeGuard


class ActionStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    SKIP = "skip"


class OutputMode(str, Enum):
    INHERIT = "inherit"
    CAPTURE = "capture"


@dataclass(frozen=True)
class ActionResult:
    status: ActionStatus
    detail: Optional[str] = None

    @classmethod
    def success(cls, detail: Optional[str] = None) -> "ActionResult":
        return cls(ActionStatus.SUCCESS, detail)

    @classmethod
    def error(cls, detail: str) -> "ActionResult":
        return cls(ActionStatus.ERROR, detail)

    @classmethod
    def skip(cls, detail: str) -> "ActionResult":
        return cls(ActionStatus.SKIP, detail)

    @property
    def ok(self) -> bool:
        return self.status != ActionStatus.ERROR

    def as_dict(self) -> dict[str, Optional[str]]:
        return {"status": self.status.value, "detail": self.detail}


class Action(Protocol):
    @property
    def title(self) -> str: ...

    async def plan(self) -> ActionResult: ...

    async def apply(self) -> ActionResult: ...


class RevertibleAction(Action, Protocol):
    def get_revert_action(self) -> Action: ...


def is_revertible_action(action: Action) -> TypeGuard[RevertibleAction]:
    return callable(getattr(action, "get_revert_action", None))
