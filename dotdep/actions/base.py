import logging
from abc import ABC, abstractmethod

from dotdep.models import ActionResult, ActionStatus


logger = logging.getLogger(__name__)


def describe_error(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class BaseAction(ABC):
    """Preflight/effect template shared by the built-in actions.

    ``plan`` only runs the preflight check. ``apply`` re-runs the same check and
    returns its result unchanged unless it is a success, so an action never
    mutates anything ``plan`` would have flagged. Exceptions raised by either
    phase are reported as error results instead of propagating.
    """

    @property
    @abstractmethod
    def title(self) -> str:
        raise NotImplementedError

    @abstractmethod
    async def check_preconditions(self) -> ActionResult:
        raise NotImplementedError

    @abstractmethod
    async def perform_effect(self) -> ActionResult:
        raise NotImplementedError

    async def plan(self) -> ActionResult:
        return await self._preflight()

    async def apply(self) -> ActionResult:
        state = await self._preflight()
        if state.status != ActionStatus.SUCCESS:
            return state
        try:
            result = await self.perform_effect()
        except Exception as exc:
            logger.debug("%s failed: %s", self.title, exc, exc_info=True)
            return ActionResult.error(f"An error occurred: {describe_error(exc)}")
        logger.debug("%s -> %s", self.title, result.status.value)
        return result

    async def _preflight(self) -> ActionResult:
        try:
            result = await self.check_preconditions()
        except Exception as exc:
            logger.debug("%s preflight failed: %s", self.title, exc, exc_info=True)
            return ActionResult.error(f"An error occurred: {describe_error(exc)}")
        logger.debug("%s preflight -> %s", self.title, result.status.value)
        return result
