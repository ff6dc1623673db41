import asyncio
import logging
import os
import shutil
from dataclasses import dataclass

from dotdep.actions.base import BaseAction
from dotdep.errors import InvalidActionConfigError
from dotdep.models import ActionResult
from dotdep.utils import is_real_directory, resolve_path


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoveAction(BaseAction):
    """Remove a file, symlink or (with ``recursive``) a directory tree.

    Not revertible: nothing is backed up before deletion.
    """

    path: str
    recursive: bool = False

    def __post_init__(self) -> None:
        if not self.path:
            raise InvalidActionConfigError("remove", "path must not be empty")
        object.__setattr__(self, "path", os.fspath(self.path))

    @property
    def title(self) -> str:
        return f"Remove: {self.path}"

    async def check_preconditions(self) -> ActionResult:
        resolved = resolve_path(self.path)

        # Dangling symlinks are still removable.
        if not os.path.lexists(resolved):
            return ActionResult.skip(f"File not found: {self.path}")

        if is_real_directory(resolved) and not self.recursive:
            return ActionResult.error(
                f"Path is a directory (use recursive option to remove): {self.path}"
            )

        return ActionResult.success()

    async def perform_effect(self) -> ActionResult:
        resolved = resolve_path(self.path)
        if is_real_directory(resolved):
            logger.debug("removing tree %s", resolved)
            await asyncio.to_thread(shutil.rmtree, resolved)
        else:
            logger.debug("unlinking %s", resolved)
            await asyncio.to_thread(os.unlink, resolved)
        return ActionResult.success()


def remove(path: str, *, recursive: bool = False) -> RemoveAction:
    return RemoveAction(path, recursive=recursive)
