import asyncio
import logging
import os
import shutil
from dataclasses import dataclass

from dotdep.actions.base import BaseAction
from dotdep.actions.remove import RemoveAction
from dotdep.errors import InvalidActionConfigError
from dotdep.models import Action, ActionResult
from dotdep.utils import is_real_directory, resolve_path


logger = logging.getLogger(__name__)


def _points_to_same_target(src: str, dest: str) -> bool:
    try:
        return os.path.realpath(dest, strict=True) == os.path.realpath(src, strict=True)
    except OSError:
        return False


@dataclass(frozen=True)
class SymlinkAction(BaseAction):
    src: str
    dest: str
    overwrite: bool = False

    def __post_init__(self) -> None:
        if not self.src:
            raise InvalidActionConfigError("symlink", "src must not be empty")
        if not self.dest:
            raise InvalidActionConfigError("symlink", "dest must not be empty")
        object.__setattr__(self, "src", os.fspath(self.src))
        object.__setattr__(self, "dest", os.fspath(self.dest))

    @property
    def title(self) -> str:
        return f"Symlink: {self.src} -> {self.dest}"

    async def check_preconditions(self) -> ActionResult:
        resolved_src = resolve_path(self.src)
        resolved_dest = resolve_path(self.dest)

        src_exists = os.path.exists(resolved_src)
        dest_exists = os.path.lexists(resolved_dest)

        if dest_exists and _points_to_same_target(resolved_src, resolved_dest):
            return ActionResult.skip("Symlink already exists and is correct.")

        if not src_exists:
            return ActionResult.error(f"Source not found: {self.src}")

        if dest_exists and not self.overwrite:
            return ActionResult.error(
                f"Destination already exists and is not the correct symlink: {self.dest}"
            )

        return ActionResult.success()

    async def perform_effect(self) -> ActionResult:
        resolved_src = resolve_path(self.src)
        resolved_dest = resolve_path(self.dest)

        os.makedirs(os.path.dirname(resolved_dest), exist_ok=True)

        if os.path.lexists(resolved_dest):
            logger.debug("replacing existing %s", resolved_dest)
            if is_real_directory(resolved_dest):
                await asyncio.to_thread(shutil.rmtree, resolved_dest)
            else:
                os.unlink(resolved_dest)

        os.symlink(
            resolved_src,
            resolved_dest,
            target_is_directory=os.path.isdir(resolved_src),
        )
        return ActionResult.success()

    def get_revert_action(self) -> Action:
        return RemoveAction(self.dest, recursive=False)


def symlink(src: str, dest: str, *, overwrite: bool = False) -> SymlinkAction:
    return SymlinkAction(src, dest, overwrite=overwrite)
