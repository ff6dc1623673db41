"""Idempotent, revertible filesystem and process actions with plan/apply."""

from dotdep.actions import (
    CommandAction,
    DownloadAction,
    RemoveAction,
    RevertibleCommandAction,
    SymlinkAction,
    command,
    download,
    remove,
    symlink,
)
from dotdep.models import (
    Action,
    ActionResult,
    ActionStatus,
    OutputMode,
    RevertibleAction,
    is_revertible_action,
)
from dotdep.runner import ActionOutcome, ActionRunner, RunReport
from dotdep.utils import expand_home, get_revert_actions, resolve_path

__all__ = [
    "Action",
    "ActionOutcome",
    "ActionResult",
    "ActionRunner",
    "ActionStatus",
    "CommandAction",
    "DownloadAction",
    "OutputMode",
    "RemoveAction",
    "RevertibleAction",
    "RevertibleCommandAction",
    "RunReport",
    "SymlinkAction",
    "command",
    "download",
    "expand_home",
    "get_revert_actions",
    "is_revertible_action",
    "remove",
    "resolve_path",
    "symlink",
]
