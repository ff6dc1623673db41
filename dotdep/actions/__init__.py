from dotdep.actions.base import BaseAction
from dotdep.actions.command import CommandAction, RevertibleCommandAction, command
from dotdep.actions.download import DownloadAction, download
from dotdep.actions.remove import RemoveAction, remove
from dotdep.actions.symlink import SymlinkAction, symlink

__all__ = [
    "BaseAction",
    "CommandAction",
    "DownloadAction",
    "RemoveAction",
    "RevertibleCommandAction",
    "SymlinkAction",
    "command",
    "download",
    "remove",
    "symlink",
]
