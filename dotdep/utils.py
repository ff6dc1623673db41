import os
from pathlib import Path
from typing import Iterable, Optional, Union

from dotdep.constants import HOME_ENV_VARS, HOME_MARKER
from dotdep.models import Action, is_revertible_action


PathLike = Union[str, os.PathLike]


def home_dir() -> Optional[str]:
    for name in HOME_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def expand_home(path: PathLike) -> str:
    """Expand a leading ``~`` to the current user's home directory.

    Only ``~`` and ``~/...`` are expanded; ``~user`` forms are returned as-is.
    When no home directory is configured the path is returned unchanged.
    """
    text = os.fspath(path)
    if not text:
        return text
    home = home_dir()
    if home is None:
        return text
    if text == HOME_MARKER:
        return home
    for sep in {os.sep, "/"}:
        prefix = HOME_MARKER + sep
        if text.startswith(prefix):
            return os.path.join(home, text[len(prefix) :])
    return text


def resolve_path(path: PathLike, base_dir: Optional[PathLike] = None) -> str:
    expanded = expand_home(path)
    if base_dir is not None:
        return os.path.abspath(os.path.join(expand_home(base_dir), expanded))
    return os.path.abspath(expanded)


def get_revert_actions(actions: Iterable[Action]) -> list[Action]:
    """Build the undo list for ``actions``.

    Non-revertible actions are dropped. The result is reversed so the last
    applied action is undone first.
    """
    reverts = [
        action.get_revert_action()
        for action in actions
        if is_revertible_action(action)
    ]
    reverts.reverse()
    return reverts


def compact_home_path(path: PathLike) -> str:
    text = os.fspath(path)
    home = home_dir()
    if not home:
        return text
    home = home.rstrip(os.sep) or os.sep
    if text == home:
        return HOME_MARKER
    home_prefix = f"{home}{os.sep}"
    if text.startswith(home_prefix):
        return f"{HOME_MARKER}/{text[len(home_prefix):]}"
    return text


def compact_home_paths_in_text(text: str) -> str:
    home = home_dir()
    if not home:
        return text
    if text == home:
        return HOME_MARKER
    return text.replace(f"{home}{os.sep}", f"{HOME_MARKER}/")


def is_real_directory(path: PathLike) -> bool:
    return Path(path).is_dir() and not Path(path).is_symlink()
