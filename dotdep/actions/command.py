import asyncio
import logging
import os
import shutil
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Union

from dotdep.actions.base import BaseAction
from dotdep.errors import InvalidActionConfigError
from dotdep.models import Action, ActionResult, OutputMode
from dotdep.utils import expand_home, resolve_path


logger = logging.getLogger(__name__)


def is_command_available(cmd: str) -> bool:
    return shutil.which(expand_home(cmd)) is not None


def _normalize_command(value: Sequence[str], label: str) -> tuple[str, ...]:
    if isinstance(value, (str, bytes)):
        raise InvalidActionConfigError(
            "command", f"{label} must be a list of strings, not a string"
        )
    normalized = tuple(str(part) for part in value)
    if not normalized:
        raise InvalidActionConfigError("command", f"{label} must not be empty")
    return normalized


def _normalize_mode(value: Union[OutputMode, str], label: str) -> OutputMode:
    try:
        return OutputMode(value)
    except ValueError:
        choices = ", ".join(mode.value for mode in OutputMode)
        raise InvalidActionConfigError(
            "command", f"{label} must be one of {choices}, got {value!r}"
        ) from None


def _stream(mode: OutputMode) -> Optional[int]:
    return asyncio.subprocess.PIPE if mode == OutputMode.CAPTURE else None


def _captured_section(label: str, data: Optional[bytes]) -> Optional[str]:
    if not data:
        return None
    text = data.decode("utf-8", errors="replace").strip()
    if not text:
        return None
    return f"{label}:\n{text}"


@dataclass(frozen=True)
class CommandAction(BaseAction):
    command: tuple[str, ...]
    stdout: OutputMode = OutputMode.CAPTURE
    stderr: OutputMode = OutputMode.CAPTURE
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "command", _normalize_command(self.command, "command"))
        object.__setattr__(self, "stdout", _normalize_mode(self.stdout, "stdout"))
        object.__setattr__(self, "stderr", _normalize_mode(self.stderr, "stderr"))
        object.__setattr__(
            self,
            "env",
            MappingProxyType({str(key): str(value) for key, value in self.env.items()}),
        )
        if self.cwd is not None:
            object.__setattr__(self, "cwd", os.fspath(self.cwd))

    @property
    def title(self) -> str:
        return f"Run: {' '.join(self.command)}"

    async def check_preconditions(self) -> ActionResult:
        cmd = self.command[0]
        if not is_command_available(cmd):
            return ActionResult.error(f"Command not found: {cmd}")
        return ActionResult.success()

    async def perform_effect(self) -> ActionResult:
        program = expand_home(self.command[0])
        cwd = resolve_path(self.cwd) if self.cwd else None
        logger.debug("spawning %s (cwd=%s)", self.command, cwd or os.getcwd())

        process = await asyncio.create_subprocess_exec(
            program,
            *self.command[1:],
            stdout=_stream(self.stdout),
            stderr=_stream(self.stderr),
            env={**os.environ, **self.env},
            cwd=cwd,
        )
        stdout, stderr = await process.communicate()

        sections = [
            section
            for section in (
                _captured_section("stdout", stdout),
                _captured_section("stderr", stderr),
            )
            if section is not None
        ]
        detail = "\n".join(sections) or None

        if process.returncode == 0:
            return ActionResult.success(detail)
        logger.debug("%s exited with rc=%s", self.title, process.returncode)
        return ActionResult.error(detail or f"Command exited with code {process.returncode}")


@dataclass(frozen=True)
class RevertibleCommandAction(CommandAction):
    revert_command: tuple[str, ...] = field(kw_only=True)

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(
            self,
            "revert_command",
            _normalize_command(self.revert_command, "revert_command"),
        )

    def get_revert_action(self) -> Action:
        return CommandAction(
            self.revert_command,
            stdout=self.stdout,
            stderr=self.stderr,
            env=self.env,
            cwd=self.cwd,
        )


def command(
    command: Sequence[str],
    *,
    revert_command: Optional[Sequence[str]] = None,
    stdout: Union[OutputMode, str] = OutputMode.CAPTURE,
    stderr: Union[OutputMode, str] = OutputMode.CAPTURE,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
) -> CommandAction:
    """Create a command action.

    Passing ``revert_command`` yields a :class:`RevertibleCommandAction` whose
    revert runs that vector with the same output modes, environment and
    working directory. ``env`` entries are layered over the parent environment.
    """
    if revert_command is None:
        return CommandAction(
            command, stdout=stdout, stderr=stderr, env=env or {}, cwd=cwd
        )
    return RevertibleCommandAction(
        command,
        stdout=stdout,
        stderr=stderr,
        env=env or {},
        cwd=cwd,
        revert_command=revert_command,
    )
