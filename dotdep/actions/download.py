import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Optional

import httpx

from dotdep.actions.base import BaseAction, describe_error
from dotdep.actions.remove import RemoveAction
from dotdep.constants import HTTP_USER_AGENT
from dotdep.errors import InvalidActionConfigError
from dotdep.models import Action, ActionResult
from dotdep.utils import resolve_path


logger = logging.getLogger(__name__)


def parse_last_modified(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def local_mtime(path: str) -> datetime:
    return datetime.fromtimestamp(os.stat(path).st_mtime, tz=timezone.utc)


def _http_client() -> httpx.AsyncClient:
    # No timeout: a stalled server stalls the action.
    return httpx.AsyncClient(
        follow_redirects=True,
        headers={"User-Agent": HTTP_USER_AGENT},
        timeout=None,
    )


def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


@dataclass(frozen=True)
class DownloadAction(BaseAction):
    """Download ``url`` to ``dest``; reverted by removing ``dest``.

    With ``timestamping`` an existing destination is replaced only when the
    server reports a newer ``Last-Modified`` than the local modification time.
    A response without ``Last-Modified`` always downloads.
    """

    url: str
    dest: str
    overwrite: bool = False
    timestamping: bool = False

    def __post_init__(self) -> None:
        if not self.url:
            raise InvalidActionConfigError("download", "url must not be empty")
        if not self.dest:
            raise InvalidActionConfigError("download", "dest must not be empty")
        object.__setattr__(self, "dest", os.fspath(self.dest))

    @property
    def title(self) -> str:
        return f"Download: {self.url} -> {self.dest}"

    async def check_preconditions(self) -> ActionResult:
        resolved_dest = resolve_path(self.dest)
        # A dangling symlink still occupies the destination.
        dest_exists = os.path.lexists(resolved_dest)

        if dest_exists and not self.overwrite and not self.timestamping:
            return ActionResult.error(f"Destination already exists: {self.dest}")

        try:
            async with _http_client() as client:
                response = await client.head(self.url)
        except Exception as exc:
            logger.debug("HEAD %s failed: %s", self.url, exc)
            return ActionResult.error(f"Failed to check URL: {describe_error(exc)}")

        if not response.is_success:
            return ActionResult.error(f"URL is not available: {_status_line(response)}")

        if self.timestamping and os.path.exists(resolved_dest):
            remote = parse_last_modified(response.headers.get("last-modified"))
            if remote is not None and local_mtime(resolved_dest) >= remote:
                return ActionResult.skip(f"Local file is up to date: {self.dest}")

        return ActionResult.success()

    async def perform_effect(self) -> ActionResult:
        resolved_dest = resolve_path(self.dest)
        os.makedirs(os.path.dirname(resolved_dest), exist_ok=True)

        async with _http_client() as client:
            response = await client.get(self.url)
        if not response.is_success:
            return ActionResult.error(f"Failed to fetch: {_status_line(response)}")

        logger.debug("writing %d bytes to %s", len(response.content), resolved_dest)
        await asyncio.to_thread(Path(resolved_dest).write_bytes, response.content)
        return ActionResult.success()

    def get_revert_action(self) -> Action:
        return RemoveAction(self.dest, recursive=False)


def download(
    url: str,
    dest: str,
    *,
    overwrite: bool = False,
    timestamping: bool = False,
) -> DownloadAction:
    return DownloadAction(url, dest, overwrite=overwrite, timestamping=timestamping)
