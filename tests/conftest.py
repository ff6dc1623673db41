import sys
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from dotdep.models import ActionResult, ActionStatus  # noqa: E402


PROXY_ENV_VARS = (
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
    "http_proxy",
    "https_proxy",
    "all_proxy",
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("USERPROFILE", raising=False)
    return home


# --- local HTTP server ---


class _RecordingServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.requests: list[tuple[str, str]] = []


class _Handler(BaseHTTPRequestHandler):
    server: _RecordingServer

    def do_HEAD(self) -> None:
        self._respond(include_body=False)

    def do_GET(self) -> None:
        self._respond(include_body=True)

    def log_message(self, format: str, *args: Any) -> None:
        pass

    def _respond(self, include_body: bool) -> None:
        self.server.requests.append((self.command, self.path))
        url = urlsplit(self.path)
        query = parse_qs(url.query)

        if url.path == "/hello":
            headers: dict[str, str] = {}
            last_modified = query.get("last-modified")
            if last_modified:
                stamp = datetime.strptime(last_modified[0], "%Y-%m-%d").replace(
                    tzinfo=timezone.utc
                )
                headers["Last-Modified"] = format_datetime(stamp, usegmt=True)
            self._send(200, b"hello", headers, include_body)
        elif url.path == "/head-only" and self.command == "HEAD":
            self._send(200, b"", {}, include_body)
        elif url.path == "/head-only":
            self._send(500, b"boom", {}, include_body)
        else:
            self._send(404, b"Not Found", {}, include_body)

    def _send(
        self, status: int, body: bytes, headers: dict[str, str], include_body: bool
    ) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(body)))
        for key, value in headers.items():
            self.send_header(key, value)
        self.end_headers()
        if include_body:
            self.wfile.write(body)


@dataclass
class HttpServer:
    url: str
    requests: list[tuple[str, str]] = field(default_factory=list)

    def methods_for(self, path: str) -> list[str]:
        return [method for method, requested in self.requests if requested.startswith(path)]


@pytest.fixture
def http_server(monkeypatch):
    for name in PROXY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    server = _RecordingServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield HttpServer(url=f"http://{host}:{port}", requests=server.requests)
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


# --- fake actions ---


class RecordingAction:
    def __init__(self, name: str, status: ActionStatus = ActionStatus.SUCCESS) -> None:
        self.name = name
        self.status = status
        self.calls: list[str] = []

    @property
    def title(self) -> str:
        return f"Fake: {self.name}"

    async def plan(self) -> ActionResult:
        self.calls.append("plan")
        return ActionResult(self.status, f"planned {self.name}")

    async def apply(self) -> ActionResult:
        self.calls.append("apply")
        return ActionResult(self.status, f"applied {self.name}")


class RevertibleRecordingAction(RecordingAction):
    def __init__(
        self,
        name: str,
        status: ActionStatus = ActionStatus.SUCCESS,
        revert: Optional[RecordingAction] = None,
    ) -> None:
        super().__init__(name, status)
        self.revert = revert or RecordingAction(f"revert-{name}")

    def get_revert_action(self) -> RecordingAction:
        return self.revert


@pytest.fixture
def make_action():
    def _make(
        name: str,
        status: ActionStatus = ActionStatus.SUCCESS,
        revertible: bool = False,
    ) -> RecordingAction:
        if revertible:
            return RevertibleRecordingAction(name, status)
        return RecordingAction(name, status)

    return _make


@pytest.fixture
def cli_runner(isolated_home: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(isolated_home))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
