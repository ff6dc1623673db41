from typing import Optional

from rich.console import Console, RenderableType
from rich.markup import escape
from rich.panel import Panel

from dotdep.runner import RunReport
from dotdep.tui.enums import UIStyle
from dotdep.tui.tables import ApplyTable, ResultTable
from dotdep.utils import compact_home_path


def _panel(title: str, body: RenderableType, style: str) -> Panel:
    return Panel(body, title=title, border_style=style, padding=(0, 1))


class DeployConsoleUI:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def render_manifest(self, path: str, count: int) -> None:
        body = f"{escape(compact_home_path(path))}\n{count} action(s)"
        self.console.print(_panel("manifest", body, UIStyle.DIM.value))

    def render_plan(self, report: RunReport) -> None:
        self.console.print(
            _panel("plan overview", ResultTable.summary_block(report), UIStyle.BLUE.value)
        )
        if not report.outcomes:
            self.console.print(_panel("actions", "No actions to run.", UIStyle.DIM.value))
            return
        self.console.print(
            _panel("actions", ResultTable.outcomes_table(report), UIStyle.CYAN.value)
        )

    def render_apply_result(self, report: RunReport) -> None:
        if report.outcomes:
            self.console.print(
                _panel("results", ResultTable.outcomes_table(report), UIStyle.CYAN.value)
            )
        self.console.print(ApplyTable.stats_panel(report))

    def render_aborted(self) -> None:
        self.console.print(_panel("apply", "Aborted.", UIStyle.YELLOW.value))
