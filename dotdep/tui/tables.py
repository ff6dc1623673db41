from rich.markup import escape
from rich.panel import Panel
from rich.table import Column, Table

from dotdep.runner import RunReport
from dotdep.tui.enums import ACTION_STATUS_STYLE, UIStyle
from dotdep.utils import compact_home_paths_in_text


class ResultTable:
    @staticmethod
    def summary_block(report: RunReport):
        chips = [f"{key}={value}" for key, value in report.counts().items() if value > 0]
        if not chips:
            chips = ["none"]

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Mode", report.mode)
        table.add_row("Actions", str(len(report.outcomes)))
        table.add_row("Statuses", "  ".join(chips))
        return table

    @staticmethod
    def outcomes_table(report: RunReport) -> Table:
        table = Table(
            Column(header="Status", width=8),
            Column(header="Action", overflow="fold", ratio=2),
            Column(header="Detail", overflow="fold", ratio=3),
            expand=True,
            header_style="bold",
        )

        for outcome in report.outcomes:
            status = outcome.result.status
            style = ACTION_STATUS_STYLE[status]
            detail = outcome.result.detail or ""
            table.add_row(
                f"[{style}]{status.value}[/{style}]",
                escape(compact_home_paths_in_text(outcome.title)),
                escape(compact_home_paths_in_text(detail)),
            )
        return table


class ApplyTable:
    @staticmethod
    def stats_panel(report: RunReport) -> Panel:
        counts = report.counts()
        table = Table(show_header=False, box=None)
        for key, value in counts.items():
            table.add_row(f"[bold]{key}[/bold]", str(value))
        if report.stopped_early:
            table.add_row("[bold]stopped[/bold]", "after first error")
        return Panel(
            table,
            title=report.mode,
            border_style=UIStyle.GREEN.value if report.failed == 0 else UIStyle.RED.value,
        )
