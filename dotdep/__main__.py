import asyncio
import logging
from pathlib import Path
from typing import Callable

import click
from rich.console import Console

from dotdep.constants import DEFAULT_MANIFEST_FILENAME
from dotdep.errors import DotdepError
from dotdep.manifest import build_actions, load_manifest
from dotdep.models import Action
from dotdep.runner import ActionRunner
from dotdep.tui import DeployConsoleUI


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s - %(message)s",
    )


def _manifest_option() -> Callable:
    return click.option(
        "-f",
        "--file",
        "manifest_path",
        type=click.Path(path_type=Path, dir_okay=False),
        default=Path(DEFAULT_MANIFEST_FILENAME),
        show_default=True,
        help="Manifest describing the actions.",
    )


def _apply_options(func: Callable) -> Callable:
    func = click.option(
        "--stop-on-error", is_flag=True, help="Stop at the first failed action."
    )(func)
    func = click.option(
        "-y", "--yes", is_flag=True, help="Apply without asking for confirmation."
    )(func)
    return _manifest_option()(func)


def _load_actions(ui: DeployConsoleUI, manifest_path: Path) -> list[Action]:
    try:
        manifest = load_manifest(manifest_path)
        actions = build_actions(manifest)
    except DotdepError as exc:
        raise click.ClickException(str(exc))
    ui.render_manifest(str(manifest.path), len(actions))
    return actions


def _plan_then_apply(ui: DeployConsoleUI, runner: ActionRunner, yes: bool) -> None:
    plan_report = asyncio.run(runner.plan())
    ui.render_plan(plan_report)

    if not runner.actions:
        return
    if not yes and not click.confirm("Do you want to apply these changes?", default=False):
        ui.render_aborted()
        return

    apply_report = asyncio.run(runner.apply())
    ui.render_apply_result(apply_report)

    if apply_report.failed:
        raise click.exceptions.Exit(1)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Python logging level.",
)
def cli(log_level: str) -> None:
    """Plan, apply and revert idempotent deployment actions."""
    configure_logging(log_level)


@cli.command(help="Dry-run every action and show what would happen.")
@_manifest_option()
def plan(manifest_path: Path) -> None:
    ui = DeployConsoleUI(Console())
    actions = _load_actions(ui, manifest_path)

    report = asyncio.run(ActionRunner(actions).plan())
    ui.render_plan(report)

    if report.failed:
        raise click.exceptions.Exit(1)


@cli.command(help="Plan, confirm and apply every action in order.")
@_apply_options
def apply(manifest_path: Path, yes: bool, stop_on_error: bool) -> None:
    ui = DeployConsoleUI(Console())
    actions = _load_actions(ui, manifest_path)
    _plan_then_apply(ui, ActionRunner(actions, stop_on_error=stop_on_error), yes)


@cli.command(help="Undo revertible actions, last one first.")
@_apply_options
def revert(manifest_path: Path, yes: bool, stop_on_error: bool) -> None:
    ui = DeployConsoleUI(Console())
    actions = _load_actions(ui, manifest_path)
    _plan_then_apply(
        ui, ActionRunner.reverted(actions, stop_on_error=stop_on_error), yes
    )


def main() -> int:
    try:
        rv = cli(standalone_mode=False)
    except click.exceptions.Abort:
        return 1
    except click.ClickException as exc:
        exc.show()
        return 2
    # click returns the Exit code instead of raising it when not standalone.
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
