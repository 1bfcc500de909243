"""
i3-scratchpad command line interface.

Usage:
    i3-scratchpad list [--filter F]... [--output text|json|tsv|csv]
    i3-scratchpad move [PATTERN] [--filter F]... [--all] [--all-floating] [--dry-run]
    i3-scratchpad show PATTERN [--filter F]... [--dry-run]
    i3-scratchpad summon PATTERN [--filter F]... [--geometry 60%x90%] [--dry-run]
    i3-scratchpad next [--dry-run]
    i3-scratchpad info
    i3-scratchpad hook pull-window PREV FOCUSED
    i3-scratchpad sticky add|remove|list|follow

Exit codes:
    0 - Success
    1 - Any reported error
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..config import ScratchpadSettings
from ..constants import HOME_WORKSPACES, MOVING_MARKER_PATH, SCRATCHPAD_WORKSPACE, STICKY_POLL_INTERVAL
from ..core.client import WindowManager
from ..core.dry_run import DryRunClient
from ..core.filters import apply_filters, check_properties, parse_filters
from ..core.i3_client import I3Client
from ..core.mover import Geometry
from ..core.orchestrator import ScratchpadOrchestrator
from ..core.querier import WindowQuerier
from ..errors import ScratchpadError
from ..logging_config import log_timing, null_logger, setup_logging
from ..models.output import OutputEvent
from ..services.hook import MovingMarker, PullWindowHook
from ..services.registry import StickyRegistry
from ..services.tracker import StickyTracker
from .output import OutputFormatter
from .validations import validate_all_non_empty


def print_error(message: str) -> None:
    """Print a one-line error to stderr."""
    console = Console(stderr=True, soft_wrap=True, highlight=False)
    console.print(f"[red]Error:[/red] {escape(message)}")


def fail(error: Exception) -> None:
    print_error(str(error))
    sys.exit(1)


@dataclass
class CliState:
    """Per-invocation state shared by commands.

    Tests pass a prepared instance as the click context object to inject a
    fake window manager and a temporary registry path.
    """

    settings: Optional[ScratchpadSettings] = None
    client: Optional[WindowManager] = None
    registry_path: Optional[Path] = None
    marker_path: Path = MOVING_MARKER_PATH
    logger: Optional[logging.Logger] = None
    active: Optional[WindowManager] = field(default=None, repr=False)

    def window_manager(self, dry_run: bool = False) -> WindowManager:
        if self.client is None:
            self.client = I3Client(
                socket_path=self.settings.socket_path,
                timeout=self.settings.ipc_timeout,
                logger=self.log.getChild("i3_client"),
            )
        self.active = DryRunClient(self.client, echo=click.echo) if dry_run else self.client
        return self.active

    def registry(self) -> StickyRegistry:
        return StickyRegistry.open(self.registry_path or self.settings.registry_path)

    @property
    def log(self) -> logging.Logger:
        return self.logger or null_logger()

    def close(self) -> None:
        # Through the dry-run wrapper when the command used one
        client = self.active or self.client
        if client is not None:
            client.close_connection()


def report(events: Iterable[OutputEvent]) -> int:
    """Print one line per event; return 1 if any event is an error."""
    code = 0
    for event in events:
        if event.is_error:
            print_error(event.message)
            code = 1
        else:
            click.echo(event.message)
    return code


filter_option = click.option(
    "--filter", "-F", "filters", multiple=True, metavar="PROPERTY=REGEX",
    help="Filter windows (app-name, window-title, app-bundle-id, window-id, workspace, window-layout)",
)
dry_run_option = click.option(
    "--dry-run", "-n", is_flag=True, help="Print window manager changes instead of making them",
)


@click.group()
@click.version_option(__version__, prog_name="i3-scratchpad")
@click.option("--verbose", "-v", is_flag=True, help="Log to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """i3-style scratchpad for i3 and sway.

    Windows hidden in the '.scratchpad' workspace can be listed, shown,
    summoned and cycled. Logging is configured with I3_SCRATCHPAD_LOGS_PATH
    and I3_SCRATCHPAD_LOGS_LEVEL.
    """
    state = ctx.ensure_object(CliState)

    if state.settings is None:
        try:
            state.settings = ScratchpadSettings.from_env()
        except ScratchpadError as e:
            fail(e)

    if state.logger is None:
        state.logger = setup_logging(state.settings.logs_level, state.settings.logs_path, verbose)

    ctx.call_on_close(state.close)


@cli.command("list")
@filter_option
@click.option("--output", "-o", "output_format", default="text", show_default=True,
              help="Output format: text, json, tsv or csv")
@click.pass_obj
def list_windows(state: CliState, filters: Tuple[str, ...], output_format: str):
    """List scratchpad windows (the scratchpad workspace plus floating windows)."""
    try:
        # Validated before any window manager call
        formatter = OutputFormatter(output_format)
        parsed = parse_filters(filters)
        check_properties(parsed)

        with log_timing("list", state.log):
            querier = WindowQuerier(state.window_manager(), state.log.getChild("querier"))
            windows = [w for w in querier.get_scratchpad_windows() if apply_filters(w, parsed)]
    except ScratchpadError as e:
        fail(e)

    if not windows:
        formatter.write_all([OutputEvent(
            command="list", action="list", result="none", message="no scratchpad windows found",
        )])
        return

    formatter.write_all(
        OutputEvent.for_window("list", "list", w, result="ok", message=w.window_title)
        for w in windows
    )


@cli.command()
@click.argument("pattern", required=False)
@filter_option
@click.option("--all", "all_windows", is_flag=True,
              help="Without PATTERN, hide every window of the focused app")
@click.option("--all-floating", is_flag=True, help="Hide every floating window")
@dry_run_option
@click.pass_obj
def move(state: CliState, pattern: Optional[str], filters: Tuple[str, ...], all_windows: bool,
         all_floating: bool, dry_run: bool):
    """Hide windows matching PATTERN in the scratchpad.

    PATTERN is a regex searched in the app name. Without it the focused
    window is hidden (all windows of its app with --all).
    """
    try:
        orchestrator = ScratchpadOrchestrator(state.window_manager(dry_run), state.log.getChild("move"))
        with log_timing("move", state.log):
            events = orchestrator.move(pattern, filters, all_windows=all_windows, all_floating=all_floating)
    except ScratchpadError as e:
        fail(e)
    sys.exit(report(events))


@cli.command()
@click.argument("pattern")
@filter_option
@dry_run_option
@click.pass_obj
def show(state: CliState, pattern: str, filters: Tuple[str, ...], dry_run: bool):
    """Show windows matching PATTERN, or hide them if one is already focused."""
    try:
        validate_all_non_empty([pattern])
        orchestrator = ScratchpadOrchestrator(state.window_manager(dry_run), state.log.getChild("show"))
        with log_timing("show", state.log):
            events = orchestrator.show(pattern, filters)
    except ScratchpadError as e:
        fail(e)
    sys.exit(report(events))


@cli.command()
@click.argument("pattern")
@filter_option
@click.option("--geometry", "-g", help="Float and resize to WIDTH%xHEIGHT% of the output, e.g. 60%x90%")
@dry_run_option
@click.pass_obj
def summon(state: CliState, pattern: str, filters: Tuple[str, ...], geometry: Optional[str], dry_run: bool):
    """Move windows matching PATTERN to the focused workspace and focus them."""
    try:
        validate_all_non_empty([pattern])
        size = Geometry.parse(geometry) if geometry else None
        orchestrator = ScratchpadOrchestrator(state.window_manager(dry_run), state.log.getChild("summon"))
        with log_timing("summon", state.log):
            events = orchestrator.summon(pattern, filters, geometry=size)
    except ScratchpadError as e:
        fail(e)
    sys.exit(report(events))


@cli.command("next")
@dry_run_option
@click.pass_obj
def next_window(state: CliState, dry_run: bool):
    """Bring the next scratchpad window to the focused workspace."""
    try:
        orchestrator = ScratchpadOrchestrator(state.window_manager(dry_run), state.log.getChild("next"))
        event = orchestrator.next()
    except ScratchpadError as e:
        fail(e)
    click.echo(event.message)


@cli.command()
@click.pass_obj
def info(state: CliState):
    """Show connection, version and scratchpad details."""
    console = Console(soft_wrap=True)
    client = state.window_manager()

    try:
        socket_path = client.get_socket_path()
        version = client.get_server_version()
    except ScratchpadError as e:
        fail(e)

    try:
        client.check_server_version()
        compatibility = "[green]compatible[/green]"
    except ScratchpadError as e:
        compatibility = f"[yellow]{escape(e.message)}[/yellow]"

    settings = state.settings
    console.print(f"[bold]i3-scratchpad[/bold] {__version__}")
    console.print(f"Socket path:          {escape(socket_path)}")
    console.print(f"Server version:       {escape(version)}")
    console.print(f"Compatibility:        {compatibility}")
    console.print(f"Scratchpad workspace: {SCRATCHPAD_WORKSPACE}")
    console.print(f"Log level:            {settings.logs_level or 'disabled'}")
    console.print(f"Log file:             {escape(str(settings.logs_path))}")
    console.print(f"Sticky registry:      {escape(str(state.registry_path or settings.registry_path))}")

    table = Table(title="Home workspaces")
    table.add_column("Application")
    table.add_column("Workspace")
    for app, workspace in sorted(HOME_WORKSPACES.items()):
        table.add_row(escape(app), escape(workspace))
    console.print(table)


@cli.group()
def hook():
    """Handlers invoked by i3/sway bindings and events."""
    pass


@hook.command("pull-window")
@click.argument("previous_workspace")
@click.argument("focused_workspace")
@click.pass_obj
def pull_window(state: CliState, previous_workspace: str, focused_workspace: str):
    """Pull the focused window out of the scratchpad back to PREVIOUS_WORKSPACE."""
    try:
        validate_all_non_empty([previous_workspace, focused_workspace])
        pull = PullWindowHook(
            state.window_manager(),
            marker=MovingMarker(state.marker_path),
            logger=state.log.getChild("hook"),
        )
        pull.run(previous_workspace, focused_workspace)
    except ScratchpadError as e:
        fail(e)


@cli.group()
def sticky():
    """Windows that follow you across workspaces."""
    pass


@sticky.command("add")
@click.argument("pattern")
@click.pass_obj
def sticky_add(state: CliState, pattern: str):
    """Register PATTERN as sticky."""
    try:
        validate_all_non_empty([pattern])
        registry = state.registry()
        added = registry.add(pattern)
    except ScratchpadError as e:
        fail(e)
    if added:
        click.echo(f"Pattern '{pattern}' added to sticky registry")
    else:
        click.echo(f"Pattern '{pattern}' is already sticky")


@sticky.command("remove")
@click.argument("pattern")
@click.pass_obj
def sticky_remove(state: CliState, pattern: str):
    """Unregister PATTERN."""
    try:
        validate_all_non_empty([pattern])
        state.registry().remove(pattern)
    except ScratchpadError as e:
        fail(e)
    click.echo(f"Pattern '{pattern}' removed from sticky registry")


@sticky.command("list")
@click.pass_obj
def sticky_list(state: CliState):
    """Print registered sticky patterns."""
    try:
        registry = state.registry()
    except ScratchpadError as e:
        fail(e)
    for pattern in registry.patterns:
        click.echo(pattern)


@sticky.command("follow")
@click.option("--interval", type=float, default=STICKY_POLL_INTERVAL, show_default=True,
              help="Seconds between workspace checks")
@click.pass_obj
def sticky_follow(state: CliState, interval: float):
    """Keep sticky windows on the focused workspace until the registry is empty."""
    if interval <= 0:
        fail(ValueError("interval must be positive"))
    try:
        registry = state.registry()
    except ScratchpadError as e:
        fail(e)
    if registry.is_empty():
        click.echo("No sticky patterns registered")
        return

    tracker = StickyTracker(state.window_manager(), logger=state.log.getChild("tracker"))
    try:
        tracker.follow(registry, interval=interval)
    except ScratchpadError as e:
        fail(e)
    except KeyboardInterrupt:
        pass


def main():
    cli(prog_name="i3-scratchpad")


if __name__ == "__main__":
    main()
