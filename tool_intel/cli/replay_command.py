"""
Replay Command

Feeds a captured terminal transcript through every watcher, one line at a
time, and prints the state changes and activity events they report.
"""
from argparse import ArgumentParser, Namespace

from .base_command import BaseCommand, read_input
from ..buffer_scanner import strip_ansi
from ..session_state import SessionStateMonitor, WatcherState
from ..terminal_grid import StaticGrid


def format_state(state: WatcherState) -> str:
    mode = state.mode.display_name if state.mode else "-"
    return (f"waiting={'yes' if state.is_waiting_for_input else 'no'} "
            f"mode={mode} model={state.model or '-'} "
            f"prompt={'visible' if state.prompt_visible else 'hidden'}")


class ReplayCommand(BaseCommand):
    """Command to replay a terminal transcript through the watchers"""

    DEFAULT_ROWS = 24

    @property
    def name(self) -> str:
        return "replay"

    @property
    def help(self) -> str:
        return "Replay a captured terminal transcript through the watchers"

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "input",
            help="Transcript file ('-' for stdin)"
        )
        parser.add_argument(
            "--rows",
            type=int,
            default=self.DEFAULT_ROWS,
            help=f"Viewport height in rows (default: {self.DEFAULT_ROWS})"
        )

    def validate_args(self, args: Namespace):
        if args.rows < 1:
            return "--rows must be at least 1"
        return None

    def execute(self, args: Namespace, config) -> int:
        lines = [strip_ansi(line) for line in read_input(args.input).splitlines()]

        grid = StaticGrid()
        monitor = SessionStateMonitor(grid, config=config)
        monitor.on_state_changed = lambda state: print(f"[state] {format_state(state)}")
        monitor.on_activity = lambda event: print(f"[{event.kind.value}] {event.detail}")

        # The viewport scrolls once the transcript is taller than it
        for index in range(len(lines)):
            grid.set_lines(lines[max(0, index + 1 - args.rows):index + 1])
            monitor.range_changed(0, grid.rows - 1)
            monitor.prompt_visibility.poll()
            monitor.activity.poll()

        summary = monitor.get_summary()
        print(f"Replayed {len(lines)} line(s): {summary['event_count']} activity event(s)")
        print(f"Final state: {format_state(monitor.state)}")
        return 0
