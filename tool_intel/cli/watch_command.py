"""
Watch Command

Watches a live tmux pane and prints session state changes and activity
events until interrupted or the duration elapses.
"""
import time
from argparse import ArgumentParser, Namespace
from typing import Optional

from .base_command import BaseCommand
from .replay_command import format_state
from ..dispatch import UIDispatcher
from ..session_state import RangeChangePump, SessionStateMonitor
from ..terminal_grid import TmuxPaneGrid


class WatchCommand(BaseCommand):
    """Command to watch a live tmux pane"""

    DRAIN_INTERVAL = 0.1

    @property
    def name(self) -> str:
        return "watch"

    @property
    def help(self) -> str:
        return "Watch a tmux pane for agent state and activity"

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "--session", "-s",
            default=None,
            help="Tmux session name (default: from config)"
        )
        parser.add_argument(
            "--pane", "-p",
            type=int,
            default=0,
            help="Pane index (default: 0)"
        )
        parser.add_argument(
            "--window", "-w",
            type=int,
            default=None,
            help="Window index (default: from config)"
        )
        parser.add_argument(
            "--duration", "-d",
            type=float,
            default=None,
            help="Stop after this many seconds (default: run until Ctrl+C)"
        )

    def validate_args(self, args: Namespace) -> Optional[str]:
        if args.duration is not None and args.duration <= 0:
            return "--duration must be positive"
        if args.pane < 0:
            return "--pane must be non-negative"
        return None

    def execute(self, args: Namespace, config) -> int:
        session = args.session or config.tmux_session
        window = args.window if args.window is not None else config.tmux_window
        grid = TmuxPaneGrid(session, args.pane, window)
        if not grid.refresh():
            print(f"Error: could not capture tmux pane {grid.target}")
            return 1

        dispatcher = UIDispatcher("watch")
        monitor = SessionStateMonitor(grid, dispatcher, config)
        monitor.on_state_changed = lambda state: print(f"[state] {format_state(state)}")
        monitor.on_activity = lambda event: print(
            f"{event.timestamp:%H:%M:%S} [{event.kind.value}] {event.detail}"
        )
        pump = RangeChangePump(grid, monitor.range_changed,
                               config.watchers.range_pump_interval, refresh=grid.refresh)

        print(f"Watching {grid.target} (Ctrl+C to stop)")
        deadline = time.monotonic() + args.duration if args.duration else None
        monitor.start()
        pump.start()
        try:
            while deadline is None or time.monotonic() < deadline:
                dispatcher.run_pending()
                time.sleep(self.DRAIN_INTERVAL)
        except KeyboardInterrupt:
            print("\nStopping...")
        finally:
            pump.stop()
            monitor.stop()
            monitor.detach()
            dispatcher.run_pending()

        print(f"Final state: {format_state(monitor.state)}")
        return 0
