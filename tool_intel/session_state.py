"""
Session State Module

Composes the four terminal watchers against one grid and one dispatcher and
keeps a single immutable ``WatcherState`` snapshot of what they report.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, replace
from typing import Any, Callable, Deque, Dict, List, Optional

from .buffer_scanner import BufferScanner
from .config import IntelConfig
from .dispatch import InlineDispatcher, PollTimer
from .terminal_grid import TerminalGrid
from .watchers import (
    ActivityEvent, ActivityEventWatcher, AgentMode, InputWaitWatcher,
    ModeModelWatcher, PromptVisibilityWatcher,
)


@dataclass(frozen=True)
class WatcherState:
    """Snapshot of the live session state; replaced on every change"""
    is_waiting_for_input: bool = False
    mode: Optional[AgentMode] = None
    model: Optional[str] = None
    prompt_visible: bool = False

    def to_dict(self) -> dict:
        return {
            'is_waiting_for_input': self.is_waiting_for_input,
            'mode': self.mode.value if self.mode else None,
            'model': self.model,
            'prompt_visible': self.prompt_visible,
        }


class SessionStateMonitor:
    """Owns one of each watcher and folds their callbacks into WatcherState

    All watcher callbacks arrive through the shared dispatcher, so
    ``on_state_changed`` and ``on_activity`` run on the dispatcher's context.
    With an inline dispatcher that context is whichever thread reported the
    change, so updates to the snapshot are serialized by a lock.
    """

    def __init__(self, grid: Optional[TerminalGrid] = None, dispatcher=None,
                 config: Optional[IntelConfig] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.config = config or IntelConfig()
        self.dispatcher = dispatcher or InlineDispatcher()
        settings = self.config.watchers

        self.input_wait = InputWaitWatcher(grid, self.dispatcher, settings.input_wait_rows)
        self.mode_model = ModeModelWatcher(grid, self.dispatcher, settings.mode_model_rows)
        self.prompt_visibility = PromptVisibilityWatcher(
            grid, self.dispatcher, settings.prompt_poll_interval, settings.prompt_scan_rows
        )
        self.activity = ActivityEventWatcher(grid, self.dispatcher,
                                             settings.activity_poll_interval)

        self.state = WatcherState()
        self.events: Deque[ActivityEvent] = deque(maxlen=settings.max_events)
        self.on_state_changed: Optional[Callable[[WatcherState], None]] = None
        self.on_activity: Optional[Callable[[ActivityEvent], None]] = None
        self.running = False
        self._lock = threading.RLock()

        self.input_wait.on_state_changed = lambda v: self._update(is_waiting_for_input=v)
        self.mode_model.on_mode_changed = lambda v: self._update(mode=v)
        self.mode_model.on_model_changed = lambda v: self._update(model=v)
        self.prompt_visibility.on_visibility_changed = lambda v: self._update(prompt_visible=v)
        self.activity.on_event = self._record_event

    @property
    def watchers(self) -> List[Any]:
        return [self.input_wait, self.mode_model, self.prompt_visibility, self.activity]

    def _update(self, **changes) -> None:
        with self._lock:
            new_state = replace(self.state, **changes)
            if new_state == self.state:
                return
            self.state = new_state
            if self.on_state_changed:
                self.on_state_changed(new_state)

    def _record_event(self, event: ActivityEvent) -> None:
        with self._lock:
            self.events.append(event)
            if self.on_activity:
                self.on_activity(event)

    def range_changed(self, start_row: int, end_row: int) -> None:
        """Forward a terminal range-changed signal to the signal-driven watchers"""
        self.input_wait.process_range(start_row, end_row)
        self.mode_model.process_range(start_row, end_row)

    def attach(self, grid: TerminalGrid) -> None:
        """Point every watcher at a new grid and reset the snapshot"""
        for watcher in self.watchers:
            watcher.attach(grid)
        with self._lock:
            self.state = WatcherState()
            self.events.clear()

    def detach(self) -> None:
        for watcher in self.watchers:
            watcher.detach()
        self.running = False

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self.prompt_visibility.start()
        self.activity.start()
        self.logger.info("Session state monitor started")

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self.prompt_visibility.stop()
        self.activity.stop()
        self.logger.info("Session state monitor stopped")

    def recent_events(self, limit: Optional[int] = None) -> List[ActivityEvent]:
        with self._lock:
            events = list(self.events)
        if limit is not None:
            events = events[-limit:] if limit > 0 else []
        return events

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of the current session state"""
        with self._lock:
            state = self.state
            events = list(self.events)

        by_kind: Dict[str, int] = {}
        for event in events:
            by_kind[event.kind.value] = by_kind.get(event.kind.value, 0) + 1

        last_event = events[-1] if events else None
        return {
            'state': state.to_dict(),
            'running': self.running,
            'event_count': len(events),
            'events_by_kind': by_kind,
            'last_event': last_event.to_dict() if last_event else None,
        }


class RangeChangePump:
    """Synthesizes range-changed signals for grids that have none

    Every tick optionally refreshes the grid (e.g. a tmux capture), diffs it
    with a BufferScanner and reports the min..max span of changed rows.
    """

    DEFAULT_INTERVAL = 0.25

    def __init__(self, grid: TerminalGrid, target: Callable[[int, int], None],
                 interval: Optional[float] = None,
                 refresh: Optional[Callable[[], Any]] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.grid = grid
        self.target = target
        self.interval = interval or self.DEFAULT_INTERVAL
        self.refresh = refresh
        self.scanner = BufferScanner()
        self._lock = threading.Lock()
        self._timer: Optional[PollTimer] = None

    @property
    def running(self) -> bool:
        return self._timer is not None

    def tick(self) -> bool:
        """Run one refresh-and-diff cycle

        Returns:
            True if a range-changed signal was sent
        """
        if self.refresh is not None:
            self.refresh()
        changed = self.scanner.scan(self.grid)
        if not changed:
            return False
        start_row, end_row = changed[0][0], changed[-1][0]
        self.logger.debug(f"Rows {start_row}..{end_row} changed")
        self.target(start_row, end_row)
        return True

    def start(self) -> None:
        with self._lock:
            if self._timer is not None:
                return
            self._timer = PollTimer(self.interval, self.tick, name="RangeChangePump")
            self._timer.start()

    def stop(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
