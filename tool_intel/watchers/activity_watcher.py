"""
Activity Event Watcher

Polls the whole terminal grid, strips ANSI escape codes from every row that
changed since the last poll, and pattern-matches it against known agent output
formats to emit structured ``ActivityEvent`` values (file reads, shell
commands, agent status lines).
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .base_watcher import PollingWatcher
from ..buffer_scanner import BufferScanner, strip_ansi
from ..terminal_grid import TerminalGrid


class ActivityKind(Enum):
    """Kinds of agent activity recognised in terminal output"""
    FILE_READ = "file_read"
    COMMAND_RUN = "command_run"
    AGENT_STATUS = "agent_status"


@dataclass(frozen=True)
class ActivityEvent:
    """One detected agent action"""
    kind: ActivityKind
    detail: str  # file path, command line, or status text
    timestamp: datetime = field(default_factory=datetime.now)
    row: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'detail': self.detail,
            'timestamp': self.timestamp.isoformat(),
            'row': self.row,
        }


FILE_READ_PATTERNS = [
    re.compile(r"reading file[:\s]+(.+)", re.IGNORECASE),
    re.compile(r"opening file[:\s]+(.+)", re.IGNORECASE),
    re.compile(r"\bread:\s*(\S+\.\w{1,10})$", re.IGNORECASE),
]

COMMAND_RUN_PATTERNS = [
    re.compile(r"\brunning:\s*(.+)", re.IGNORECASE),
    re.compile(r"\bexecuting:\s*(.+)", re.IGNORECASE),
    re.compile(r"^>\s+(.+)"),
    re.compile(r"^\$\s+(.+)"),
]

STATUS_KEYWORDS = [
    "thinking", "working", "planning", "analyzing",
    "searching", "generating", "processing",
]

STATUS_PREFIX_PATTERNS = [
    re.compile(r"^[✓✔✗✘×]\s+(.+)"),
    re.compile(r"^[⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏]\s+(.+)"),
]

MAX_STATUS_LINE_LENGTH = 80


def _first_capture(patterns: List[re.Pattern], line: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(line)
        if match:
            captured = match.group(1).strip()
            if captured:
                return captured
    return None


def _match_status(line: str) -> Optional[str]:
    if len(line) < MAX_STATUS_LINE_LENGTH:
        lower = line.lower()
        if any(keyword in lower for keyword in STATUS_KEYWORDS):
            return line
    return _first_capture(STATUS_PREFIX_PATTERNS, line)


# First hit wins
LINE_MATCHERS: List[Tuple[ActivityKind, Callable[[str], Optional[str]]]] = [
    (ActivityKind.FILE_READ, lambda line: _first_capture(FILE_READ_PATTERNS, line)),
    (ActivityKind.COMMAND_RUN, lambda line: _first_capture(COMMAND_RUN_PATTERNS, line)),
    (ActivityKind.AGENT_STATUS, _match_status),
]


def parse_activity_line(line: str, row: Optional[int] = None) -> Optional[ActivityEvent]:
    """Classify one clean terminal line, or return None if it carries no activity"""
    for kind, matcher in LINE_MATCHERS:
        detail = matcher(line)
        if detail is not None:
            return ActivityEvent(kind=kind, detail=detail, row=row)
    return None


class ActivityEventWatcher(PollingWatcher):
    """Emits an ActivityEvent for each changed row that matches an activity pattern"""

    def __init__(self, grid: Optional[TerminalGrid] = None, dispatcher=None,
                 poll_interval: Optional[float] = None):
        super().__init__(grid, dispatcher, poll_interval)
        self.scanner = BufferScanner()
        self.on_event: Optional[Callable[[ActivityEvent], None]] = None

    def reset_state(self) -> None:
        self.scanner.reset()

    def detach(self) -> None:
        super().detach()
        self.scanner.reset()

    def scan(self, grid: TerminalGrid, generation: int) -> None:
        for event in self.collect_events(grid):
            self._emit(self.on_event, event, generation)

    def collect_events(self, grid: TerminalGrid) -> List[ActivityEvent]:
        """Scan changed rows and return the events they produce, top to bottom"""
        events = []
        for row, raw in self.scanner.scan(grid):
            clean = strip_ansi(raw).strip()
            if not clean:
                continue
            event = parse_activity_line(clean, row=row)
            if event is not None:
                self.logger.debug(f"Row {row}: {event.kind.value} {event.detail[:60]}")
                events.append(event)
        return events
