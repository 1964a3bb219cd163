"""
Terminal Grid Module
Read-only access to the character grid of a terminal session
"""

import subprocess
import logging
from abc import ABC, abstractmethod
from typing import List, Optional


class TerminalGrid(ABC):
    """A rectangular grid of rendered text rows

    Row 0 is the top of the visible viewport. Implementations may return None
    from ``line_at`` when a row is momentarily unavailable.
    """

    @property
    @abstractmethod
    def rows(self) -> int:
        """Number of rows currently in the grid"""
        pass

    @abstractmethod
    def line_at(self, row: int) -> Optional[str]:
        """Printable text of one row with trailing whitespace removed"""
        pass

    def read_rows(self, start: int, end: int) -> List[Optional[str]]:
        """Read rows start..end (inclusive) once each, clamped to the grid"""
        last = min(end, self.rows - 1)
        return [self.line_at(row) for row in range(max(start, 0), last + 1)]


class StaticGrid(TerminalGrid):
    """In-memory grid, used for replaying captured transcripts"""

    def __init__(self, lines: Optional[List[str]] = None, rows: Optional[int] = None):
        self._lines: List[str] = []
        self._rows = 0
        self.set_lines(lines or [], rows)

    @property
    def rows(self) -> int:
        return self._rows

    def line_at(self, row: int) -> Optional[str]:
        if row < 0 or row >= self._rows:
            return None
        if row < len(self._lines):
            return self._lines[row].rstrip()
        return ""

    def set_lines(self, lines: List[str], rows: Optional[int] = None) -> None:
        """Replace the grid content; with ``rows`` set, keep only the bottom rows"""
        if rows is not None:
            lines = list(lines[-rows:]) if rows > 0 else []
            self._rows = rows
        else:
            self._rows = len(lines)
        self._lines = list(lines)

    def set_line(self, row: int, text: str) -> None:
        while len(self._lines) <= row:
            self._lines.append("")
        self._lines[row] = text
        self._rows = max(self._rows, row + 1)


class TmuxPaneGrid(TerminalGrid):
    """Grid backed by the visible content of a tmux pane

    ``refresh`` captures the pane once; ``rows`` and ``line_at`` serve that
    snapshot so a scan never sees a row change mid-read. A failed capture
    leaves an empty grid.
    """

    def __init__(self, session_name: str, pane_index: int, window_index: int = 0):
        self.session_name = session_name
        self.pane_index = pane_index
        self.window_index = window_index
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._snapshot: List[str] = []

    @property
    def target(self) -> str:
        return f"{self.session_name}:{self.window_index}.{self.pane_index}"

    @property
    def rows(self) -> int:
        return len(self._snapshot)

    def line_at(self, row: int) -> Optional[str]:
        if 0 <= row < len(self._snapshot):
            return self._snapshot[row]
        return None

    def refresh(self) -> bool:
        """Capture the pane's visible rows

        Returns:
            True if the capture succeeded
        """
        content = self.capture_pane()
        if content is None:
            self._snapshot = []
            return False

        lines = content.split("\n")
        # capture-pane terminates the last row with a newline
        if lines and lines[-1] == "":
            lines.pop()
        self._snapshot = [line.rstrip() for line in lines]
        return True

    def capture_pane(self) -> Optional[str]:
        """Capture current content of the pane, or None on failure"""
        cmd = ["tmux", "capture-pane", "-t", self.target, "-p"]
        try:
            self.logger.debug(f"Executing command: {' '.join(cmd)}")
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
            return result.stdout
        except subprocess.CalledProcessError as e:
            self.logger.error(f"Failed to capture pane {self.target}: {e}")
            return None
        except FileNotFoundError:
            self.logger.error("tmux is not installed or not on PATH")
            return None
