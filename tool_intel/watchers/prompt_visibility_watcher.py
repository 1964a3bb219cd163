"""
Prompt Visibility Watcher
Polls the terminal to detect whether the agent's "> " input prompt is showing
"""

from typing import Callable, Optional

from .base_watcher import PollingWatcher, bottom_window_start
from ..terminal_grid import TerminalGrid


def is_agent_prompt(line: str) -> bool:
    """A prompt row is exactly ">" or starts with "> " once whitespace is trimmed"""
    trimmed = line.strip()
    return trimmed == ">" or trimmed.startswith("> ")


class PromptVisibilityWatcher(PollingWatcher):
    """Reports whether a prompt row is visible in the bottom rows of the grid"""

    SCAN_ROW_COUNT = 10

    def __init__(self, grid: Optional[TerminalGrid] = None, dispatcher=None,
                 poll_interval: Optional[float] = None, scan_rows: Optional[int] = None):
        super().__init__(grid, dispatcher, poll_interval)
        self.scan_rows = scan_rows or self.SCAN_ROW_COUNT
        self.is_prompt_visible = False
        self.on_visibility_changed: Optional[Callable[[bool], None]] = None

    def reset_state(self) -> None:
        self.is_prompt_visible = False

    def scan_buffer(self, grid: TerminalGrid) -> bool:
        """Return True if any of the bottom rows matches the prompt pattern"""
        rows = grid.rows
        for text in grid.read_rows(bottom_window_start(rows, self.scan_rows), rows - 1):
            if text is not None and is_agent_prompt(text):
                return True
        return False

    def scan(self, grid: TerminalGrid, generation: int) -> None:
        visible = self.scan_buffer(grid)
        if visible == self.is_prompt_visible:
            return
        self.is_prompt_visible = visible
        self.logger.debug(f"Prompt visible: {visible}")
        self._emit(self.on_visibility_changed, visible, generation)
