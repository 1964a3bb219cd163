"""
Input Wait Watcher

Detects when the interactive agent is blocked waiting for user input (plan
approval, y/n confirmation, clarifying question).

Heuristic: a recognised interactive-prompt line in the bottom rows of the
viewport while no CLI spinner glyph is present. The state is re-evaluated on
every range change that touches the bottom rows, so it clears as soon as the
agent prints new output.
"""

from typing import Callable, List, Optional

from .base_watcher import RangeWatcher


# Braille spinner frames used by ora / cli-spinners style progress indicators
SPINNER_CHARS = frozenset("⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏")

# Matched case-insensitively, so [Y/n], [y/N] and [Y/N] are covered too
CONFIRMATION_SUFFIXES = [
    "[y/n]",
    "(y/n)",
    "(yes/no)",
    "[yes/no]",
    "press enter",
    "press any key",
]


def is_prompt_line(text: str) -> bool:
    """Return True when ``text`` looks like an interactive prompt line"""
    stripped = text.strip()
    if not stripped:
        return False
    # inquirer.js / GitHub CLI style questions
    if stripped.startswith("? "):
        return True
    lower = stripped.lower()
    for suffix in CONFIRMATION_SUFFIXES:
        if lower.endswith(suffix) or (" " + suffix) in lower:
            return True
    return False


def contains_spinner(text: str) -> bool:
    """Return True when ``text`` contains a spinner glyph"""
    return any(char in SPINNER_CHARS for char in text)


class InputWaitWatcher(RangeWatcher):
    """Tracks whether the agent is waiting for input in the bottom 5 rows"""

    DEFAULT_WINDOW_ROWS = 5

    def __init__(self, grid=None, dispatcher=None, window_rows: Optional[int] = None):
        super().__init__(grid, dispatcher, window_rows)
        self.is_waiting_for_input = False
        # Called through the dispatcher whenever is_waiting_for_input changes
        self.on_state_changed: Optional[Callable[[bool], None]] = None

    def reset_state(self) -> None:
        self.is_waiting_for_input = False

    def evaluate(self, lines: List[str], generation: int) -> None:
        prompt_found = any(is_prompt_line(line) for line in lines)
        spinner_found = any(contains_spinner(line) for line in lines)

        now_waiting = prompt_found and not spinner_found
        if now_waiting == self.is_waiting_for_input:
            return
        self.is_waiting_for_input = now_waiting
        self.logger.info(f"Waiting for input: {now_waiting}")
        self._emit(self.on_state_changed, now_waiting, generation)
