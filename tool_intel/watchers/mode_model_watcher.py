"""
Mode/Model Watcher
Detects the agent's operating mode and active model from its status lines
"""

from enum import Enum
from typing import Callable, List, Optional, Tuple

from .base_watcher import RangeWatcher


class AgentMode(Enum):
    """Agent operating modes, in cycling order"""
    INTERACTIVE = "interactive"
    PLAN = "plan"
    AUTOPILOT = "autopilot"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def activate_command(self) -> str:
        """Terminal input that switches the agent into this mode"""
        return f"/agent {self.value}\n"

    @property
    def next_mode(self) -> "AgentMode":
        modes = list(AgentMode)
        return modes[(modes.index(self) + 1) % len(modes)]


# Keywords the CLI prints for each mode; "ask" and "agent" are older names
MODE_ALIASES: List[Tuple[str, AgentMode]] = [
    ("interactive", AgentMode.INTERACTIVE),
    ("ask", AgentMode.INTERACTIVE),
    ("plan", AgentMode.PLAN),
    ("autopilot", AgentMode.AUTOPILOT),
    ("agent", AgentMode.AUTOPILOT),
]

# Indicator families, tried in order: prompt tags, status lines, transitions
MODE_MARKERS: List[Callable[[str], Tuple[str, ...]]] = [
    lambda word: (f"({word})", f"[{word}]"),
    lambda word: (f"mode: {word}", f"mode:{word}"),
    lambda word: (f"switched to {word}",),
]

# Longest first so "using model: " wins over "model: "
MODEL_PREFIXES = ["using model: ", "using model:", "model: ", "model:"]
MODEL_TRAILING_PUNCTUATION = ".,;)>"


def detect_mode(text: str) -> Optional[AgentMode]:
    """Return the mode named by a mode indicator in ``text``, or None"""
    lower = text.lower()
    for markers in MODE_MARKERS:
        for word, mode in MODE_ALIASES:
            if any(marker in lower for marker in markers(word)):
                return mode
    return None


def detect_model(text: str) -> Optional[str]:
    """Return the model name following a model indicator in ``text``, or None"""
    lower = text.lower()
    for prefix in MODEL_PREFIXES:
        index = lower.find(prefix)
        if index < 0:
            continue
        rest = text[index + len(prefix):].split()
        if not rest:
            continue
        model = rest[0].rstrip(MODEL_TRAILING_PUNCTUATION)
        if model:
            return model
    return None


class ModeModelWatcher(RangeWatcher):
    """Tracks the agent mode and model shown in the bottom 8 rows"""

    DEFAULT_WINDOW_ROWS = 8

    def __init__(self, grid=None, dispatcher=None, window_rows: Optional[int] = None):
        super().__init__(grid, dispatcher, window_rows)
        self.current_mode: Optional[AgentMode] = None
        self.current_model: Optional[str] = None
        self.on_mode_changed: Optional[Callable[[AgentMode], None]] = None
        self.on_model_changed: Optional[Callable[[str], None]] = None

    def reset_state(self) -> None:
        self.current_mode = None
        self.current_model = None

    def evaluate(self, lines: List[str], generation: int) -> None:
        mode: Optional[AgentMode] = None
        model: Optional[str] = None
        # The bottom-most indicator is the most recent one
        for line in lines:
            mode = detect_mode(line) or mode
            model = detect_model(line) or model

        if mode is not None and mode != self.current_mode:
            self.logger.info(f"Mode changed: {self.current_mode} -> {mode.value}")
            self.current_mode = mode
            self._emit(self.on_mode_changed, mode, generation)

        if model is not None and model != self.current_model:
            self.logger.info(f"Model changed: {self.current_model} -> {model}")
            self.current_model = model
            self._emit(self.on_model_changed, model, generation)
