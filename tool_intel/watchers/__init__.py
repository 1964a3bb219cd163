"""Terminal watchers that derive live session state from a character grid."""

from .activity_watcher import ActivityEvent, ActivityEventWatcher, ActivityKind
from .input_wait_watcher import InputWaitWatcher
from .mode_model_watcher import AgentMode, ModeModelWatcher
from .prompt_visibility_watcher import PromptVisibilityWatcher

__all__ = [
    "ActivityEvent",
    "ActivityEventWatcher",
    "ActivityKind",
    "AgentMode",
    "InputWaitWatcher",
    "ModeModelWatcher",
    "PromptVisibilityWatcher",
]
