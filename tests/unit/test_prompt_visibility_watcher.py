"""Unit tests for PromptVisibilityWatcher"""

import threading
import unittest
from unittest.mock import MagicMock
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from tool_intel.dispatch import UIDispatcher
from tool_intel.terminal_grid import StaticGrid
from tool_intel.watchers.prompt_visibility_watcher import (
    PromptVisibilityWatcher, is_agent_prompt
)


class TestIsAgentPrompt(unittest.TestCase):

    def test_prompt_forms(self):
        self.assertTrue(is_agent_prompt(">"))
        self.assertTrue(is_agent_prompt("  > type here"))
        self.assertFalse(is_agent_prompt(">>> python"))
        self.assertFalse(is_agent_prompt("a > b"))
        self.assertFalse(is_agent_prompt(""))


class TestPromptVisibilityWatcher(unittest.TestCase):

    def setUp(self):
        self.grid = StaticGrid(["output"] * 30)
        self.watcher = PromptVisibilityWatcher(self.grid)
        self.callback = MagicMock()
        self.watcher.on_visibility_changed = self.callback

    def test_prompt_in_bottom_rows_becomes_visible(self):
        self.grid.set_line(25, "> ")

        self.watcher.poll()
        self.watcher.poll()

        self.assertTrue(self.watcher.is_prompt_visible)
        self.callback.assert_called_once_with(True)

    def test_prompt_above_scan_rows_is_ignored(self):
        self.grid.set_line(5, ">")

        self.watcher.poll()

        self.assertFalse(self.watcher.is_prompt_visible)
        self.callback.assert_not_called()

    def test_visibility_toggles(self):
        self.grid.set_line(29, ">")
        self.watcher.poll()
        self.grid.set_line(29, "working")
        self.watcher.poll()

        self.assertEqual([c.args[0] for c in self.callback.call_args_list], [True, False])

    def test_poll_without_grid_is_noop(self):
        watcher = PromptVisibilityWatcher()
        watcher.on_visibility_changed = self.callback

        watcher.poll()

        self.callback.assert_not_called()

    def test_start_stop_idempotent(self):
        watcher = PromptVisibilityWatcher(self.grid, poll_interval=0.01)

        watcher.start()
        watcher.start()
        self.assertTrue(watcher.running)
        watcher.stop()
        watcher.stop()

        self.assertFalse(watcher.running)

    def test_timer_drives_scans(self):
        seen = threading.Event()
        watcher = PromptVisibilityWatcher(self.grid, poll_interval=0.01)
        watcher.on_visibility_changed = lambda visible: seen.set()
        self.grid.set_line(29, ">")

        watcher.start()
        try:
            self.assertTrue(seen.wait(2.0))
        finally:
            watcher.stop()

    def test_no_delivery_after_stop(self):
        dispatcher = UIDispatcher()
        watcher = PromptVisibilityWatcher(self.grid, dispatcher)
        watcher.on_visibility_changed = self.callback
        self.grid.set_line(29, ">")

        watcher.poll()
        watcher.stop()
        dispatcher.run_pending()

        self.callback.assert_not_called()


if __name__ == '__main__':
    unittest.main()
