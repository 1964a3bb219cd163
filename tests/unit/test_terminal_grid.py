"""Unit tests for terminal grid adapters"""

import unittest
from unittest.mock import patch, MagicMock
import subprocess
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from tool_intel.terminal_grid import StaticGrid, TmuxPaneGrid


class TestStaticGrid(unittest.TestCase):

    def test_rows_and_line_at(self):
        grid = StaticGrid(["a  ", "b"])

        self.assertEqual(grid.rows, 2)
        self.assertEqual(grid.line_at(0), "a")
        self.assertIsNone(grid.line_at(2))
        self.assertIsNone(grid.line_at(-1))

    def test_padded_rows_are_empty(self):
        grid = StaticGrid(["a"], rows=3)

        self.assertEqual(grid.rows, 3)
        self.assertEqual(grid.line_at(2), "")

    def test_set_lines_with_rows_keeps_bottom(self):
        grid = StaticGrid()
        grid.set_lines(["1", "2", "3", "4"], rows=2)

        self.assertEqual(grid.read_rows(0, 1), ["3", "4"])

    def test_read_rows_is_clamped(self):
        grid = StaticGrid(["a", "b", "c"])

        self.assertEqual(grid.read_rows(-5, 10), ["a", "b", "c"])
        self.assertEqual(grid.read_rows(2, 1), [])


class TestTmuxPaneGrid(unittest.TestCase):
    """Test cases for TmuxPaneGrid"""

    def setUp(self):
        self.grid = TmuxPaneGrid("test-session", 1)

    def test_target(self):
        self.assertEqual(self.grid.target, "test-session:0.1")

    @patch('subprocess.run')
    def test_refresh_success(self, mock_run):
        mock_run.return_value = MagicMock(stdout="line one   \n> \n\n")

        result = self.grid.refresh()

        self.assertTrue(result)
        mock_run.assert_called_once_with(
            ["tmux", "capture-pane", "-t", "test-session:0.1", "-p"],
            check=True, capture_output=True, text=True
        )
        self.assertEqual(self.grid.rows, 3)
        self.assertEqual(self.grid.line_at(0), "line one")
        self.assertEqual(self.grid.line_at(1), ">")

    @patch('subprocess.run')
    def test_refresh_failure_empties_grid(self, mock_run):
        mock_run.return_value = MagicMock(stdout="x\n")
        self.grid.refresh()
        mock_run.side_effect = subprocess.CalledProcessError(1, "tmux")

        result = self.grid.refresh()

        self.assertFalse(result)
        self.assertEqual(self.grid.rows, 0)

    @patch('subprocess.run')
    def test_missing_tmux_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError()

        self.assertIsNone(self.grid.capture_pane())


if __name__ == '__main__':
    unittest.main()
