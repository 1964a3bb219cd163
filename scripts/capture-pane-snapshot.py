#!/usr/bin/env python3
"""
Capture a snapshot of what the watchers see in a tmux pane.
Saves the pane text (replayable with `tool-intel replay`) next to a JSON
summary of the detected state and activity.
"""

import argparse
import json
import os
import sys
from datetime import datetime

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tool_intel.session_state import SessionStateMonitor
from tool_intel.terminal_grid import TmuxPaneGrid


def capture_snapshot(session_name, pane_index):
    """Capture one pane and run every watcher over it once"""
    grid = TmuxPaneGrid(session_name, pane_index)
    if not grid.refresh():
        print(f"Error: could not capture pane {grid.target}")
        return None

    monitor = SessionStateMonitor(grid)
    monitor.range_changed(0, grid.rows - 1)
    monitor.prompt_visibility.poll()
    monitor.activity.poll()

    return {
        "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3],
        "target": grid.target,
        "rows": grid.rows,
        "summary": monitor.get_summary(),
        "events": [event.to_dict() for event in monitor.recent_events()],
        "lines": grid.read_rows(0, grid.rows - 1),
    }


def save_snapshot(snapshot, directory=".temp"):
    """Save the JSON summary and the raw pane text; returns both paths"""
    os.makedirs(directory, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    json_path = os.path.join(directory, f"pane_snapshot_{stamp}.json")
    text_path = os.path.join(directory, f"pane_snapshot_{stamp}.txt")

    with open(json_path, 'w') as f:
        json.dump(snapshot, f, indent=2)
    with open(text_path, 'w') as f:
        f.write("\n".join(line or "" for line in snapshot["lines"]) + "\n")

    return json_path, text_path


def main():
    parser = argparse.ArgumentParser(description="Snapshot watcher state for a tmux pane")
    parser.add_argument("session", help="Tmux session name")
    parser.add_argument("--pane", type=int, default=0, help="Pane index (default: 0)")
    args = parser.parse_args()

    print(f"Capturing {args.session} pane {args.pane}...")
    snapshot = capture_snapshot(args.session, args.pane)
    if not snapshot:
        sys.exit(1)

    json_path, text_path = save_snapshot(snapshot)
    state = snapshot["summary"]["state"]
    print(f"\nWaiting for input: {state['is_waiting_for_input']}")
    print(f"Mode: {state['mode'] or 'unknown'}  Model: {state['model'] or 'unknown'}")
    print(f"Prompt visible: {state['prompt_visible']}")
    print(f"Activity events: {snapshot['summary']['event_count']}")
    print(f"\nSnapshot saved to: {json_path}")
    print(f"Replay with:\n  tool-intel replay {text_path}")


if __name__ == "__main__":
    main()
