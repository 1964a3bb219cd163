"""
Buffer Scanner Module
Finds terminal rows whose text changed since the previous scan
"""

import re
import logging
from typing import Callable, Dict, List, Optional, Tuple


logger = logging.getLogger(__name__)

RE_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def strip_ansi(text: str) -> str:
    """Remove ANSI/VT escape sequences from terminal text"""
    return RE_ANSI_ESCAPE.sub("", text)


def scan_changed_rows(rows: int, line_at: Callable[[int], Optional[str]],
                      previous: Dict[int, str]) -> Tuple[List[int], Dict[int, str]]:
    """Compare every row against the cached text from the previous scan

    Each row is read exactly once. A row missing from ``previous`` compares as
    empty text, so blank rows never count as changed. A row whose accessor
    returns None is skipped and keeps its cached text. Cache entries for rows
    at or beyond ``rows`` are dropped, which handles a shrinking viewport.

    Args:
        rows: Current number of rows in the grid
        line_at: Accessor returning the printable text of a row
        previous: Row text cache from the previous scan (not modified)

    Returns:
        Tuple of (changed row indexes in ascending order, updated cache)
    """
    updated = {row: text for row, text in previous.items() if row < rows}
    changed: List[int] = []

    for row in range(max(rows, 0)):
        text = line_at(row)
        if text is None:
            continue
        if text != updated.get(row, ""):
            updated[row] = text
            changed.append(row)

    return changed, updated


class BufferScanner:
    """Owns the per-row text cache for one consumer of a terminal grid"""

    def __init__(self):
        self._last_row_texts: Dict[int, str] = {}

    def scan(self, grid) -> List[Tuple[int, str]]:
        """Return (row, text) for every row that changed since the last scan"""
        changed, self._last_row_texts = scan_changed_rows(
            grid.rows, grid.line_at, self._last_row_texts
        )
        if changed:
            logger.debug(f"{len(changed)} row(s) changed: {changed[0]}..{changed[-1]}")
        return [(row, self._last_row_texts[row]) for row in changed]

    def reset(self) -> None:
        """Forget all cached rows so the next scan reports every non-empty row"""
        self._last_row_texts = {}

    @property
    def cached_rows(self) -> int:
        return len(self._last_row_texts)
