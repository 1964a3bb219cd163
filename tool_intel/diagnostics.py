"""
Build Diagnostics Module
Parses raw build output from several toolchains into structured diagnostics
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple


logger = logging.getLogger(__name__)


class DiagnosticSeverity(Enum):
    """Severity of a build diagnostic"""
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"

    @classmethod
    def from_token(cls, token: str) -> "DiagnosticSeverity":
        """Map a severity token from tool output, defaulting to ERROR"""
        try:
            return cls(token.strip().lower())
        except ValueError:
            return cls.ERROR


@dataclass(frozen=True)
class Diagnostic:
    """A single error, warning or note with a resolved file location"""
    file_path: str
    line: int  # 1-based
    column: Optional[int]  # 1-based, None when the tool does not report it
    severity: DiagnosticSeverity
    message: str


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


# Swift / GCC / Clang:  path:line[:col]: error|warning|note: message
RE_GCC_STYLE = re.compile(
    r"^(.+?):(\d+)(?::(\d+))?:\s*(fatal error|error|warning|note|remark):\s*(.+)$"
)

# TypeScript / tsc:  path(line[,col]): error|warning TSxxxx: message
RE_TSC_STYLE = re.compile(
    r"^(.+?)\((\d+)(?:,(\d+))?\):\s*(error|warning|message)\s+\S+:\s*(.+)$"
)

# Cargo / rustc header:  error[E0308]: message  or  warning: message
RE_RUST_HEADER = re.compile(r"^(error|warning|note)(?:\[\w+\])?:\s*(.+)$")

# Cargo / rustc location:   --> src/main.rs:10:5
RE_RUST_ARROW = re.compile(r"^\s*-->\s+(.+?):(\d+)(?::(\d+))?\s*$")


def _located(match: re.Match, severity: DiagnosticSeverity, message: str) -> Optional[Diagnostic]:
    """Build a diagnostic from path/line/col groups 1-3, or None if the line is unusable"""
    line = _to_int(match.group(2))
    if line is None or line < 1:
        return None
    column = None
    if match.group(3) is not None:
        column = _to_int(match.group(3))
        if column is None:
            return None
    return Diagnostic(
        file_path=match.group(1),
        line=line,
        column=column,
        severity=severity,
        message=message,
    )


def _from_single_line(match: re.Match) -> Optional[Diagnostic]:
    message = match.group(5).strip()
    if not message:
        return None
    return _located(match, DiagnosticSeverity.from_token(match.group(4)), message)


class BuildDiagnosticParser:
    """Parses combined build output into ``Diagnostic`` entries

    Supported formats:
    - Swift / swiftc / GCC / Clang:  ``path:line:col: severity: message``
    - TypeScript / tsc:              ``path(line,col): error TSxxxx: message``
    - Cargo / rustc:                 ``error[Exxxx]: message`` then `` --> path:line:col``

    Only entries with a resolvable file location are returned.
    """

    # Single-line formats, tried in order
    LINE_FORMATS: List[Tuple[re.Pattern, Callable[[re.Match], Optional[Diagnostic]]]] = [
        (RE_GCC_STYLE, _from_single_line),
        (RE_TSC_STYLE, _from_single_line),
    ]

    @classmethod
    def parse(cls, output: str) -> List[Diagnostic]:
        """Parse all lines of build output and return structured diagnostics"""
        result: List[Diagnostic] = []
        # Rust emits the message on one line and the location on the next
        pending_rust: Optional[Tuple[DiagnosticSeverity, str]] = None

        for line in output.split("\n"):
            line = line.rstrip("\r")

            diagnostic = cls._match_line_formats(line)
            if diagnostic is not None:
                result.append(diagnostic)
                pending_rust = None
                continue

            header = RE_RUST_HEADER.match(line)
            if header:
                pending_rust = (DiagnosticSeverity.from_token(header.group(1)),
                                header.group(2).strip())
                continue

            if pending_rust is not None:
                arrow = RE_RUST_ARROW.match(line)
                if arrow:
                    severity, message = pending_rust
                    diagnostic = _located(arrow, severity, message)
                    if diagnostic is not None:
                        result.append(diagnostic)
                    pending_rust = None
                    continue

                stripped = line.strip()
                if stripped and not stripped.startswith("-->") and not stripped.startswith("= "):
                    pending_rust = None

        logger.debug(f"Parsed {len(result)} diagnostics from {len(output)} chars of build output")
        return result

    @classmethod
    def _match_line_formats(cls, line: str) -> Optional[Diagnostic]:
        for pattern, extractor in cls.LINE_FORMATS:
            match = pattern.match(line)
            if match:
                diagnostic = extractor(match)
                if diagnostic is not None:
                    return diagnostic
        return None


def filter_diagnostics_for_file(diagnostics: List[Diagnostic], file_path: str,
                                relative_path: str) -> Dict[int, Diagnostic]:
    """Select the diagnostics that belong to one file, keyed by line number

    A diagnostic matches when its path equals the file's absolute path, equals
    the project-relative path, or is a trailing path component sequence of the
    relative path (tools often report just the file name). When several
    diagnostics share a line the last one wins.

    Args:
        diagnostics: Parsed diagnostics
        file_path: Absolute path of the file being displayed
        relative_path: Path of the same file relative to the project root

    Returns:
        Dictionary mapping line number to diagnostic
    """
    by_line: Dict[int, Diagnostic] = {}
    for diagnostic in diagnostics:
        reported = diagnostic.file_path
        if reported.startswith("/"):
            matches = reported == file_path
        else:
            matches = (reported == relative_path
                       or relative_path.endswith("/" + reported))
        if matches:
            by_line[diagnostic.line] = diagnostic
    return by_line
