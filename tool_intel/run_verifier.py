"""
Run Verifier Module

Turns the captured output and exit code of a finished build or test run into
a status plus parsed details, and picks the build/test command for a project
from its marker files. Nothing here spawns a process.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .diagnostics import BuildDiagnosticParser, Diagnostic, DiagnosticSeverity
from .result_parser import TestCaseResult, TestResultParser, TestRunResult


logger = logging.getLogger(__name__)


class RunStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


@dataclass
class BuildVerification:
    """Outcome of one build run"""
    status: RunStatus
    output: str = ""
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == DiagnosticSeverity.ERROR)


@dataclass
class TestVerification:
    """Outcome of one test run"""
    __test__ = False

    status: RunStatus
    output: str = ""
    result: TestRunResult = field(default_factory=TestRunResult)


@dataclass
class TestRunRecord:
    """A completed test run as kept for display after the run finishes"""
    __test__ = False

    date: datetime
    cases: List[TestCaseResult]
    raw_output: str
    succeeded: bool

    @property
    def passed_count(self) -> int:
        return sum(1 for case in self.cases if case.passed)

    @property
    def failed_count(self) -> int:
        return sum(1 for case in self.cases if not case.passed)

    @classmethod
    def from_verification(cls, verification: TestVerification,
                          date: Optional[datetime] = None) -> "TestRunRecord":
        return cls(
            date=date or datetime.now(),
            cases=list(verification.result.cases),
            raw_output=verification.output,
            succeeded=verification.status == RunStatus.PASSED,
        )


class LatestRunStore:
    """Holds the most recent test run; each record replaces the previous one"""

    def __init__(self):
        self._latest: Optional[TestRunRecord] = None

    @property
    def latest_run(self) -> Optional[TestRunRecord]:
        return self._latest

    def record(self, run: TestRunRecord) -> None:
        self._latest = run

    def clear(self) -> None:
        self._latest = None


def evaluate_build(output: str, exit_code: int) -> BuildVerification:
    """Classify a finished build; diagnostics are parsed only on failure"""
    if exit_code == 0:
        return BuildVerification(status=RunStatus.PASSED, output=output)
    diagnostics = BuildDiagnosticParser.parse(output)
    logger.info(f"Build failed (exit {exit_code}) with {len(diagnostics)} diagnostic(s)")
    return BuildVerification(status=RunStatus.FAILED, output=output, diagnostics=diagnostics)


def evaluate_tests(output: str, exit_code: int) -> TestVerification:
    """Classify a finished test run and parse its results"""
    result = TestResultParser.parse(output)
    status = RunStatus.PASSED if exit_code == 0 else RunStatus.FAILED
    if status == RunStatus.FAILED:
        logger.info(f"Tests failed (exit {exit_code}): {len(result.failed_names)} failing")
    return TestVerification(status=status, output=output, result=result)


def launch_failure(error_text: str) -> TestVerification:
    """Synthetic failed result for a run that could not be started"""
    result = TestRunResult(
        total_passed=0,
        failed_names=["launch"],
        cases=[TestCaseResult(name="launch", passed=False, failure_message=error_text)],
    )
    return TestVerification(status=RunStatus.FAILED, output=error_text, result=result)


# Checked in order; the first marker present wins
BUILD_COMMANDS: List[Tuple[Tuple[str, ...], List[str]]] = [
    (("Package.swift",), ["swift", "build"]),
    (("package.json",), ["npm", "run", "build"]),
    (("Cargo.toml",), ["cargo", "build"]),
    (("Makefile", "makefile", "GNUmakefile"), ["make"]),
]

TEST_COMMANDS: List[Tuple[Tuple[str, ...], List[str]]] = [
    (("Package.swift",), ["swift", "test"]),
    (("package.json",), ["npm", "test", "--", "--passWithNoTests"]),
    (("Cargo.toml",), ["cargo", "test"]),
    (("go.mod",), ["go", "test", "./..."]),
    (("pytest.ini", "pyproject.toml", "setup.py"), ["python", "-m", "pytest", "--tb=short", "-q"]),
    (("Makefile", "makefile", "GNUmakefile"), ["make", "test"]),
]


def _detect(root: Union[str, Path], table) -> Optional[List[str]]:
    root = Path(root)
    for markers, command in table:
        if any((root / marker).is_file() for marker in markers):
            return list(command)
    return None


def detect_build_command(root: Union[str, Path]) -> Optional[List[str]]:
    """Build command for the project at ``root``, or None if unrecognised"""
    return _detect(root, BUILD_COMMANDS)


def detect_test_command(root: Union[str, Path]) -> Optional[List[str]]:
    """Test command for the project at ``root``, or None if unrecognised"""
    return _detect(root, TEST_COMMANDS)
