"""
Test Result Parser Module
Parses raw test-runner output into pass/fail counts and per-case results
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional


logger = logging.getLogger(__name__)


@dataclass
class TestCaseResult:
    """Result of a single test case"""
    __test__ = False

    name: str
    passed: bool
    duration: Optional[float] = None  # seconds
    failure_message: Optional[str] = None


@dataclass
class TestRunResult:
    """Aggregated result of one test run"""
    __test__ = False

    total_passed: int = 0
    failed_names: List[str] = field(default_factory=list)
    cases: List[TestCaseResult] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return len(self.failed_names)


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _to_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _lines(output: str) -> List[str]:
    return [line.rstrip("\r") for line in output.split("\n")]


# Swift / XCTest
# "Executed 5 tests, with 0 failures (0 unexpected) in 0.002 (0.003) seconds"
# "Test Case '-[MyTests testSomething]' failed (0.001 seconds)."
# "/path/MyTests.swift:12: error: -[MyTests testSomething] : XCTAssertEqual failed: ..."
RE_XC_SUMMARY = re.compile(r"executed (\d+) tests?, with (\d+) failures?", re.IGNORECASE)
RE_XC_CASE = re.compile(r"Test Case '(.+?)' (passed|failed)(?: \((\d+(?:\.\d+)?) seconds\))?")
RE_XC_FAILURE = re.compile(r":\d+: error: (.+?) : (.+)$")

# Swift Testing
# "✔ Test testSomething() passed after 0.001 seconds."
# "✘ Test testBadCase() failed after 0.001 seconds with 1 issue."
# "✘ Test testBadCase() recorded an issue at MyTests.swift:5:3: Expectation failed: ..."
RE_ST_PASS = re.compile(r"✔ Test (.+?) passed(?: after (\d+(?:\.\d+)?) seconds)?")
RE_ST_FAIL = re.compile(r"[✘✗] Test (.+?) failed(?: after (\d+(?:\.\d+)?) seconds)?")
RE_ST_ISSUE = re.compile(r"[✘✗] Test (.+?) recorded an issue(?: at \S+?)?: (.+)$")

# Cargo / rustc
# "test math::test_add ... ok"
# "test result: FAILED. 4 passed; 1 failed; 0 ignored; 0 measured; 0 filtered out"
# "---- math::test_sub stdout ----"
RE_CARGO_CASE = re.compile(r"^test (.+?) \.\.\. (ok|FAILED|ignored)$")
RE_CARGO_SUMMARY = re.compile(r"test result: (?:ok|FAILED)\. (\d+) passed; (\d+) failed")
RE_CARGO_STDOUT = re.compile(r"^---- (.+?) stdout ----$")

# pytest
# "========= 2 failed, 3 passed in 0.06s ========="
# "FAILED test_file.py::test_something - AssertionError"
# "tests/test_x.py::test_y PASSED     [ 50%]"
RE_PYTEST_SUMMARY = re.compile(r"\b\d+ (?:passed|failed)\b.* in \d+(?:\.\d+)?s\b")
RE_PYTEST_PASSED_COUNT = re.compile(r"\b(\d+) passed\b")
RE_PYTEST_FAILED = re.compile(r"^FAILED (.+?)(?: - (.+))?$")
RE_PYTEST_VERBOSE = re.compile(r"^(\S+::\S+) (PASSED|FAILED)\b")

# Go test
# "--- PASS: TestSomething (0.00s)"
RE_GO_CASE = re.compile(r"^--- (PASS|FAIL|SKIP): (\S+)(?: \((\d+(?:\.\d+)?)s\))?")

# Jest / Mocha
# "Tests:   1 failed, 4 passed, 5 total"  /  "  5 passing (2s)"
# "  ✓ adds numbers (3 ms)"  /  "  ✕ subtracts numbers (2 ms)"
RE_JEST_SUMMARY = re.compile(r"Tests:\s+(?:\d+ failed,\s*)?(?:\d+ skipped,\s*)?(?:\d+ todo,\s*)?(\d+) passed")
RE_MOCHA_PASSING = re.compile(r"^\s*(\d+) passing")
RE_JEST_CASE = re.compile(r"^\s*([✓√✕×])\s+(.+?)(?:\s+\((\d+(?:\.\d+)?)\s*ms\))?\s*$")

# Fallback
RE_GENERIC_FAIL = re.compile(r"(?:FAIL(?:ED)?|✗|×)\s+(.+)")


def _with_failed_names(result: TestRunResult) -> TestRunResult:
    result.failed_names = [case.name for case in result.cases if not case.passed]
    return result


def _parse_xctest(output: str) -> Optional[TestRunResult]:
    result = TestRunResult()
    found = False
    messages: Dict[str, str] = {}

    for line in _lines(output):
        summary = RE_XC_SUMMARY.search(line)
        if summary:
            total = _to_int(summary.group(1))
            failures = _to_int(summary.group(2))
            if total is not None and failures is not None:
                # Nested suites each print a summary; the outermost comes last
                result.total_passed = max(total - failures, 0)
                found = True
            continue

        case = RE_XC_CASE.search(line)
        if case:
            result.cases.append(TestCaseResult(
                name=case.group(1),
                passed=case.group(2) == "passed",
                duration=_to_float(case.group(3)),
            ))
            continue

        failure = RE_XC_FAILURE.search(line)
        if failure:
            messages.setdefault(failure.group(1), failure.group(2).strip())

    if not found:
        return None
    for case in result.cases:
        if not case.passed and case.name in messages:
            case.failure_message = messages[case.name]
    return _with_failed_names(result)


def _parse_swift_testing(output: str) -> Optional[TestRunResult]:
    result = TestRunResult()
    messages: Dict[str, str] = {}
    pass_count = 0

    for line in _lines(output):
        passed = RE_ST_PASS.search(line)
        if passed:
            pass_count += 1
            result.cases.append(TestCaseResult(
                name=passed.group(1), passed=True, duration=_to_float(passed.group(2))
            ))
            continue

        issue = RE_ST_ISSUE.search(line)
        if issue:
            messages.setdefault(issue.group(1), issue.group(2).strip())
            continue

        failed = RE_ST_FAIL.search(line)
        if failed:
            result.cases.append(TestCaseResult(
                name=failed.group(1), passed=False, duration=_to_float(failed.group(2))
            ))

    if not result.cases:
        return None
    result.total_passed = pass_count
    for case in result.cases:
        if not case.passed and case.name in messages:
            case.failure_message = messages[case.name]
    return _with_failed_names(result)


def _parse_cargo(output: str) -> Optional[TestRunResult]:
    result = TestRunResult()
    found = False
    total_passed = 0
    messages: Dict[str, List[str]] = {}
    capturing: Optional[str] = None

    for line in _lines(output):
        stdout_header = RE_CARGO_STDOUT.match(line.strip())
        if stdout_header:
            capturing = stdout_header.group(1)
            messages[capturing] = []
            continue
        if capturing is not None:
            if line.strip():
                messages[capturing].append(line.strip())
                continue
            capturing = None

        summary = RE_CARGO_SUMMARY.search(line)
        if summary:
            passed = _to_int(summary.group(1))
            if passed is not None:
                # One summary per test binary (unit tests, integration tests, doc tests)
                total_passed += passed
                found = True
            continue

        case = RE_CARGO_CASE.match(line.strip())
        if case and case.group(2) != "ignored":
            result.cases.append(TestCaseResult(name=case.group(1), passed=case.group(2) == "ok"))

    if not found:
        return None
    result.total_passed = total_passed
    for case in result.cases:
        lines = messages.get(case.name)
        if not case.passed and lines:
            case.failure_message = "\n".join(lines)
    return _with_failed_names(result)


def _parse_pytest(output: str) -> Optional[TestRunResult]:
    result = TestRunResult()
    found = False
    by_name: Dict[str, TestCaseResult] = {}

    for line in _lines(output):
        stripped = line.strip()

        if RE_PYTEST_SUMMARY.search(stripped):
            passed = RE_PYTEST_PASSED_COUNT.search(stripped)
            count = _to_int(passed.group(1)) if passed else 0
            result.total_passed = count or 0
            found = True
            continue

        failed = RE_PYTEST_FAILED.match(stripped)
        if failed:
            name = failed.group(1)
            message = failed.group(2).strip() if failed.group(2) else None
            existing = by_name.get(name)
            if existing is not None and not existing.passed:
                existing.failure_message = message
            else:
                case = TestCaseResult(name=name, passed=False, failure_message=message)
                by_name[name] = case
                result.cases.append(case)
            continue

        verbose = RE_PYTEST_VERBOSE.match(stripped)
        if verbose:
            case = TestCaseResult(name=verbose.group(1), passed=verbose.group(2) == "PASSED")
            by_name[case.name] = case
            result.cases.append(case)

    if not found:
        return None
    return _with_failed_names(result)


def _parse_go(output: str) -> Optional[TestRunResult]:
    result = TestRunResult()
    pass_count = 0
    failing: Optional[TestCaseResult] = None
    details: List[str] = []

    def close_failure():
        if failing is not None and details:
            failing.failure_message = "\n".join(details)

    for line in _lines(output):
        stripped = line.strip()
        case = RE_GO_CASE.match(stripped)
        if case:
            close_failure()
            failing, details = None, []
            status = case.group(1)
            if status == "SKIP":
                continue
            entry = TestCaseResult(
                name=case.group(2),
                passed=status == "PASS",
                duration=_to_float(case.group(3)),
            )
            result.cases.append(entry)
            if entry.passed:
                pass_count += 1
            else:
                failing = entry
            continue

        # Log lines for a failing test are indented beneath its --- FAIL line
        if failing is not None:
            if line.startswith((" ", "\t")) and stripped:
                details.append(stripped)
            else:
                close_failure()
                failing, details = None, []

    close_failure()
    if not result.cases:
        return None
    result.total_passed = pass_count
    return _with_failed_names(result)


def _parse_jest(output: str) -> Optional[TestRunResult]:
    result = TestRunResult()
    total_passed: Optional[int] = None

    for line in _lines(output):
        if total_passed is None:
            summary = RE_JEST_SUMMARY.search(line) or RE_MOCHA_PASSING.match(line)
            if summary:
                total_passed = _to_int(summary.group(1))
                if total_passed is not None:
                    continue

        case = RE_JEST_CASE.match(line)
        if case:
            duration_ms = _to_float(case.group(3))
            result.cases.append(TestCaseResult(
                name=case.group(2),
                passed=case.group(1) in ("✓", "√"),
                duration=duration_ms / 1000.0 if duration_ms is not None else None,
            ))

    if total_passed is None:
        return None
    result.total_passed = total_passed
    return _with_failed_names(result)


def _parse_failed_names(output: str) -> TestRunResult:
    """Collect bare failed test names from any line mentioning a failure marker"""
    result = TestRunResult()
    for line in _lines(output):
        match = RE_GENERIC_FAIL.search(line.strip())
        if match:
            name = match.group(1).strip()
            if name:
                result.failed_names.append(name)
                result.cases.append(TestCaseResult(name=name, passed=False))
    return result


class TestResultParser:
    """Parses raw test output from multiple test tools

    Supported formats, tried in this order:
    - Swift / XCTest:  ``Executed N tests, with F failures`` and ``Test Case '...' passed|failed``
    - Swift Testing:   ``✔ Test ... passed`` / ``✘ Test ... failed``
    - Cargo / rustc:   ``test name ... ok|FAILED`` and ``test result: ok. N passed; F failed``
    - pytest:          ``N passed, F failed in Xs`` and ``FAILED node - message``
    - Go test:         ``--- PASS: TestName (0.00s)`` / ``--- FAIL: TestName (0.00s)``
    - Jest / Mocha:    ``Tests: F failed, N passed`` / ``N passing``

    The first format that yields a concrete count wins. When none match, failed
    names are collected from any line carrying a FAIL/FAILED/✗/× marker.
    """
    __test__ = False

    STRATEGIES: List[Callable[[str], Optional[TestRunResult]]] = [
        _parse_xctest,
        _parse_swift_testing,
        _parse_cargo,
        _parse_pytest,
        _parse_go,
        _parse_jest,
    ]

    @classmethod
    def parse(cls, output: str) -> TestRunResult:
        for strategy in cls.STRATEGIES:
            result = strategy(output)
            if result is not None:
                logger.debug(
                    f"{strategy.__name__} matched: {result.total_passed} passed, "
                    f"{len(result.failed_names)} failed"
                )
                return result
        return _parse_failed_names(output)
