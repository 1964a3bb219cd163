"""Unit tests for TestResultParser

Covers every supported runner format plus the generic fallback.
"""

import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from tool_intel.result_parser import TestCaseResult, TestResultParser, TestRunResult


class TestXCTestFormat(unittest.TestCase):

    def test_summary_gives_passed_count(self):
        result = TestResultParser.parse("Executed 5 tests, with 2 failures (0 unexpected) in 0.1 (0.1) seconds")

        self.assertEqual(result.total_passed, 3)

    def test_summary_is_case_insensitive_and_last_wins(self):
        output = (
            "executed 2 tests, with 0 failures\n"
            "Executed 7 tests, with 1 failure\n"
        )

        self.assertEqual(TestResultParser.parse(output).total_passed, 6)

    def test_more_failures_than_tests_clamps_to_zero(self):
        self.assertEqual(TestResultParser.parse("Executed 1 test, with 3 failures").total_passed, 0)

    def test_cases_with_durations_and_failure_message(self):
        output = (
            "Test Case '-[AppTests testA]' started.\n"
            "Test Case '-[AppTests testA]' passed (0.003 seconds).\n"
            "Test Case '-[AppTests testB]' started.\n"
            "/src/AppTests.swift:12: error: -[AppTests testB] : XCTAssertEqual failed: (\"1\") is not equal to (\"2\")\n"
            "Test Case '-[AppTests testB]' failed (0.010 seconds).\n"
            "Executed 2 tests, with 1 failure (0 unexpected) in 0.013 (0.015) seconds\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(result.total_passed, 1)
        self.assertEqual(result.failed_names, ["-[AppTests testB]"])
        self.assertEqual(len(result.cases), 2)
        self.assertTrue(result.cases[0].passed)
        self.assertAlmostEqual(result.cases[0].duration, 0.003)
        self.assertFalse(result.cases[1].passed)
        self.assertTrue(result.cases[1].failure_message.startswith("XCTAssertEqual failed"))


class TestSwiftTestingFormat(unittest.TestCase):

    def test_pass_and_fail_with_issue(self):
        output = (
            "✔ Test addition() passed after 0.001 seconds.\n"
            "✘ Test subtraction() recorded an issue at MathTests.swift:9:5: Expectation failed: 1 == 2\n"
            "✘ Test subtraction() failed after 0.002 seconds with 1 issue.\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(result.total_passed, 1)
        self.assertEqual(result.failed_names, ["subtraction()"])
        failed = result.cases[1]
        self.assertAlmostEqual(failed.duration, 0.002)
        self.assertEqual(failed.failure_message, "Expectation failed: 1 == 2")

    def test_alternate_cross_glyph(self):
        result = TestResultParser.parse("✗ Test broken() failed after 0.5 seconds.")

        self.assertEqual(result.total_passed, 0)
        self.assertEqual(result.failed_names, ["broken()"])


class TestCargoFormat(unittest.TestCase):

    def test_cases_summary_and_stdout_block(self):
        output = (
            "running 3 tests\n"
            "test math::add ... ok\n"
            "test math::sub ... FAILED\n"
            "test math::slow ... ignored\n"
            "\n"
            "failures:\n"
            "\n"
            "---- math::sub stdout ----\n"
            "thread 'math::sub' panicked at src/math.rs:10:5:\n"
            "assertion failed\n"
            "\n"
            "test result: FAILED. 1 passed; 1 failed; 1 ignored; 0 measured; 0 filtered out\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(result.total_passed, 1)
        self.assertEqual(result.failed_names, ["math::sub"])
        self.assertEqual([c.name for c in result.cases], ["math::add", "math::sub"])
        self.assertIn("assertion failed", result.cases[1].failure_message)

    def test_summaries_are_summed_across_binaries(self):
        output = (
            "test result: ok. 3 passed; 0 failed; 0 ignored\n"
            "test result: ok. 2 passed; 0 failed; 0 ignored\n"
        )

        self.assertEqual(TestResultParser.parse(output).total_passed, 5)


class TestPytestFormat(unittest.TestCase):

    def test_summary_and_failed_lines(self):
        output = (
            "FAILED tests/test_a.py::test_one - AssertionError: boom\n"
            "FAILED tests/test_a.py::test_two\n"
            "========= 2 failed, 3 passed in 0.06s =========\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(result.total_passed, 3)
        self.assertEqual(result.failed_names, ["tests/test_a.py::test_one", "tests/test_a.py::test_two"])
        self.assertEqual(result.cases[0].failure_message, "AssertionError: boom")
        self.assertIsNone(result.cases[1].failure_message)

    def test_failed_node_id_with_spaces(self):
        output = (
            "FAILED tests/test_x.py::test_p[a b] - AssertionError\n"
            "==== 1 failed in 0.05s ====\n"
        )
        result = TestResultParser.parse(output)

        self.assertEqual(result.failed_names, ["tests/test_x.py::test_p[a b]"])
        self.assertEqual(result.cases[0].failure_message, "AssertionError")

    def test_all_failed_summary_has_zero_passed(self):
        result = TestResultParser.parse("==== 1 failed in 0.01s ====")

        self.assertEqual(result.total_passed, 0)

    def test_verbose_lines_merge_with_failed_summary(self):
        output = (
            "tests/test_b.py::test_ok PASSED                     [ 50%]\n"
            "tests/test_b.py::test_bad FAILED                    [100%]\n"
            "FAILED tests/test_b.py::test_bad - ValueError\n"
            "==== 1 failed, 1 passed in 0.20s ====\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(len(result.cases), 2)
        self.assertEqual(result.failed_names, ["tests/test_b.py::test_bad"])
        self.assertEqual(result.cases[1].failure_message, "ValueError")


class TestGoFormat(unittest.TestCase):

    def test_pass_and_fail(self):
        output = (
            "=== RUN   TestA\n"
            "--- PASS: TestA (0.01s)\n"
            "=== RUN   TestB\n"
            "--- FAIL: TestB (0.02s)\n"
            "FAIL\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(result.total_passed, 1)
        self.assertEqual(result.failed_names, ["TestB"])
        self.assertAlmostEqual(result.cases[1].duration, 0.02)

    def test_failure_message_from_indented_lines(self):
        output = (
            "--- FAIL: TestDivide (0.00s)\n"
            "    math_test.go:14: expected 2, got 3\n"
            "    math_test.go:15: second problem\n"
            "FAIL\n"
            "--- SKIP: TestLater (0.00s)\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(len(result.cases), 1)
        self.assertEqual(result.cases[0].failure_message,
                         "math_test.go:14: expected 2, got 3\nmath_test.go:15: second problem")


class TestJestFormat(unittest.TestCase):

    def test_jest_summary_and_cases(self):
        output = (
            "  ✓ adds numbers (3 ms)\n"
            "  ✕ subtracts numbers (12 ms)\n"
            "Tests:       1 failed, 4 passed, 5 total\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(result.total_passed, 4)
        self.assertEqual(result.failed_names, ["subtracts numbers"])
        self.assertAlmostEqual(result.cases[0].duration, 0.003)

    def test_mocha_passing(self):
        result = TestResultParser.parse("  12 passing (2s)\n")

        self.assertEqual(result.total_passed, 12)


class TestFallback(unittest.TestCase):

    def test_failure_markers_collect_names(self):
        output = (
            "FAIL src/widget.test.js\n"
            "✗ renders header\n"
            "all good here\n"
        )

        result = TestResultParser.parse(output)

        self.assertEqual(result.total_passed, 0)
        self.assertEqual(result.failed_names, ["src/widget.test.js", "renders header"])

    def test_unrecognised_output_is_empty(self):
        result = TestResultParser.parse("nothing to see")

        self.assertEqual(result, TestRunResult())

    def test_empty_output(self):
        result = TestResultParser.parse("")

        self.assertEqual(result.total_passed, 0)
        self.assertEqual(result.failed_names, [])


class TestPurity(unittest.TestCase):

    def test_parse_is_repeatable(self):
        output = "--- PASS: TestA (0.01s)\n--- FAIL: TestB (0.02s)\n"

        first = TestResultParser.parse(output)
        TestResultParser.parse("Executed 9 tests, with 0 failures")
        second = TestResultParser.parse(output)

        self.assertEqual(first, second)
        self.assertIsNot(first.cases, second.cases)


class TestTestCaseResult(unittest.TestCase):

    def test_defaults(self):
        case = TestCaseResult(name="testSomething", passed=True)

        self.assertIsNone(case.duration)
        self.assertIsNone(case.failure_message)


if __name__ == '__main__':
    unittest.main()
