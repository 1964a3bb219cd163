"""
Tests Command

Parses test-runner output into pass/fail counts and per-case results.
"""
import json
from argparse import ArgumentParser, Namespace

from .base_command import BaseCommand, read_input
from ..run_verifier import RunStatus, evaluate_tests


class TestsCommand(BaseCommand):
    """Command to summarize test-runner output"""
    __test__ = False

    @property
    def name(self) -> str:
        return "tests"

    @property
    def help(self) -> str:
        return "Parse test-runner output"

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "input",
            nargs="?",
            default="-",
            help="File with captured test output (default: stdin)"
        )
        parser.add_argument(
            "--exit-code",
            type=int,
            default=None,
            help="Exit code of the test run; when given it decides pass/fail"
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Output as JSON"
        )

    def execute(self, args: Namespace, config) -> int:
        output = read_input(args.input)
        verification = evaluate_tests(output, args.exit_code if args.exit_code is not None else 0)
        result = verification.result

        if args.exit_code is None:
            passed = not result.failed_names
        else:
            passed = verification.status == RunStatus.PASSED

        if args.json:
            print(json.dumps({
                "status": "passed" if passed else "failed",
                "total_passed": result.total_passed,
                "failed": result.failed_names,
                "cases": [
                    {
                        "name": case.name,
                        "passed": case.passed,
                        "duration": case.duration,
                        "failure_message": case.failure_message,
                    }
                    for case in result.cases
                ],
            }, indent=2))
        else:
            print(f"Passed: {result.total_passed}")
            print(f"Failed: {len(result.failed_names)}")
            for case in result.cases:
                if case.passed:
                    continue
                line = f"  ✗ {case.name}"
                if case.failure_message:
                    line += f": {case.failure_message}"
                print(line)
            if not result.cases:
                for name in result.failed_names:
                    print(f"  ✗ {name}")

        return 0 if passed else 1
