"""
Diagnostics Command

Parses build output into file/line/severity diagnostics.
"""
import json
import os
from argparse import ArgumentParser, Namespace

from .base_command import BaseCommand, read_input
from ..diagnostics import BuildDiagnosticParser, filter_diagnostics_for_file


class DiagnosticsCommand(BaseCommand):
    """Command to extract diagnostics from build output"""

    @property
    def name(self) -> str:
        return "diagnostics"

    @property
    def help(self) -> str:
        return "Parse build output into diagnostics"

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument(
            "input",
            nargs="?",
            default="-",
            help="File with captured build output (default: stdin)"
        )
        parser.add_argument(
            "--file",
            dest="source_file",
            help="Only show diagnostics reported against this source file"
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Output as JSON"
        )

    def execute(self, args: Namespace, config) -> int:
        diagnostics = BuildDiagnosticParser.parse(read_input(args.input))

        if args.source_file:
            by_line = filter_diagnostics_for_file(
                diagnostics, os.path.abspath(args.source_file), args.source_file
            )
            diagnostics = [by_line[line] for line in sorted(by_line)]

        if args.json:
            print(json.dumps([
                {
                    "file": d.file_path,
                    "line": d.line,
                    "column": d.column,
                    "severity": d.severity.value,
                    "message": d.message,
                }
                for d in diagnostics
            ], indent=2))
            return 0

        if not diagnostics:
            print("No diagnostics found")
            return 0

        for d in diagnostics:
            location = f"{d.file_path}:{d.line}"
            if d.column is not None:
                location += f":{d.column}"
            print(f"{location}: {d.severity.value}: {d.message}")
        return 0
