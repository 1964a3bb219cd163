"""
Command Registry

Central registry for all CLI commands.
"""
from typing import Dict
from argparse import ArgumentParser, Namespace

from .base_command import BaseCommand
from .diagnostics_command import DiagnosticsCommand
from .tests_command import TestsCommand
from .replay_command import ReplayCommand
from .watch_command import WatchCommand
from ..config import IntelConfig


class CommandRegistry:
    """Registry for all available commands"""

    def __init__(self):
        self.commands: Dict[str, BaseCommand] = {}
        self.aliases: Dict[str, str] = {}
        self._register_commands()
        self._register_aliases()

    def _register_commands(self) -> None:
        """Register all available commands"""
        command_classes = [
            DiagnosticsCommand,
            TestsCommand,
            ReplayCommand,
            WatchCommand,
        ]

        for cmd_class in command_classes:
            cmd = cmd_class()
            self.commands[cmd.name] = cmd

    def _register_aliases(self) -> None:
        """Register command aliases"""
        self.aliases["diag"] = "diagnostics"

    def setup_parser(self, parser: ArgumentParser) -> None:
        """Set up argument parser with all commands"""
        subparsers = parser.add_subparsers(
            dest="command",
            help="Available commands"
        )

        for cmd in self.commands.values():
            subparser = subparsers.add_parser(
                cmd.name,
                help=cmd.help
            )
            cmd.add_arguments(subparser)

        for alias, target in self.aliases.items():
            if target in self.commands:
                cmd = self.commands[target]
                subparser = subparsers.add_parser(
                    alias,
                    help=f"{cmd.help} (alias for {target})"
                )
                cmd.add_arguments(subparser)

    def execute_command(self, args: Namespace, config: IntelConfig) -> int:
        """Execute the specified command"""
        command_name = args.command
        if command_name in self.aliases:
            command_name = self.aliases[command_name]

        if command_name not in self.commands:
            return 1

        cmd = self.commands[command_name]

        error = cmd.validate_args(args)
        if error:
            print(f"Error: {error}")
            return 1

        try:
            return cmd.execute(args, config)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}")
            return 1
