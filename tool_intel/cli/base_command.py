"""
Base Command Class

Provides the foundation for all tool-intel CLI commands.
"""
import sys
from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace
from typing import Optional

from ..config import IntelConfig


class BaseCommand(ABC):
    """Abstract base class for CLI commands"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Command name used in CLI"""
        pass

    @property
    @abstractmethod
    def help(self) -> str:
        """Help text for the command"""
        pass

    @abstractmethod
    def add_arguments(self, parser: ArgumentParser) -> None:
        """
        Add command-specific arguments to the parser.

        Args:
            parser: ArgumentParser instance to add arguments to
        """
        pass

    @abstractmethod
    def execute(self, args: Namespace, config: IntelConfig) -> int:
        """
        Execute the command.

        Args:
            args: Parsed command line arguments
            config: Loaded configuration

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        pass

    def validate_args(self, args: Namespace) -> Optional[str]:
        """
        Validate command arguments.

        Args:
            args: Parsed arguments

        Returns:
            Error message if validation fails, None if valid
        """
        return None


def read_input(path: Optional[str]) -> str:
    """Read a whole file, or stdin when ``path`` is "-" or omitted

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()
