"""CLI commands for the tool-intel console script"""

from .base_command import BaseCommand
from .command_registry import CommandRegistry

__all__ = ["BaseCommand", "CommandRegistry"]
