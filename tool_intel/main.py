"""
Main entry point for the tool-intel CLI
"""

import argparse
import logging
import sys
from pathlib import Path

from .cli import CommandRegistry
from .config import IntelConfigLoader, LOG_LEVELS


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog="tool-intel",
        description="Structured signals from build, test and terminal output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Diagnostics from a failed build
  swift build 2>&1 | tool-intel diagnostics

  # Summarize a test run, failing when the run failed
  tool-intel tests pytest.log --exit-code 1

  # Replay a captured agent transcript through the watchers
  tool-intel replay session.log --rows 40

  # Watch a live agent in tmux pane 1 for a minute
  tool-intel watch --session claude-agents --pane 1 --duration 60
        """
    )

    parser.add_argument(
        '--config',
        default=None,
        help='Path to a tool_intel.yaml/.json config file'
    )

    parser.add_argument(
        '--log-level', '-l',
        choices=list(LOG_LEVELS),
        default=None,
        help='Logging level (default: from config, else INFO)'
    )

    registry = CommandRegistry()
    registry.setup_parser(parser)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    loader = IntelConfigLoader()
    try:
        config = loader.load_config(Path(args.config) if args.config else None)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if args.log_level:
        config.log_level = args.log_level

    errors = loader.validate_config(config)
    if errors:
        print("Configuration errors:")
        for error in errors:
            print(f"  - {error}")
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    return registry.execute_command(args, config)


if __name__ == '__main__':
    sys.exit(main())
