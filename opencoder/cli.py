"""Command-line interface for opencoder."""

import argparse
import sys
from typing import List, Optional

from colorama import init as colorama_init

from .constants import DEFAULT_CONFIG_PATH, DEFAULT_PROMPT_KEY
from .core.application import create_application
from .exceptions import ConfigError, StartupError
from .utils.logging import logger
from . import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="open-coder",
        description="open-coder: turn natural-language requests into shell commands with a local LLM.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Interactive commands:
  /clear        Clear the conversation history
  exit, quit    End the session

A line that is itself a JSON action, e.g.
  {"commands": ["ls -la"], "explanation": "list files"}
is executed directly without asking the model.
        """
    )

    parser.add_argument(
        '--config',
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})"
    )

    parser.add_argument(
        '--prompt',
        default=DEFAULT_PROMPT_KEY,
        help=f"Prompt template key in config (default: {DEFAULT_PROMPT_KEY})"
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help="Enable debug logging output"
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'open-coder {__version__}'
    )

    return parser


def main(args: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    colorama_init(autoreset=True)

    parsed_args = create_parser().parse_args(args)

    try:
        app = create_application(
            config_path=parsed_args.config,
            prompt_key=parsed_args.prompt,
            debug=parsed_args.debug
        )
    except (ConfigError, StartupError) as e:
        logger.error(f"Failed to start open-coder: {e}")
        sys.exit(1)

    sys.exit(app.run_interactive_mode())


if __name__ == "__main__":
    main()
