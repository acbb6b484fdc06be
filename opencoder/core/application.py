"""Main application class for opencoder."""

import signal
import sys
from typing import Optional

from ..config.manager import create_config_manager
from ..constants import DEFAULT_PROMPT_KEY, CLR_BOLD_CYAN, CLR_RESET
from ..exceptions import StartupError
from ..utils.helpers import check_dependencies
from ..utils.logging import logger
from .orchestrator import TurnOutcome, create_turn_orchestrator
from .session import create_session_context


class OpenCoder:
    """Main application class for open-coder."""

    def __init__(self, config_path: Optional[str] = None,
                 prompt_key: str = DEFAULT_PROMPT_KEY, debug: bool = False):
        """Initialize the application.

        Every precondition the session depends on is checked here, so a
        constructed application is ready to serve turns.

        Args:
            config_path: Path to the configuration file
            prompt_key: Name of the prompt template to use
            debug: Enable debug logging

        Raises:
            ConfigError: if the configuration or prompt template is unusable
            StartupError: if the working or state directory is unusable
        """
        logger.set_debug(debug)

        self.config_manager = create_config_manager(config_path)
        self.settings = self.config_manager.settings

        # Update debug setting from config if not explicitly set
        if not debug and self.settings.enable_debug:
            logger.set_debug(True)

        self.session = create_session_context(self.settings.ignore_dirs)
        self.orchestrator = create_turn_orchestrator(self.settings, self.session, prompt_key)

        try:
            self.orchestrator.history.ensure_exists()
        except OSError as e:
            raise StartupError(f"Failed to create history file {self.session.history_path}: {e}") from e

        check_dependencies()

        logger.debug("Application initialization complete")

    def run_interactive_mode(self) -> int:
        """Read and handle lines from standard input until exit or end of input.

        Returns:
            Process exit status
        """
        self._setup_signal_handlers()

        while True:
            try:
                user_input = input(f"{CLR_BOLD_CYAN}>{CLR_RESET} ")
            except EOFError:
                print()
                return 0
            except KeyboardInterrupt:
                print()
                logger.system("Use 'exit' or 'quit' to stop gracefully")
                continue

            try:
                outcome = self.orchestrator.handle_input(user_input)
            except KeyboardInterrupt:
                print()
                logger.system("Turn interrupted by user")
                continue

            if outcome is TurnOutcome.EXIT:
                return 0

    def _setup_signal_handlers(self) -> None:
        """Exit cleanly on termination signals."""
        def signal_handler(sig, frame):
            logger.system(f"Received signal {sig}, shutting down gracefully...")
            sys.exit(0)

        signal.signal(signal.SIGTERM, signal_handler)

        if hasattr(signal, 'SIGHUP'):
            signal.signal(signal.SIGHUP, signal_handler)


def create_application(config_path: Optional[str] = None,
                       prompt_key: str = DEFAULT_PROMPT_KEY, debug: bool = False) -> OpenCoder:
    """Create and initialize an OpenCoder application instance."""
    return OpenCoder(config_path, prompt_key, debug)
