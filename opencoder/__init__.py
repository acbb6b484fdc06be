"""
open-coder - LLM-powered coding agent for the shell.

This package turns natural-language requests into shell commands using a
locally or remotely hosted language model, runs those commands in the current
project directory and keeps a bounded conversation history per project.
"""

__version__ = "0.1.0"

# Main API imports
from .core.application import OpenCoder, create_application
from .core.orchestrator import TurnOrchestrator, TurnOutcome
from .config.manager import ConfigManager, Settings, create_config_manager

__all__ = [
    "OpenCoder",
    "create_application",
    "TurnOrchestrator",
    "TurnOutcome",
    "ConfigManager",
    "Settings",
    "create_config_manager",
    "__version__",
]
