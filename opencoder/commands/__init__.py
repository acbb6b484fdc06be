"""Shell command execution for opencoder."""

from .executor import CommandExecutor, CommandResult, create_command_executor

__all__ = [
    "CommandExecutor",
    "CommandResult",
    "create_command_executor",
]
