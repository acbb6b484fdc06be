"""Command execution utilities for opencoder."""

import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..constants import NO_OUTPUT_MARKER, SHELL_ARGS, SHELL_EXECUTABLE
from ..utils.logging import logger


class CommandResult:
    """Represents the result of a command execution."""

    def __init__(self,
                 command: str,
                 exit_code: int,
                 output: str = "",
                 error_message: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.output = output
        self.error_message = error_message

    @property
    def failed(self) -> bool:
        """Whether the command exited non-zero or could not be run at all."""
        return self.exit_code != 0 or bool(self.error_message)

    @property
    def display_output(self) -> str:
        """Output as shown to the user, never blank."""
        return self.output.rstrip("\n") if self.output.strip() else NO_OUTPUT_MARKER

    def __str__(self) -> str:
        return f"$ {self.command}\n{self.display_output}"


class CommandExecutor:
    """Executes shell commands one after another in a working directory."""

    def __init__(self, cwd: Union[str, Path], default_timeout: int = 0):
        """Initialize command executor.

        Args:
            cwd: Directory every command runs in
            default_timeout: Timeout in seconds, 0 to wait for completion
        """
        self.cwd = Path(cwd)
        self.default_timeout = default_timeout

    def execute(self, command: str, timeout: Optional[int] = None) -> CommandResult:
        """Run a single command through the shell, capturing stdout and stderr together.

        Failures are recorded on the result, never raised.
        """
        if timeout is None:
            timeout = self.default_timeout

        logger.debug(f"Executing command in {self.cwd}: {command}")

        try:
            process = subprocess.run(
                [SHELL_EXECUTABLE, *SHELL_ARGS, command],
                cwd=str(self.cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=timeout or None,
            )
        except subprocess.TimeoutExpired as e:
            error_msg = f"Command timed out after {timeout} seconds"
            logger.warning(error_msg)
            partial = e.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode(errors="replace")
            return CommandResult(command=command, exit_code=124, output=partial, error_message=error_msg)
        except OSError as e:
            error_msg = f"Error executing command: {e}"
            logger.error(error_msg)
            return CommandResult(command=command, exit_code=-1, error_message=error_msg)

        result = CommandResult(command=command, exit_code=process.returncode, output=process.stdout or "")
        logger.debug(f"Command completed with exit code {result.exit_code}")
        return result

    def execute_all(self, commands: Iterable[str], on_result=None) -> List[CommandResult]:
        """Run commands strictly in order; a failing command does not stop the batch.

        Args:
            commands: Commands in execution order
            on_result: Optional callback invoked with each result as soon as it completes

        Returns:
            One result per command, in the same order
        """
        results = []
        for command in commands:
            result = self.execute(command)
            if result.failed:
                logger.debug(f"Continuing after failed command: {command}")
            if on_result is not None:
                on_result(result)
            results.append(result)
        return results


def create_command_executor(cwd: Union[str, Path], timeout: int = 0) -> CommandExecutor:
    """Create a command executor bound to a working directory."""
    return CommandExecutor(cwd, timeout)
