"""Session context shared by every component of one interactive session."""

import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..constants import HISTORY_FILE_NAME, SNAPSHOT_FILE_NAME, STATE_DIR_NAME
from ..exceptions import StartupError
from ..utils.logging import logger


@dataclass(frozen=True)
class SessionContext:
    """Paths and environment facts fixed for the lifetime of a session."""

    cwd: Path
    state_dir: Path
    os_name: str
    ignore_dirs: List[str] = field(default_factory=list)

    @property
    def history_path(self) -> Path:
        return self.state_dir / HISTORY_FILE_NAME

    @property
    def snapshot_path(self) -> Path:
        return self.state_dir / SNAPSHOT_FILE_NAME


def create_session_context(ignore_dirs: Optional[List[str]] = None,
                           cwd: Optional[Path] = None) -> SessionContext:
    """Resolve the working directory and create the state directory.

    Args:
        ignore_dirs: Directory names excluded from the filesystem snapshot
        cwd: Working directory override, defaults to the process directory

    Raises:
        StartupError: if the working directory cannot be determined or the
            state directory cannot be created
    """
    if cwd is None:
        try:
            cwd = Path(os.getcwd())
        except OSError as e:
            raise StartupError(f"Failed to get current directory: {e}") from e

    state_dir = Path(cwd) / STATE_DIR_NAME
    try:
        state_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StartupError(f"Failed to create state directory {state_dir}: {e}") from e

    logger.debug(f"Session state directory: {state_dir}")
    return SessionContext(
        cwd=Path(cwd),
        state_dir=state_dir,
        os_name=platform.system().lower() or "unknown",
        ignore_dirs=list(ignore_dirs or []),
    )
