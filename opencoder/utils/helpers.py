"""Helper utility functions for opencoder."""

import os
import shutil
from pathlib import Path
from typing import Iterable, List

from ..constants import REQUIRED_CLI_TOOLS
from ..utils.logging import logger


def check_dependencies() -> None:
    """Warn about CLI tools that model-suggested commands are run through."""
    missing_deps = [cmd_name for cmd_name in REQUIRED_CLI_TOOLS if shutil.which(cmd_name) is None]

    if missing_deps:
        logger.warning(
            f"Missing CLI tool(s): {', '.join(missing_deps)}. "
            "Commands suggested by the model are executed through them and will fail."
        )

    logger.debug("Dependency check complete.")


def _printable_name(name: str) -> str:
    # Undecodable bytes in file names surface as lone surrogates
    return os.fsencode(name).decode("utf-8", errors="replace")


def get_file_system_listing(root: Path, ignore_dirs: Iterable[str] = ()) -> str:
    """Build an 'ls -R' style listing of every directory under root.

    Directories whose name is in ignore_dirs are not descended into, and
    entries with an ignored name are left out of their parent's listing.
    Unreadable directories are skipped.
    """
    ignored = set(ignore_dirs)
    root = Path(root)
    dirs: List[str] = []

    for dirpath, dirnames, _ in os.walk(root, onerror=lambda e: None):
        dirnames[:] = [d for d in dirnames if d not in ignored]
        rel = os.path.relpath(dirpath, root)
        dirs.append(rel)

    lines = ["File system listing (ls -R):"]
    for rel in sorted(dirs):
        lines.append(f"{_printable_name(rel)}:")
        try:
            entries = sorted(os.listdir(root / rel))
        except OSError:
            continue
        for name in entries:
            if name in ignored:
                continue
            lines.append(f"  {_printable_name(name)}")
        lines.append("")

    return "\n".join(lines) + "\n"


def safe_file_write(file_path: Path, content: str, description: str = None) -> bool:
    """Write content to a file, logging instead of raising on failure."""
    desc = description or f"file {file_path}"
    try:
        file_path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {desc}")
        return True
    except (OSError, UnicodeError) as e:
        logger.error(f"Failed to write {desc}: {e}")
        return False
