"""Conversation history persisted as a JSON array of turns."""

import json
import math
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from ..constants import HISTORY_TRIM_FRACTION, ROLES
from ..utils.logging import logger


@dataclass(frozen=True)
class Turn:
    """One role-tagged message in the conversation."""

    role: str
    content: str

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Invalid role '{self.role}', expected one of {ROLES}")
        if not isinstance(self.content, str):
            raise TypeError("Turn content must be a string")

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Turn":
        return cls(role=data["role"], content=data["content"])


def trim_count(length: int, limit: int) -> int:
    """Number of oldest turns to drop for a history of the given length."""
    if limit <= 0 or length <= limit:
        return 0
    return max(1, math.ceil(length * HISTORY_TRIM_FRACTION))


class HistoryStore:
    """Append-only, size-bounded conversation log backed by a JSON file.

    The store is loaded and persisted as one unit per turn. Read problems
    degrade to an empty history; write problems are logged and leave the
    in-memory state intact.
    """

    def __init__(self, path: Path, limit: int = 0):
        """Initialize the history store.

        Args:
            path: History file location
            limit: Maximum number of turns kept after trimming, 0 for unbounded
        """
        self.path = Path(path)
        self.limit = limit
        self._turns: List[Turn] = []

    @property
    def turns(self) -> List[Turn]:
        """A copy of the current turns, oldest first."""
        return list(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def ensure_exists(self) -> None:
        """Create an empty history file if none exists.

        Raises:
            OSError: if the file cannot be created
        """
        if not self.path.exists():
            self.path.write_text("[]")
            logger.debug(f"Created history file {self.path}")

    def load(self) -> List[Turn]:
        """Read the persisted history, replacing the in-memory turns.

        A missing, unreadable or malformed file is treated as empty history.
        """
        self._turns = []
        if not self.path.exists():
            logger.debug(f"No history file at {self.path}")
            return self.turns

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"History file {self.path} is malformed ({e}). Starting with empty history.")
            return self.turns
        except OSError as e:
            logger.warning(f"Could not read history file {self.path} ({e}). Starting with empty history.")
            return self.turns

        if not isinstance(data, list):
            logger.warning(f"History file {self.path} is not a JSON array. Starting with empty history.")
            return self.turns

        skipped = 0
        for entry in data:
            try:
                self._turns.append(Turn.from_dict(entry))
            except (KeyError, TypeError, ValueError):
                skipped += 1
        if skipped:
            logger.warning(f"Skipped {skipped} invalid entries in {self.path}")

        logger.debug(f"Loaded {len(self._turns)} turns from {self.path}")
        return self.turns

    def append(self, *turns: Turn) -> None:
        """Add turns to the end of the history."""
        self._turns.extend(turns)

    def trim_if_over_limit(self) -> int:
        """Drop the oldest 20% of turns (at least one) once the limit is exceeded.

        Returns:
            Number of turns dropped
        """
        drop = trim_count(len(self._turns), self.limit)
        if drop:
            self._turns = self._turns[drop:]
            logger.debug(f"Trimmed {drop} oldest turns; {len(self._turns)} remain")
        return drop

    def persist(self) -> bool:
        """Write all turns to the history file, replacing it atomically.

        Returns:
            True on success, False if the write failed
        """
        temp_name = None
        try:
            with tempfile.NamedTemporaryFile('w', delete=False, dir=self.path.parent, suffix='.json') as tmp_f:
                temp_name = tmp_f.name
                json.dump([turn.to_dict() for turn in self._turns], tmp_f, indent=2)
            shutil.move(temp_name, str(self.path))
            return True
        except OSError as e:
            logger.error(f"Failed to write history to {self.path}: {e}")
            if temp_name and Path(temp_name).exists():
                Path(temp_name).unlink()
            return False

    def clear(self) -> bool:
        """Reset to an empty history and persist immediately."""
        self._turns = []
        return self.persist()


def create_history_store(path: Path, limit: int = 0) -> HistoryStore:
    """Create a history store for the given file."""
    return HistoryStore(path, limit)
