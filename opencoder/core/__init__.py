"""Core session components for opencoder."""

from .history import HistoryStore, Turn, create_history_store
from .session import SessionContext, create_session_context
from .orchestrator import TurnOrchestrator, TurnOutcome, create_turn_orchestrator
from .application import OpenCoder, create_application

__all__ = [
    "HistoryStore",
    "Turn",
    "create_history_store",
    "SessionContext",
    "create_session_context",
    "TurnOrchestrator",
    "TurnOutcome",
    "create_turn_orchestrator",
    "OpenCoder",
    "create_application",
]
