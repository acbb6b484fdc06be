"""LLM payload preparation utilities for opencoder."""

from typing import Any, Dict, Iterable, List

from ..constants import PROMPT_INPUT_PLACEHOLDER, ROLE_SYSTEM, ROLE_USER
from ..core.history import Turn
from ..core.session import SessionContext


def render_prompt(template: str, user_input: str) -> str:
    """Substitute the user's input into a prompt template."""
    return template.replace(PROMPT_INPUT_PLACEHOLDER, user_input)


def build_environment_prompt(session: SessionContext) -> str:
    """Static part of the system message describing the environment."""
    return (
        "Environment:\n"
        f"OS: {session.os_name}\n"
        f"Working directory: {session.cwd}\n"
        f"Ignore directories: {', '.join(session.ignore_dirs)}\n"
    )


class PayloadBuilder:
    """Builds chat request payloads for the LLM API."""

    def __init__(self, model: str, session: SessionContext):
        """Initialize payload builder.

        Args:
            model: Model name sent with every request
            session: Session context the environment description is built from
        """
        self.model = model
        self.environment_prompt = build_environment_prompt(session)

    def system_prompt(self, fs_listing: str) -> str:
        """Environment description followed by the current filesystem listing."""
        return self.environment_prompt + fs_listing

    def build_messages(self, system_prompt: str, history: Iterable[Turn], user_prompt: str) -> List[Dict[str, str]]:
        """Assemble system context, prior turns and the new user turn, in that order."""
        messages = [{"role": ROLE_SYSTEM, "content": system_prompt}]
        messages.extend(turn.to_dict() for turn in history)
        messages.append({"role": ROLE_USER, "content": user_prompt})
        return messages

    def build_payload(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        """Wrap messages in a non-streaming chat request body."""
        return {
            "model": self.model,
            "messages": messages,
            "stream": False,
        }


def create_payload_builder(model: str, session: SessionContext) -> PayloadBuilder:
    """Create a payload builder for the given model and session."""
    return PayloadBuilder(model, session)
