"""Typed actions decoded from model replies.

A reply is one of three variants:

- ``CommandAction``: shell commands to run, in order, plus optional text.
- ``AnswerAction``: a conversational answer with nothing to execute.
- ``RawFallback``: the reply could not be decoded and is shown verbatim.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from ..exceptions import ActionDecodeError, ExtractionEmpty
from ..utils.logging import logger
from .parsers import extract_json_span, parse_llm_thought


@dataclass(frozen=True)
class CommandAction:
    commands: Tuple[str, ...]
    explanation: str = ""
    answer: str = ""


@dataclass(frozen=True)
class AnswerAction:
    answer: str = ""
    explanation: str = ""

    @property
    def text(self) -> str:
        """The text shown to the user, preferring the answer over the explanation."""
        return self.answer or self.explanation


@dataclass(frozen=True)
class RawFallback:
    raw_text: str
    reason: str = ""


ActionResponse = Union[CommandAction, AnswerAction, RawFallback]


def _optional_string(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ActionDecodeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _command_list(data: Dict[str, Any]) -> Tuple[str, ...]:
    value = data.get("commands")
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ActionDecodeError(f"'commands' must be a list, got {type(value).__name__}")
    for index, command in enumerate(value):
        if not isinstance(command, str):
            raise ActionDecodeError(f"commands[{index}] must be a string, got {type(command).__name__}")
    return tuple(value)


def decode_action(text: str) -> Union[CommandAction, AnswerAction]:
    """Decode a JSON action object.

    Args:
        text: JSON text of the form ``{"commands": [...], "explanation": "...", "answer": "..."}``.
            Every field is optional; unknown fields are ignored.

    Returns:
        CommandAction when at least one command is present, AnswerAction otherwise

    Raises:
        ActionDecodeError: if the text is not JSON or a field has the wrong type
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ActionDecodeError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ActionDecodeError(f"Expected a JSON object, got {type(data).__name__}")

    commands = _command_list(data)
    explanation = _optional_string(data, "explanation")
    answer = _optional_string(data, "answer")

    if commands:
        return CommandAction(commands=commands, explanation=explanation, answer=answer)
    return AnswerAction(answer=answer, explanation=explanation)


def try_decode_action(text: str) -> Optional[Union[CommandAction, AnswerAction]]:
    """Decode an action, returning None instead of raising."""
    try:
        return decode_action(text)
    except ActionDecodeError:
        return None


def interpret_reply(llm_output: str) -> ActionResponse:
    """Turn a raw model reply into an action. Never raises.

    Reasoning text, code fences and prose around the JSON object are
    tolerated. Anything that still fails to decode becomes a RawFallback
    carrying the original reply.
    """
    thought = parse_llm_thought(llm_output)
    if thought:
        logger.debug(f"[Model reasoning]: {thought}")

    try:
        span = extract_json_span(llm_output)
        action = decode_action(span)
    except (ExtractionEmpty, ActionDecodeError) as e:
        logger.debug(f"Model reply could not be decoded: {e}")
        return RawFallback(raw_text=llm_output, reason=str(e))

    logger.debug(f"Decoded {type(action).__name__} from model reply")
    return action
