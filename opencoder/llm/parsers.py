"""LLM response parsing utilities for opencoder.

Models wrap the structured reply in noise: reasoning sections closed by
``</think>``, Markdown code fences and surrounding prose. The helpers here
peel those layers off, in order, to isolate the JSON object.
"""

from typing import Optional

from ..constants import CODE_FENCE, REASONING_CLOSE_MARKER
from ..exceptions import ExtractionEmpty
from ..utils.logging import logger


def strip_reasoning(llm_output: str, marker: str = REASONING_CLOSE_MARKER) -> str:
    """Drop everything up to and including the last reasoning-close marker."""
    idx = llm_output.rfind(marker)
    if idx == -1:
        return llm_output
    return llm_output[idx + len(marker):]


def strip_code_fence(text: str) -> str:
    """Remove a Markdown fence wrapping the text, with or without a language tag.

    Only applies when the text opens with a fence. The opening fence and the
    rest of its line are dropped, then everything from the last closing fence.
    """
    if not text.startswith(CODE_FENCE):
        return text

    text = text[len(CODE_FENCE):]
    newline = text.find("\n")
    if newline != -1:
        text = text[newline + 1:]

    closing = text.rfind(CODE_FENCE)
    if closing != -1:
        text = text[:closing]
    return text


def slice_json_object(text: str) -> str:
    """Return the span from the first '{' to the last '}', or the text unchanged."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def extract_json_span(llm_output: str) -> str:
    """Isolate the JSON object embedded in a raw model reply.

    Args:
        llm_output: Raw text returned by the model

    Returns:
        The most likely JSON object span. When no brace pair exists the
        trimmed text is returned as-is and decoding fails downstream.

    Raises:
        ExtractionEmpty: if nothing remains once reasoning and fences are removed
    """
    text = strip_reasoning(llm_output).strip()
    text = strip_code_fence(text).strip()
    if not text:
        raise ExtractionEmpty("Model reply is empty after removing reasoning and code fences")

    if "{" not in text or "}" not in text:
        logger.debug("No JSON object boundaries found in model reply")
    return slice_json_object(text)


def parse_llm_thought(llm_output: str) -> str:
    """Return the reasoning text preceding the last reasoning-close marker."""
    idx = llm_output.rfind(REASONING_CLOSE_MARKER)
    if idx == -1:
        return ""
    return llm_output[:idx].replace("<think>", "").strip()


def extract_response_content(response_data: dict) -> Optional[str]:
    """Extract the assistant text from a chat completion response body.

    Two envelopes are accepted: the OpenAI-compatible
    ``choices[0].message.content`` and the Ollama ``message.content``.
    The ``choices`` shape is checked first. Neither is treated as canonical;
    which one arrives depends on the backend.

    Returns:
        The content string, or None if neither shape yields a non-empty string
    """
    if not isinstance(response_data, dict):
        return None

    choices = response_data.get("choices")
    if isinstance(choices, list) and choices:
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if isinstance(content, str) and content:
            return content

    message = response_data.get("message")
    if isinstance(message, dict):
        content = message.get("content")
        if isinstance(content, str) and content:
            return content

    return None
