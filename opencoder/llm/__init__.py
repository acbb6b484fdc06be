"""LLM integration for opencoder."""

from .client import LLMClient, create_llm_client
from .payload import PayloadBuilder, create_payload_builder, render_prompt
from .parsers import (
    strip_reasoning,
    strip_code_fence,
    slice_json_object,
    extract_json_span,
    extract_response_content
)
from .actions import (
    ActionResponse,
    AnswerAction,
    CommandAction,
    RawFallback,
    decode_action,
    interpret_reply
)

__all__ = [
    "LLMClient",
    "create_llm_client",
    "PayloadBuilder",
    "create_payload_builder",
    "render_prompt",
    "strip_reasoning",
    "strip_code_fence",
    "slice_json_object",
    "extract_json_span",
    "extract_response_content",
    "ActionResponse",
    "AnswerAction",
    "CommandAction",
    "RawFallback",
    "decode_action",
    "interpret_reply",
]
