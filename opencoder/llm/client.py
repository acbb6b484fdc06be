"""LLM client for API communication in opencoder."""

import json
from typing import Any, Dict, Optional

import requests

from ..constants import CHAT_API_PATH
from ..exceptions import ReplyFormatError, TransportError
from ..utils.logging import logger
from .parsers import extract_response_content


class LLMClient:
    """Handles communication with an Ollama-compatible chat API."""

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: int = 0):
        """Initialize LLM client.

        Args:
            base_url: Backend base URL; requests go to ``<base_url>/api/chat``
            api_key: Optional bearer token
            timeout: Request timeout in seconds, 0 to wait for completion
        """
        self.endpoint = base_url.rstrip("/") + CHAT_API_PATH
        self.api_key = api_key
        self.timeout = timeout

    def send_request(self, payload: Dict[str, Any]) -> str:
        """Send a chat request and return the assistant's message content.

        Raises:
            TransportError: on connection problems, non-2xx status or a non-JSON body
            ReplyFormatError: if the body carries no recognizable message content
        """
        response_data, body = self._make_api_call(payload)

        content = extract_response_content(response_data)
        if content is None:
            raise ReplyFormatError("LLM response contains no message content", body=body)

        logger.debug(f"Received {len(content)} characters from LLM")
        return content

    def _make_api_call(self, payload: Dict[str, Any]):
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        logger.debug(f"Making LLM API call to {self.endpoint}")

        try:
            response = requests.post(
                self.endpoint,
                data=json.dumps(payload),
                headers=headers,
                timeout=self.timeout or None,
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(f"LLM API call timed out after {self.timeout} seconds") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}") from e

        body = response.text
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"Non-OK HTTP status: {response.status_code} {response.reason}",
                status_code=response.status_code,
                body=body,
            )

        try:
            return response.json(), body
        except ValueError as e:
            raise ReplyFormatError(f"Failed to parse LLM response as JSON: {e}", body=body) from e


def create_llm_client(base_url: str, api_key: Optional[str] = None, timeout: int = 0) -> LLMClient:
    """Create a configured LLM client instance."""
    return LLMClient(base_url, api_key, timeout)
