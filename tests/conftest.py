"""Shared fixtures for opencoder tests."""

import json

import pytest

from opencoder.config.manager import Settings
from opencoder.core.session import create_session_context


class FakeLLMClient:
    """Stands in for the HTTP client; replays canned replies or raises."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.payloads = []

    def send_request(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


@pytest.fixture
def settings():
    return Settings(
        model="test-model",
        prompts={"default": "Request: {{input}}", "terse": "{{input}}"},
        ignore_dirs=[".git", ".open-coder"],
        context_file_limit=10,
    )


@pytest.fixture
def session(tmp_path):
    return create_session_context([".git", ".open-coder"], cwd=tmp_path)


@pytest.fixture
def fake_client():
    return FakeLLMClient()


@pytest.fixture
def write_config(tmp_path):
    def _write(data, name="config.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path
    return _write
