"""Tests for the turn orchestrator state machine."""

import json
import os
import shutil
import sys

import pytest

from opencoder.commands.executor import CommandResult
from opencoder.core.history import HistoryStore, Turn
from opencoder.core.orchestrator import TurnOrchestrator, TurnOutcome
from opencoder.exceptions import ReplyFormatError, TransportError

from .conftest import FakeLLMClient

needs_bash = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")
needs_bytes_names = pytest.mark.skipif(
    not sys.platform.startswith("linux"), reason="file system must accept arbitrary byte names"
)


class StubExecutor:
    """Returns canned results instead of running a shell."""

    def __init__(self, outputs):
        self.outputs = outputs
        self.commands = []

    def execute_all(self, commands, on_result=None):
        results = []
        for command in commands:
            self.commands.append(command)
            result = CommandResult(command=command, exit_code=0, output=self.outputs.get(command, ""))
            if on_result is not None:
                on_result(result)
            results.append(result)
        return results


def make_orchestrator(settings, session, client, prompt_key="default"):
    return TurnOrchestrator(settings, session, prompt_key, llm_client=client)


def read_history(session):
    return json.loads(session.history_path.read_text())


class TestSpecialInput:
    """Tests for input handled before any parsing."""

    def test_empty_input(self, settings, session, fake_client):
        orchestrator = make_orchestrator(settings, session, fake_client)
        assert orchestrator.handle_input("   ") is TurnOutcome.CONTINUE
        assert fake_client.payloads == []

    @pytest.mark.parametrize("command", ["exit", "quit", "  quit  "])
    def test_exit_commands(self, settings, session, fake_client, capsys, command):
        orchestrator = make_orchestrator(settings, session, fake_client)
        assert orchestrator.handle_input(command) is TurnOutcome.EXIT
        assert "Bye!" in capsys.readouterr().out
        assert fake_client.payloads == []

    def test_clear_resets_history_file(self, settings, session, fake_client, capsys):
        session.history_path.write_text(json.dumps([
            {"role": "user", "content": "a"},
            {"role": "assistant", "content": "b"},
        ]))
        orchestrator = make_orchestrator(settings, session, fake_client)

        assert orchestrator.handle_input("/clear") is TurnOutcome.CONTINUE
        assert read_history(session) == []
        assert "Context history cleared." in capsys.readouterr().out

    def test_clear_replaces_corrupt_file(self, settings, session, fake_client):
        session.history_path.write_text("{{{ corrupt")
        make_orchestrator(settings, session, fake_client).handle_input("/clear")
        assert read_history(session) == []


@needs_bash
class TestDirectCommands:
    """Tests for JSON actions typed directly by the user."""

    def test_direct_json_skips_model(self, settings, session, fake_client, capsys):
        orchestrator = make_orchestrator(settings, session, fake_client)
        outcome = orchestrator.handle_input('{"commands":["echo hi"],"explanation":"test"}')

        out = capsys.readouterr().out
        assert outcome is TurnOutcome.CONTINUE
        assert fake_client.payloads == []
        assert "> echo hi" in out
        assert "hi\n" in out
        assert "test" in out

    def test_direct_json_leaves_history_alone(self, settings, session, fake_client):
        make_orchestrator(settings, session, fake_client).handle_input('{"commands":["true"]}')
        assert not session.history_path.exists()

    def test_json_without_commands_goes_to_model(self, settings, session):
        client = FakeLLMClient(replies=['{"answer": "fine"}'])
        make_orchestrator(settings, session, client).handle_input('{"explanation": "no commands"}')
        assert len(client.payloads) == 1


class TestModelDispatch:
    """Tests for turns answered by the model."""

    def test_payload_contents(self, settings, session):
        session.history_path.write_text(json.dumps([
            {"role": "user", "content": "earlier"},
            {"role": "assistant", "content": "reply"},
        ]))
        client = FakeLLMClient(replies=['{"answer": "ok"}'])
        make_orchestrator(settings, session, client).handle_input("what is here?")

        payload = client.payloads[0]
        assert payload["model"] == "test-model"
        assert payload["stream"] is False
        roles = [m["role"] for m in payload["messages"]]
        assert roles == ["system", "user", "assistant", "user"]
        assert payload["messages"][0]["content"].startswith("Environment:\n")
        assert "File system listing (ls -R):" in payload["messages"][0]["content"]
        assert payload["messages"][-1]["content"] == "Request: what is here?"

    def test_prompt_key_selects_template(self, settings, session):
        client = FakeLLMClient(replies=['{"answer": "ok"}'])
        make_orchestrator(settings, session, client, prompt_key="terse").handle_input("hello")
        assert client.payloads[0]["messages"][-1]["content"] == "hello"

    def test_snapshot_written(self, settings, session):
        (session.cwd / "notes.txt").write_text("")
        client = FakeLLMClient(replies=['{"answer": "ok"}'])
        make_orchestrator(settings, session, client).handle_input("hello")
        assert "notes.txt" in session.snapshot_path.read_text()

    def test_answer_recorded_in_history(self, settings, session, capsys):
        reply = '<think>easy</think>{"answer": "Paris"}'
        client = FakeLLMClient(replies=[reply])
        make_orchestrator(settings, session, client).handle_input("capital of France?")

        assert "Paris" in capsys.readouterr().out
        assert read_history(session) == [
            {"role": "user", "content": "Request: capital of France?"},
            {"role": "assistant", "content": reply},
        ]

    @needs_bash
    def test_fenced_commands_continue_after_failure(self, settings, session, capsys):
        reply = '```json\n{"commands":["echo A","false","echo B"]}\n```'
        client = FakeLLMClient(replies=[reply])
        make_orchestrator(settings, session, client).handle_input("run them")

        captured = capsys.readouterr()
        assert "A\n" in captured.out
        assert "B\n" in captured.out
        assert captured.out.index("> echo A") < captured.out.index("> false") < captured.out.index("> echo B")
        assert "Error executing command 'false'" in captured.err
        assert len(read_history(session)) == 2

    def test_quiet_command_shows_no_output_marker(self, settings, session, capsys):
        client = FakeLLMClient(replies=['{"commands": ["true"], "explanation": "nothing"}'])
        executor = StubExecutor(outputs={})
        orchestrator = TurnOrchestrator(settings, session, "default", llm_client=client, executor=executor)
        orchestrator.handle_input("do nothing")

        assert executor.commands == ["true"]
        assert "(no output)" in capsys.readouterr().out

    @needs_bash
    def test_command_output_folded_into_history(self, settings, session):
        settings.record_command_output = True
        reply = '{"commands": ["echo folded"]}'
        client = FakeLLMClient(replies=[reply])
        make_orchestrator(settings, session, client).handle_input("echo")

        assistant = read_history(session)[-1]["content"]
        assert assistant.startswith(reply)
        assert "$ echo folded\n" in assistant
        # A login profile may print before the command runs
        assert assistant.splitlines()[-1] == "folded"

    @needs_bytes_names
    def test_undecodable_file_name_does_not_break_turn(self, settings, session):
        raw_name = os.path.join(os.fsencode(str(session.cwd)), b"bad\xff.txt")
        with open(raw_name, "wb"):
            pass
        client = FakeLLMClient(replies=['{"answer": "ok"}'])
        outcome = make_orchestrator(settings, session, client).handle_input("hello")

        assert outcome is TurnOutcome.CONTINUE
        assert len(client.payloads) == 1
        assert "bad\ufffd.txt" in client.payloads[0]["messages"][0]["content"]
        assert "bad\ufffd.txt" in session.snapshot_path.read_text(encoding="utf-8")
        assert len(read_history(session)) == 2

    def test_history_trimmed_after_turn(self, settings, session):
        settings.context_file_limit = 4
        store = HistoryStore(session.history_path)
        store.append(*[Turn("user" if i % 2 == 0 else "assistant", str(i)) for i in range(4)])
        store.persist()

        client = FakeLLMClient(replies=['{"answer": "ok"}'])
        make_orchestrator(settings, session, client).handle_input("next")

        # Six turns exceed the limit of four; ceil(6 * 0.2) = 2 oldest are dropped
        contents = [t["content"] for t in read_history(session)]
        assert contents == ["2", "3", "Request: next", '{"answer": "ok"}']


class TestFailedTurns:
    """Tests for turns that must not touch the history."""

    @pytest.fixture
    def seeded(self, session):
        original = json.dumps([{"role": "user", "content": "keep me"}])
        session.history_path.write_text(original)
        return original

    def test_transport_failure(self, settings, session, seeded, capsys):
        client = FakeLLMClient(error=TransportError("Request failed: refused"))
        outcome = make_orchestrator(settings, session, client).handle_input("hello")

        assert outcome is TurnOutcome.CONTINUE
        assert session.history_path.read_text() == seeded
        assert "Request failed" in capsys.readouterr().err

    def test_unknown_envelope_prints_body(self, settings, session, seeded, capsys):
        client = FakeLLMClient(error=ReplyFormatError("no content", body='{"weird": true}'))
        make_orchestrator(settings, session, client).handle_input("hello")

        assert '{"weird": true}' in capsys.readouterr().out
        assert session.history_path.read_text() == seeded

    def test_undecodable_reply_shown_verbatim(self, settings, session, seeded, capsys):
        reply = "Sorry, I can only chat."
        client = FakeLLMClient(replies=[reply])
        make_orchestrator(settings, session, client).handle_input("hello")

        assert reply in capsys.readouterr().out
        assert session.history_path.read_text() == seeded

    def test_session_continues_after_failure(self, settings, session, seeded):
        client = FakeLLMClient(error=TransportError("down"))
        orchestrator = make_orchestrator(settings, session, client)
        orchestrator.handle_input("one")

        client.error = None
        client.replies = ['{"answer": "back"}']
        orchestrator.handle_input("two")
        assert [t["content"] for t in read_history(session)] == ["keep me", "Request: two", '{"answer": "back"}']
