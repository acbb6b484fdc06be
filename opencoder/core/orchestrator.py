"""Turn orchestration: one user input through to executed commands and saved history."""

from enum import Enum
from typing import List, Optional, Sequence

from ..commands.executor import CommandExecutor, CommandResult, create_command_executor
from ..config.manager import Settings
from ..constants import (
    CLEAR_COMMAND, EXIT_COMMANDS, ROLE_ASSISTANT, ROLE_USER,
    CLR_BOLD_GREEN, CLR_BOLD_YELLOW, CLR_GREEN, CLR_RESET
)
from ..exceptions import ReplyFormatError, TransportError
from ..llm.actions import AnswerAction, CommandAction, RawFallback, interpret_reply, try_decode_action
from ..llm.client import LLMClient, create_llm_client
from ..llm.payload import PayloadBuilder, create_payload_builder, render_prompt
from ..utils.helpers import get_file_system_listing, safe_file_write
from ..utils.logging import logger
from .history import HistoryStore, Turn, create_history_store
from .session import SessionContext


class TurnOutcome(Enum):
    """What the input loop should do after a turn."""

    CONTINUE = "continue"
    EXIT = "exit"


class TurnOrchestrator:
    """Runs one request/response cycle per line of user input.

    Input is checked, in order, for special commands, a direct JSON action
    and finally dispatched to the model. A turn that fails before the model's
    reply is decoded leaves the history untouched.
    """

    def __init__(self,
                 settings: Settings,
                 session: SessionContext,
                 prompt_key: str,
                 llm_client: Optional[LLMClient] = None,
                 history: Optional[HistoryStore] = None,
                 executor: Optional[CommandExecutor] = None,
                 payload_builder: Optional[PayloadBuilder] = None):
        self.settings = settings
        self.session = session
        self.prompt_template = settings.get_prompt(prompt_key)

        self.llm_client = llm_client or create_llm_client(
            settings.ollama_url, settings.api_key, settings.request_timeout
        )
        self.history = history or create_history_store(session.history_path, settings.context_file_limit)
        self.executor = executor or create_command_executor(session.cwd, settings.command_timeout)
        self.payload_builder = payload_builder or create_payload_builder(settings.model, session)

        logger.debug("TurnOrchestrator initialized")

    def handle_input(self, user_input: str) -> TurnOutcome:
        """Process one line of input."""
        user_input = user_input.strip()
        if not user_input:
            return TurnOutcome.CONTINUE

        if user_input == CLEAR_COMMAND:
            self.clear_history()
            return TurnOutcome.CONTINUE

        if user_input in EXIT_COMMANDS:
            print("Bye!")
            return TurnOutcome.EXIT

        direct = try_decode_action(user_input)
        if isinstance(direct, CommandAction):
            logger.debug("Input is a JSON action; skipping the model")
            self.execute_direct(direct)
            return TurnOutcome.CONTINUE

        self.dispatch_to_model(user_input)
        return TurnOutcome.CONTINUE

    def clear_history(self) -> None:
        """Empty the persisted history."""
        if self.history.clear():
            print("Context history cleared.")
        else:
            logger.error("Failed to clear history")

    def execute_direct(self, action: CommandAction) -> List[CommandResult]:
        """Run a user-supplied action without consulting the model."""
        results = self._run_commands(action.commands)
        self._render_text("Explanation", action.explanation)
        return results

    def dispatch_to_model(self, user_input: str) -> bool:
        """Ask the model, act on its reply and record the exchange.

        Returns:
            True if the turn completed and was added to the history
        """
        fs_listing = self._refresh_snapshot()
        prompt = render_prompt(self.prompt_template, user_input)

        turns = self.history.load()
        messages = self.payload_builder.build_messages(
            self.payload_builder.system_prompt(fs_listing), turns, prompt
        )
        payload = self.payload_builder.build_payload(messages)

        try:
            content = self.llm_client.send_request(payload)
        except TransportError as e:
            logger.error(str(e))
            if e.body:
                logger.error(e.body)
            return False
        except ReplyFormatError as e:
            logger.warning(str(e))
            print(e.body)
            return False

        action = interpret_reply(content)
        if isinstance(action, RawFallback):
            print(action.raw_text)
            return False

        results: List[CommandResult] = []
        if isinstance(action, CommandAction):
            results = self._run_commands(action.commands)
            self._render_text("Answer", action.answer)
            self._render_text("Explanation", action.explanation, always=True)
        elif isinstance(action, AnswerAction):
            self._render_text("Answer", action.answer)
            self._render_text("Explanation", action.explanation, always=not action.answer)

        self.history.append(
            Turn(ROLE_USER, prompt),
            Turn(ROLE_ASSISTANT, self._assistant_content(content, results)),
        )
        self.history.trim_if_over_limit()
        if not self.history.persist():
            logger.warning("Continuing with unsaved history for this turn")
        return True

    def _refresh_snapshot(self) -> str:
        fs_listing = get_file_system_listing(self.session.cwd, self.session.ignore_dirs)
        safe_file_write(self.session.snapshot_path, fs_listing, "file system snapshot")
        return fs_listing

    def _run_commands(self, commands: Sequence[str]) -> List[CommandResult]:
        print("Executing commands:")
        results = self.executor.execute_all(commands, on_result=self._render_result)
        print("Done executing commands.")
        return results

    def _render_result(self, result: CommandResult) -> None:
        print(f"{CLR_BOLD_YELLOW}> {result.command}{CLR_RESET}")
        print(result.display_output)
        if result.failed:
            reason = result.error_message or f"exit status {result.exit_code}"
            logger.error(f"Error executing command '{result.command}': {reason}")

    def _render_text(self, title: str, text: str, always: bool = False) -> None:
        if not text and not always:
            return
        print(f"{CLR_GREEN}{title}:{CLR_RESET}")
        print(f"{CLR_BOLD_GREEN}{text}{CLR_RESET}")

    def _assistant_content(self, content: str, results: List[CommandResult]) -> str:
        if not self.settings.record_command_output or not results:
            return content
        outputs = "\n".join(str(result) for result in results)
        return f"{content}\n\nCommand output:\n{outputs}"


def create_turn_orchestrator(settings: Settings, session: SessionContext, prompt_key: str) -> TurnOrchestrator:
    """Create an orchestrator with the default collaborators for a session."""
    return TurnOrchestrator(settings, session, prompt_key)
