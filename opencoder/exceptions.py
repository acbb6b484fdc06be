"""Exception types for opencoder.

Each kind maps to one handling policy in the turn orchestrator or at startup:

- ``TransportError`` / ``ReplyFormatError``: abort the turn, keep history.
- ``ExtractionEmpty`` / ``ActionDecodeError``: show the raw reply, keep history.
- ``ConfigError`` / ``StartupError``: exit the process with status 1.
"""


class OpenCoderError(Exception):
    """Base class for all opencoder errors."""


class ConfigError(OpenCoderError):
    """The configuration file is missing, unreadable or invalid."""


class StartupError(OpenCoderError):
    """A session precondition (working directory, state directory) failed."""


class TransportError(OpenCoderError):
    """The LLM backend could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ReplyFormatError(OpenCoderError):
    """The LLM response body has no recognizable message content."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class ExtractionEmpty(OpenCoderError):
    """Nothing was left of the model reply after removing reasoning and fences."""


class ActionDecodeError(OpenCoderError):
    """The extracted text is not a valid action object."""
