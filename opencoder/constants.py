"""Constants used throughout the opencoder package."""

from colorama import Fore, Style

# Command-line defaults
DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_PROMPT_KEY = "default"

# Per-project state, created under the working directory
STATE_DIR_NAME = ".open-coder"
HISTORY_FILE_NAME = "history.json"
SNAPSHOT_FILE_NAME = "fs_snapshot.txt"

# ANSI Color Codes (using colorama)
CLR_RESET = Style.RESET_ALL
CLR_RED = Fore.RED
CLR_BOLD_RED = Style.BRIGHT + Fore.RED
CLR_GREEN = Fore.GREEN
CLR_BOLD_GREEN = Style.BRIGHT + Fore.GREEN
CLR_YELLOW = Fore.YELLOW
CLR_BOLD_YELLOW = Style.BRIGHT + Fore.YELLOW
CLR_CYAN = Fore.CYAN
CLR_BOLD_CYAN = Style.BRIGHT + Fore.CYAN
CLR_WHITE = Fore.WHITE
CLR_BOLD_WHITE = Style.BRIGHT + Fore.WHITE

# Conversation roles
ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLES = (ROLE_SYSTEM, ROLE_USER, ROLE_ASSISTANT)

# Interactive commands
CLEAR_COMMAND = "/clear"
EXIT_COMMANDS = ("exit", "quit")

# Model reply markers
REASONING_CLOSE_MARKER = "</think>"
CODE_FENCE = "```"
PROMPT_INPUT_PLACEHOLDER = "{{input}}"
NO_OUTPUT_MARKER = "(no output)"

# History trimming: fraction of the oldest turns dropped once over the limit
HISTORY_TRIM_FRACTION = 0.2

# LLM backend
CHAT_API_PATH = "/api/chat"

# Default configuration values
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_CONTEXT_FILE_LIMIT = 0
DEFAULT_REQUEST_TIMEOUT = 0
DEFAULT_COMMAND_TIMEOUT = 0
DEFAULT_RECORD_COMMAND_OUTPUT = False
DEFAULT_ENABLE_DEBUG = False
DEFAULT_IGNORE_DIRS = [".git", STATE_DIR_NAME, "node_modules", "__pycache__", ".venv"]

# Shell used for every command; the login flag picks up the user's profile
SHELL_EXECUTABLE = "bash"
SHELL_ARGS = ["-lc"]

# Required CLI tools for dependency checking
REQUIRED_CLI_TOOLS = [SHELL_EXECUTABLE]
