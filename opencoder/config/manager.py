"""Configuration manager for opencoder."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..constants import (
    DEFAULT_CONFIG_PATH, DEFAULT_OLLAMA_URL, DEFAULT_CONTEXT_FILE_LIMIT,
    DEFAULT_REQUEST_TIMEOUT, DEFAULT_COMMAND_TIMEOUT, DEFAULT_RECORD_COMMAND_OUTPUT,
    DEFAULT_ENABLE_DEBUG, DEFAULT_IGNORE_DIRS, PROMPT_INPUT_PLACEHOLDER
)
from ..exceptions import ConfigError
from ..utils.logging import logger
from ..utils.helpers import safe_file_write
from .templates import CONFIG_TEMPLATE

YAML_SUFFIXES = (".yaml", ".yml")


@dataclass
class Settings:
    """Validated settings for one session."""

    model: str
    prompts: Dict[str, str]
    ollama_url: str = DEFAULT_OLLAMA_URL
    ignore_dirs: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_DIRS))
    context_file_limit: int = DEFAULT_CONTEXT_FILE_LIMIT
    api_key: Optional[str] = None
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    command_timeout: int = DEFAULT_COMMAND_TIMEOUT
    record_command_output: bool = DEFAULT_RECORD_COMMAND_OUTPUT
    enable_debug: bool = DEFAULT_ENABLE_DEBUG

    def get_prompt(self, key: str) -> str:
        """Return the prompt template for key.

        Raises:
            ConfigError: if no such prompt is configured
        """
        if key not in self.prompts:
            raise ConfigError(f"Prompt '{key}' not found in config")
        return self.prompts[key]


class ConfigManager:
    """Manages configuration loading and validation for opencoder."""

    def __init__(self, config_file: Union[str, Path, None] = None):
        """Initialize the configuration manager.

        Args:
            config_file: Path to the JSON (or YAML) config file
        """
        self.config_file = Path(config_file or DEFAULT_CONFIG_PATH)
        self._settings: Optional[Settings] = None

    def initialize(self) -> Settings:
        """Load and validate the configuration file.

        A missing file is replaced by a template the user can fill in,
        but the session still cannot start.

        Raises:
            ConfigError: if the file is missing, unreadable or invalid
        """
        if not self.config_file.exists():
            if safe_file_write(self.config_file, CONFIG_TEMPLATE, "config template"):
                logger.system(f"Configuration template generated at: {self.config_file}")
                logger.system("Please review it, point it at your LLM and run open-coder again.")
            raise ConfigError(f"Configuration file not found: {self.config_file}")

        self._settings = self._validate(self._load_raw())
        logger.debug(f"Configuration loaded successfully from {self.config_file}")
        return self._settings

    def _load_raw(self) -> Dict[str, Any]:
        try:
            with open(self.config_file, 'r') as f:
                if self.config_file.suffix in YAML_SUFFIXES:
                    config_data = yaml.safe_load(f)
                else:
                    config_data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Error parsing config file {self.config_file}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Could not read {self.config_file}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigError(f"{self.config_file} does not contain a mapping of settings.")
        return config_data

    def _validate(self, config_data: Dict[str, Any]) -> Settings:
        for required in ("model", "prompts"):
            if not config_data.get(required):
                raise ConfigError(f"Required key '.{required}' missing or empty in {self.config_file}.")

        model = config_data["model"]
        if not isinstance(model, str):
            raise ConfigError(f"model in {self.config_file} must be a string.")

        prompts = config_data["prompts"]
        if not isinstance(prompts, dict) or not all(isinstance(v, str) for v in prompts.values()):
            raise ConfigError(f"prompts in {self.config_file} must map names to template strings.")
        prompts = {str(k): v for k, v in prompts.items()}
        for key, template in prompts.items():
            if PROMPT_INPUT_PLACEHOLDER not in template:
                logger.warning(f"Prompt '{key}' has no {PROMPT_INPUT_PLACEHOLDER} placeholder; user input will not be sent.")

        ollama_url = config_data.get("ollama_url") or DEFAULT_OLLAMA_URL
        if not isinstance(ollama_url, str):
            raise ConfigError(f"ollama_url in {self.config_file} must be a string.")

        ignore_dirs = config_data.get("ignore_dirs")
        if ignore_dirs is None:
            ignore_dirs = list(DEFAULT_IGNORE_DIRS)
        elif not isinstance(ignore_dirs, list):
            raise ConfigError(f"ignore_dirs in {self.config_file} must be a list.")

        api_key = config_data.get("api_key") or None
        if api_key is not None and not isinstance(api_key, str):
            raise ConfigError(f"api_key in {self.config_file} must be a string.")

        return Settings(
            model=model,
            prompts=prompts,
            ollama_url=ollama_url,
            ignore_dirs=[str(d) for d in ignore_dirs],
            context_file_limit=self._non_negative_int(config_data, "context_file_limit", DEFAULT_CONTEXT_FILE_LIMIT),
            api_key=api_key,
            request_timeout=self._non_negative_int(config_data, "request_timeout", DEFAULT_REQUEST_TIMEOUT),
            command_timeout=self._non_negative_int(config_data, "command_timeout", DEFAULT_COMMAND_TIMEOUT),
            record_command_output=self._flag(config_data, "record_command_output", DEFAULT_RECORD_COMMAND_OUTPUT),
            enable_debug=self._flag(config_data, "enable_debug", DEFAULT_ENABLE_DEBUG),
        )

    def _non_negative_int(self, config_data: Dict[str, Any], key: str, default: int) -> int:
        value = config_data.get(key, default)
        if value is None:
            return default
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigError(f"{key} ('{value}') in {self.config_file} must be a non-negative integer.")
        return value

    def _flag(self, config_data: Dict[str, Any], key: str, default: bool) -> bool:
        value = config_data.get(key, default)
        if not isinstance(value, bool):
            logger.warning(f"{key} in {self.config_file} must be true/false. Defaulting to {str(default).lower()}.")
            return default
        return value

    @property
    def settings(self) -> Settings:
        """Get the loaded settings."""
        if self._settings is None:
            raise RuntimeError("Configuration not loaded. Call initialize() first.")
        return self._settings

    def is_initialized(self) -> bool:
        """Check if the configuration has been loaded."""
        return self._settings is not None


def create_config_manager(config_file: Union[str, Path, None] = None) -> ConfigManager:
    """Create a configuration manager and load its settings.

    Raises:
        ConfigError: if the configuration cannot be loaded
    """
    manager = ConfigManager(config_file)
    manager.initialize()
    return manager
