"""Configuration management for tubemind.

Handles TOML configuration loading from local and global paths,
with environment variable precedence for the API key.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tubemind.core.errors import ConfigError

# Configuration file paths
LOCAL_CONFIG_PATH = Path(".tubemind/config")
GLOBAL_CONFIG_PATH = Path.home() / ".tubemind" / "config"

# Checked in order; API_KEY is kept for compatibility with older setups
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_ANALYSIS_TEMPERATURE = 0.5
DEFAULT_CONTEXT_LIMIT = 15000
DEFAULT_NOTES_CONTEXT_LIMIT = 5000
DEFAULT_OUTPUT_DIR = ".tubemind/output/"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "api": {
        "gemini_key": "",
    },
    "model": {
        "name": DEFAULT_MODEL,
        "analysis_temperature": DEFAULT_ANALYSIS_TEMPERATURE,
    },
    "content": {
        "context_limit": DEFAULT_CONTEXT_LIMIT,
        "notes_context_limit": DEFAULT_NOTES_CONTEXT_LIMIT,
    },
    "output": {
        "output_dir": DEFAULT_OUTPUT_DIR,
    },
}


@dataclass
class ApiConfig:
    """API configuration settings."""

    gemini_key: str = ""


@dataclass
class ModelConfig:
    """Generative model settings."""

    name: str = DEFAULT_MODEL
    analysis_temperature: float = DEFAULT_ANALYSIS_TEMPERATURE


@dataclass
class ContentConfig:
    """Prompt size limits, in characters."""

    context_limit: int = DEFAULT_CONTEXT_LIMIT
    notes_context_limit: int = DEFAULT_NOTES_CONTEXT_LIMIT


@dataclass
class OutputConfig:
    """Report output settings."""

    output_dir: str = DEFAULT_OUTPUT_DIR


@dataclass
class Config:
    """Main configuration container.

    Holds all configuration settings for tubemind, loaded from
    local and global config files with environment variable overrides.
    """

    api: ApiConfig = field(default_factory=ApiConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def get_gemini_key(self) -> str:
        """Get the Gemini API key with environment variable precedence.

        Returns:
            The first non-empty key among GEMINI_API_KEY and API_KEY,
            otherwise the value from the config file. May be empty; a
            missing key is only reported when the service is first called.
        """
        for name in API_KEY_ENV_VARS:
            env_key = os.environ.get(name, "")
            if env_key:
                return env_key
        return self.api.gemini_key

    def get_output_dir(self) -> Path:
        """Get the report output directory as a Path object."""
        return Path(self.output.output_dir)


def _generate_default_config_toml() -> str:
    """Generate default configuration as TOML string."""
    return f"""# tubemind Configuration File

[api]
# Gemini API key
# Environment variables GEMINI_API_KEY (or API_KEY) take precedence
gemini_key = ""

[model]
# Gemini model used for every request
name = "{DEFAULT_MODEL}"
# Sampling temperature for video analysis (0.0 - 2.0)
analysis_temperature = {DEFAULT_ANALYSIS_TEMPERATURE}

[content]
# Maximum characters of analysis context sent for articles and concepts
context_limit = {DEFAULT_CONTEXT_LIMIT}
# Maximum characters of analysis context sent when refining notes
notes_context_limit = {DEFAULT_NOTES_CONTEXT_LIMIT}

[output]
# Directory for saved reports
output_dir = "{DEFAULT_OUTPUT_DIR}"
"""


def _ensure_local_config_exists(local_path: Path) -> None:
    """Create local config file with defaults if it doesn't exist."""
    if not local_path.exists():
        local_path.parent.mkdir(parents=True, exist_ok=True)
        local_path.write_text(_generate_default_config_toml())


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML configuration file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed configuration dictionary, empty if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {path}: {e}") from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_config(config_dict: dict[str, Any]) -> None:
    """Validate configuration values.

    Args:
        config_dict: Configuration dictionary to validate.

    Raises:
        ConfigError: If configuration values are invalid.
    """
    for section in DEFAULT_CONFIG:
        if not isinstance(config_dict.get(section), dict):
            raise ConfigError(f"[{section}] must be a table")

    api_config = config_dict["api"]
    if not isinstance(api_config.get("gemini_key", ""), str):
        raise ConfigError("api.gemini_key must be a string")

    model_config = config_dict["model"]
    name = model_config.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError("model.name must be a non-empty string")

    temperature = model_config.get("analysis_temperature")
    if not _is_number(temperature) or not 0.0 <= temperature <= 2.0:
        raise ConfigError(
            f"model.analysis_temperature must be a number between 0.0 and 2.0, got {temperature!r}"
        )

    content_config = config_dict["content"]
    for key in ["context_limit", "notes_context_limit"]:
        value = content_config.get(key)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"content.{key} must be a positive integer, got {value!r}")

    output_dir = config_dict["output"].get("output_dir")
    if not isinstance(output_dir, str):
        raise ConfigError(f"output.output_dir must be a string, got {type(output_dir).__name__}")


def _dict_to_config(config_dict: dict[str, Any]) -> Config:
    """Convert a validated configuration dictionary to a Config dataclass."""
    api_dict = config_dict["api"]
    model_dict = config_dict["model"]
    content_dict = config_dict["content"]
    output_dict = config_dict["output"]

    return Config(
        api=ApiConfig(gemini_key=api_dict.get("gemini_key", "")),
        model=ModelConfig(
            name=model_dict["name"],
            analysis_temperature=float(model_dict["analysis_temperature"]),
        ),
        content=ContentConfig(
            context_limit=content_dict["context_limit"],
            notes_context_limit=content_dict["notes_context_limit"],
        ),
        output=OutputConfig(output_dir=output_dict["output_dir"]),
    )


def load_config(
    local_path: Path | None = None,
    global_path: Path | None = None,
    auto_create_local: bool = True,
) -> Config:
    """Load configuration from local and global config files.

    Configuration priority (highest to lowest):
    1. Local config file (.tubemind/config in current directory)
    2. Global config file ($HOME/.tubemind/config)
    3. Default values

    If no configuration exists, creates local config with defaults.

    Args:
        local_path: Override path for local config file.
        global_path: Override path for global config file.
        auto_create_local: If True, create local config with defaults if no config exists.

    Returns:
        Config object with merged configuration values.

    Raises:
        ConfigError: If configuration files are invalid.
    """
    local_path = local_path or LOCAL_CONFIG_PATH
    global_path = global_path or GLOBAL_CONFIG_PATH

    merged_config = {section: values.copy() for section, values in DEFAULT_CONFIG.items()}

    global_config = _load_toml_file(global_path)
    if global_config:
        merged_config = _deep_merge(merged_config, global_config)

    local_config = _load_toml_file(local_path)
    if local_config:
        merged_config = _deep_merge(merged_config, local_config)

    if auto_create_local and not local_config and not global_config:
        _ensure_local_config_exists(local_path)

    _validate_config(merged_config)

    return _dict_to_config(merged_config)


def get_config() -> Config:
    """Get the application configuration using default paths."""
    return load_config()
