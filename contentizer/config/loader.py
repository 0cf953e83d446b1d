"""
Configuration management and loading.

Handles application settings from an optional YAML file and
CONTENTIZER_* environment variables.
"""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

API_KEY_ENV = "CONTENTIZER_API_KEY"

DEFAULT_DAILY_QUOTA = 20
DEFAULT_INPUT_MAX_CHARS = 4000
DEFAULT_OUTPUT_MAX_CHARS = 1200

ENVIRONMENTS = ("development", "production")

GLOBAL_PROMPT_FILES = (
    ".prompt",
    "global.prompt",
    "prompt.txt",
    "global_prompt.txt",
)

_INT_KEYS = {"daily_quota", "input_max_chars", "output_max_chars"}
_STR_KEYS = {"language", "model", "global_prompt", "environment", "store_path"}

_ENV_OVERRIDES = {
    "CONTENTIZER_DAILY_QUOTA": "daily_quota",
    "CONTENTIZER_INPUT_MAX_CHARS": "input_max_chars",
    "CONTENTIZER_OUTPUT_MAX_CHARS": "output_max_chars",
    "CONTENTIZER_LANGUAGE": "language",
    "CONTENTIZER_MODEL": "model",
    "CONTENTIZER_ENV": "environment",
    "CONTENTIZER_STORE_PATH": "store_path",
}


@dataclass(frozen=True)
class AppConfig:
    """Deployment-level limits and prompt defaults.

    A daily_quota of 0 disables the quota gate; an output_max_chars of 0
    drops the length clause from the system prompt.
    """
    daily_quota: int = DEFAULT_DAILY_QUOTA
    input_max_chars: int = DEFAULT_INPUT_MAX_CHARS
    output_max_chars: int = DEFAULT_OUTPUT_MAX_CHARS
    language: Optional[str] = None
    model: Optional[str] = None
    global_prompt: Optional[str] = None
    environment: str = "development"
    store_path: str = "contentizer.db"

    def __post_init__(self):
        """Validate limits are non-negative and environment is known."""
        for name in sorted(_INT_KEYS):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.input_max_chars == 0:
            raise ValueError("input_max_chars must be > 0")
        if self.environment not in ENVIRONMENTS:
            raise ValueError(f"environment must be one of: {list(ENVIRONMENTS)}")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def output_ceiling(self) -> Optional[int]:
        """Output length ceiling for prompts, or None when disabled."""
        return self.output_max_chars or None


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
) -> AppConfig:
    """Load configuration from defaults, an optional YAML file and the environment.

    Precedence, lowest first: built-in defaults, YAML file, environment
    variables. When no global prompt is configured, the first non-empty
    prompt file found in ``cwd`` is used.

    Args:
        path: Optional path to YAML configuration file
        environ: Environment mapping (defaults to os.environ)
        cwd: Directory searched for global prompt files (defaults to CWD)

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if path is not None:
        values.update(_load_yaml(path))

    for env_name, key in _ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or not raw.strip():
            continue
        raw = raw.strip()
        if key in _INT_KEYS:
            try:
                parsed = int(raw)
            except ValueError:
                logger.warning("Ignoring non-integer %s=%r", env_name, raw)
                continue
            if parsed < 0:
                logger.warning("Ignoring negative %s=%r", env_name, raw)
                continue
            values[key] = parsed
        else:
            values[key] = raw

    config = AppConfig(**values)

    if config.global_prompt is None:
        prompt = find_global_prompt(Path(cwd) if cwd else Path.cwd())
        if prompt is not None:
            config = replace(config, global_prompt=prompt)

    return config


def find_global_prompt(directory: Path) -> Optional[str]:
    """Return the trimmed contents of the first non-empty prompt file in ``directory``."""
    for name in GLOBAL_PROMPT_FILES:
        candidate = directory / name
        try:
            content = candidate.read_text(encoding="utf-8").strip()
        except OSError:
            continue
        if content:
            logger.debug("Using global prompt from %s", candidate)
            return content
    return None


def _load_yaml(path: str) -> Dict[str, Any]:
    """Read and strictly validate a YAML config file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a mapping")

    unknown_keys = set(raw_config.keys()) - _INT_KEYS - _STR_KEYS
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    values: Dict[str, Any] = {}
    for key, value in raw_config.items():
        if value is None:
            continue
        if key in _INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"'{key}' must be an integer")
            if value < 0:
                raise ValueError(f"'{key}' must be >= 0")
            values[key] = value
        else:
            if not isinstance(value, str):
                raise ValueError(f"'{key}' must be a string")
            if value.strip():
                values[key] = value.strip()
    return values
