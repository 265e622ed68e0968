import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import yaml

from botconfig.config.schema import BotConfig
from botconfig.config.types import ConfigValidationIssue
from botconfig.config.validation import validate_config_object, validate_config_object_with_plugins
from botconfig.utils.paths import resolve_state_dir, resolve_user_path

CONFIG_PATH_ENV = 'BOTCONFIG_CONFIG_PATH'
DEFAULT_CONFIG_FILENAME = 'botconfig.json'
YAML_SUFFIXES = ('.yaml', '.yml')

# Strings are matched first so comment markers inside them survive.
_COMMENT_PATTERN = re.compile(r'("(?:\\.|[^"\\])*")|/\*.*?\*/|//[^\n]*', re.DOTALL)


class ConfigFileError(ValueError):
    """Raised when a config file cannot be read or parsed."""

    def __init__(self, path, message):
        self.path = str(path)
        super().__init__(f"{self.path}: {message}")


def parse_config_content(content: str) -> dict:
    """Parse JSON5-like content: handle // comments, /* */ comments, trailing commas."""
    content = _COMMENT_PATTERN.sub(lambda m: m.group(1) or '', content)

    # Remove trailing commas before } or ]
    content = re.sub(r',\s*([}\]])', r'\1', content)

    return json.loads(content)


def substitute_env_vars(config: dict) -> dict:
    """Deep-walk a dict/list structure, replacing ${VAR} patterns with env values."""

    def _substitute(value):
        if isinstance(value, dict):
            return {k: _substitute(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_substitute(item) for item in value]
        if isinstance(value, str):
            return re.sub(
                r'\$\{(\w+)\}',
                lambda m: os.environ.get(m.group(1), ''),
                value,
            )
        return value

    return _substitute(config)


def resolve_config_path() -> Path:
    override = os.environ.get(CONFIG_PATH_ENV, '').strip()
    if override:
        return Path(resolve_user_path(override))
    return resolve_state_dir() / DEFAULT_CONFIG_FILENAME


def read_config_file(path) -> Any:
    """Read and parse a config file. JSON5-like by default, YAML by suffix."""
    path = Path(path)
    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigFileError(path, f"cannot read config: {e}") from e

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigFileError(path, f"YAML parse failed: {e}") from e
        return {} if data is None else data

    if not content.strip():
        return {}
    try:
        return parse_config_content(content)
    except json.JSONDecodeError as e:
        raise ConfigFileError(path, f"JSON5 parse failed: {e}") from e


@dataclass
class ConfigFileSnapshot:
    path: str
    exists: bool
    raw: Optional[str] = None
    parsed: Any = None
    valid: bool = False
    config: Optional[BotConfig] = None
    issues: List[ConfigValidationIssue] = field(default_factory=list)


def read_config_file_snapshot(path=None, with_plugins: bool = True) -> ConfigFileSnapshot:
    """Read, parse and validate a config file without raising."""
    path = Path(path) if path else resolve_config_path()
    validate = validate_config_object_with_plugins if with_plugins else validate_config_object

    if not path.exists():
        result = validate_config_object({})
        return ConfigFileSnapshot(path=str(path), exists=False, parsed={},
                                  valid=result.ok, config=result.config, issues=list(result.issues))

    try:
        raw = path.read_text(encoding='utf-8')
        parsed = read_config_file(path)
    except (OSError, ConfigFileError) as e:
        return ConfigFileSnapshot(
            path=str(path),
            exists=True,
            valid=False,
            issues=[ConfigValidationIssue(path='', message=str(e))],
        )

    if isinstance(parsed, dict):
        parsed = substitute_env_vars(parsed)
    result = validate(parsed)
    return ConfigFileSnapshot(
        path=str(path),
        exists=True,
        raw=raw,
        parsed=parsed,
        valid=result.ok,
        config=result.config,
        issues=list(result.issues),
    )


def load_config(path=None) -> BotConfig:
    """Load a validated config or raise ConfigFileError listing every issue."""
    snapshot = read_config_file_snapshot(path)
    if not snapshot.valid:
        details = '\n'.join(f"- {issue.path or '<root>'}: {issue.message}" for issue in snapshot.issues)
        raise ConfigFileError(snapshot.path, f"invalid config:\n{details}")
    return snapshot.config
