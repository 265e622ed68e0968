"""
botconfig Config Package

Configuration loading, schema validation, defaults and plugin-aware validation.
"""

from botconfig.config.schema import BotConfig, get_config_json_schema
from botconfig.config.types import ConfigValidationIssue, ValidationResult
from botconfig.config.validation import validate_config_object, validate_config_object_with_plugins
from botconfig.config.loader import (
    ConfigFileError,
    ConfigFileSnapshot,
    parse_config_content,
    substitute_env_vars,
    read_config_file,
    read_config_file_snapshot,
    load_config,
)

__all__ = [
    'BotConfig',
    'ConfigValidationIssue',
    'ValidationResult',
    'validate_config_object',
    'validate_config_object_with_plugins',
    'get_config_json_schema',
    'ConfigFileError',
    'ConfigFileSnapshot',
    'parse_config_content',
    'substitute_env_vars',
    'read_config_file',
    'read_config_file_snapshot',
    'load_config',
]
