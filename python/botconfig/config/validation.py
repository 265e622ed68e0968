"""
Config validation.

``validate_config_object`` checks the shape of a raw config and returns it
with defaults applied. ``validate_config_object_with_plugins`` additionally
cross-checks every plugin reference against the plugins that actually load.

Neither function raises for bad input; problems come back as
path-qualified issues on a ValidationResult.
"""

import logging
import os
from typing import List

from pydantic import ValidationError

from botconfig.agents.scope import resolve_agent_workspace_dir, resolve_default_agent_id
from botconfig.config.agent_dirs import find_duplicate_agent_dirs, format_duplicate_agent_dir_error
from botconfig.config.defaults import apply_model_defaults, apply_session_defaults
from botconfig.config.legacy import find_legacy_config_issues
from botconfig.config.schema import BotConfig
from botconfig.config.types import ConfigValidationIssue, ValidationResult
from botconfig.plugins import loader as plugin_loader
from botconfig.utils.paths import resolve_user_path

logger = logging.getLogger(__name__)


def _schema_issues(exc: ValidationError) -> List[ConfigValidationIssue]:
    return [
        ConfigValidationIssue(
            path='.'.join(str(part) for part in err.get('loc', ())),
            message=err['msg'],
        )
        for err in exc.errors()
    ]


def validate_config_object(raw) -> ValidationResult:
    legacy_issues = find_legacy_config_issues(raw)
    if legacy_issues:
        return ValidationResult.failure(
            ConfigValidationIssue(path=issue.path, message=issue.message)
            for issue in legacy_issues
        )

    try:
        validated = BotConfig.model_validate(raw)
    except ValidationError as e:
        return ValidationResult.failure(_schema_issues(e))

    duplicates = find_duplicate_agent_dirs(validated)
    if duplicates:
        return ValidationResult.failure([
            ConfigValidationIssue(
                path='agents.list',
                message=format_duplicate_agent_dir_error(duplicates),
            )
        ])

    return ValidationResult.success(apply_model_defaults(apply_session_defaults(validated)))


def _unknown_plugin_issue(path, plugin_id) -> ConfigValidationIssue:
    return ConfigValidationIssue(path=path, message=f"plugin not found: {plugin_id}")


def validate_config_object_with_plugins(raw) -> ValidationResult:
    base = validate_config_object(raw)
    if not base.ok:
        return base

    config = base.config
    issues: List[ConfigValidationIssue] = []
    plugins_config = config.plugins

    load_paths = []
    if plugins_config and plugins_config.load and plugins_config.load.paths:
        load_paths = plugins_config.load.paths
    for load_path in load_paths:
        if not isinstance(load_path, str) or not load_path.strip():
            continue
        resolved = resolve_user_path(load_path)
        if not os.path.exists(resolved):
            issues.append(ConfigValidationIssue(
                path='plugins.load.paths',
                message=f"plugin path not found: {resolved}",
            ))

    workspace_dir = resolve_agent_workspace_dir(config, resolve_default_agent_id(config))
    registry = plugin_loader.load_plugins(
        config,
        workspace_dir=workspace_dir or None,
        cache=False,
        mode='validate',
    )
    known_ids = set(registry.ids())

    entries = (plugins_config.entries if plugins_config else None) or {}
    for plugin_id in entries:
        if plugin_id not in known_ids:
            issues.append(_unknown_plugin_issue(f"plugins.entries.{plugin_id}", plugin_id))

    for field_name in ('allow', 'deny'):
        for plugin_id in (getattr(plugins_config, field_name, None) or []):
            if not isinstance(plugin_id, str) or not plugin_id.strip():
                continue
            if plugin_id not in known_ids:
                issues.append(_unknown_plugin_issue(f"plugins.{field_name}", plugin_id))

    memory_slot = None
    if plugins_config and plugins_config.slots:
        memory_slot = plugins_config.slots.memory
    if isinstance(memory_slot, str) and memory_slot.strip() and memory_slot not in known_ids:
        issues.append(_unknown_plugin_issue('plugins.slots.memory', memory_slot))

    for diag in registry.diagnostics:
        if diag.level != 'error':
            continue
        path = f"plugins.entries.{diag.plugin_id}" if diag.plugin_id else 'plugins'
        label = f"plugin {diag.plugin_id}" if diag.plugin_id else 'plugin'
        issues.append(ConfigValidationIssue(path=path, message=f"{label}: {diag.message}"))

    if issues:
        logger.debug(f"Plugin validation reported {len(issues)} issue(s)")
        return ValidationResult.failure(issues)
    return base
