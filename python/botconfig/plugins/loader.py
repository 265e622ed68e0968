"""
Plugin loader.

Builds a PluginRegistry for a config and workspace: discovers candidates,
resolves which are enabled, imports the enabled ones, validates their entry
config and (in "full" mode) lets them register tools, hooks and channels.

Problems with individual plugins never abort the load; they are recorded on the
registry as diagnostics so callers can report them together.
"""

import importlib.util
import json
import logging
import re
import sys
from dataclasses import asdict
from typing import Dict, Optional

from botconfig.config.schema import BotConfig
from botconfig.plugins.config_state import (
    normalize_plugins_config,
    resolve_enable_state,
    resolve_memory_slot_decision,
)
from botconfig.plugins.discovery import PluginCandidate, discover_plugin_candidates
from botconfig.plugins.schema import validate_plugin_config
from botconfig.plugins.types import LOAD_MODES, PluginRecord, PluginRegistry
from botconfig.utils.paths import resolve_state_dir

_registry_cache: Dict[str, PluginRegistry] = {}

MODULE_PREFIX = 'botconfig_plugins'


def clear_plugin_cache():
    _registry_cache.clear()


def _definition_attr(definition, name, default=None):
    if isinstance(definition, dict):
        return definition.get(name, default)
    return getattr(definition, name, default)


def _module_name(candidate: PluginCandidate) -> str:
    safe = re.sub(r'\W', '_', candidate.plugin_id)
    return f"{MODULE_PREFIX}.{candidate.origin}.{safe}"


def _import_candidate(candidate: PluginCandidate):
    module_name = _module_name(candidate)
    search_locations = [str(candidate.root_dir)] if candidate.is_package else None
    spec = importlib.util.spec_from_file_location(
        module_name,
        candidate.source,
        submodule_search_locations=search_locations,
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot import {candidate.source}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


class PluginApi:
    """Handle given to a plugin's ``register(api)``."""

    def __init__(self, registry: PluginRegistry, record: PluginRecord,
                 config: BotConfig, plugin_config: Optional[dict]):
        self._registry = registry
        self._record = record
        self.id = record.id
        self.name = record.name
        self.source = record.source
        self.config = config
        self.plugin_config = plugin_config or {}
        self.logger = logging.getLogger(f"botconfig.plugins.{record.id}")

    def register_tool(self, tool):
        name = _definition_attr(tool, 'name')
        if not name:
            raise ValueError('tool must have a name')
        self._registry.tools.append({'plugin_id': self.id, 'tool': tool})
        self._record.tool_names.append(name)

    def register_hook(self, event: str, handler):
        if not callable(handler):
            raise TypeError(f"hook handler for {event} is not callable")
        self._registry.hooks.append({'plugin_id': self.id, 'event': event, 'handler': handler})
        self._record.hook_names.append(event)

    def register_channel(self, channel):
        channel_id = _definition_attr(channel, 'id') or _definition_attr(channel, 'name')
        if not channel_id:
            raise ValueError('channel must have an id')
        self._registry.channels.append({'plugin_id': self.id, 'channel': channel})
        self._record.channel_ids.append(channel_id)


def _cache_key(workspace_dir, normalized, mode) -> str:
    return json.dumps(
        {
            'workspace': workspace_dir,
            'state_dir': str(resolve_state_dir()),
            'mode': mode,
            'plugins': asdict(normalized),
        },
        sort_keys=True,
        default=str,
    )


def _admit(registry: PluginRegistry, record: PluginRecord, candidate: PluginCandidate,
           seen: Dict[str, PluginCandidate], normalized, log: logging.Logger) -> bool:
    """Claim ``record.id`` for ``candidate`` and check it is enabled.

    Returns False (after adding a disabled record) for a duplicate id or a
    plugin the config switches off.
    """
    plugin_id = record.id
    if plugin_id in seen:
        winner = seen[plugin_id]
        record.error = f"overridden by {winner.origin} plugin"
        registry.add(record)
        registry.warn(
            f"duplicate plugin id; {winner.origin} plugin at {winner.source} takes precedence",
            plugin_id=plugin_id,
            source=record.source,
        )
        return False
    seen[plugin_id] = candidate

    enabled, reason = resolve_enable_state(plugin_id, candidate.origin, normalized)
    if not enabled:
        record.error = reason
        registry.add(record)
        log.debug(f"Plugin {plugin_id} disabled: {reason}")
        return False
    return True


def load_plugins(
    config: BotConfig,
    workspace_dir: Optional[str] = None,
    cache: bool = True,
    mode: str = 'full',
    logger: Optional[logging.Logger] = None,
) -> PluginRegistry:
    """Discover and load plugins for ``config``. See module docstring.

    Cached registries are handed out as copies, so callers may mutate the result.
    """
    if mode not in LOAD_MODES:
        raise ValueError(f"Unknown plugin load mode: {mode}")
    log = logger or logging.getLogger(__name__)
    normalized = normalize_plugins_config(config.plugins)

    cache_key = _cache_key(workspace_dir, normalized, mode)
    if cache and cache_key in _registry_cache:
        return _registry_cache[cache_key].copy()

    registry = PluginRegistry()
    candidates, discovery_diagnostics = discover_plugin_candidates(
        workspace_dir=workspace_dir,
        extra_paths=normalized.load_paths,
    )
    registry.diagnostics.extend(discovery_diagnostics)

    seen: Dict[str, PluginCandidate] = {}
    memory_selected: Optional[str] = None

    for candidate in candidates:
        source = str(candidate.source)
        manifest = candidate.manifest
        record = PluginRecord(
            id=candidate.plugin_id,
            name=str(manifest.get('name') or candidate.plugin_id),
            description=str(manifest.get('description') or ''),
            kind=manifest.get('kind'),
            source=source,
            origin=candidate.origin,
            enabled=False,
            status='disabled',
        )
        if not _admit(registry, record, candidate, seen, normalized, log):
            continue

        try:
            module = _import_candidate(candidate)
        except Exception as e:
            _fail(registry, record, f"failed to load plugin: {e}", log)
            continue

        definition = getattr(module, 'plugin', None)
        if definition is None:
            _fail(registry, record, "plugin export missing (expected a module-level 'plugin')", log)
            continue

        declared_id = _definition_attr(definition, 'id')
        declared_id = declared_id.strip() if isinstance(declared_id, str) else ''
        if declared_id and declared_id != record.id:
            if candidate.has_manifest_id:
                registry.warn(
                    f'plugin id mismatch (manifest uses "{record.id}", plugin declares "{declared_id}")',
                    plugin_id=record.id,
                    source=source,
                )
            else:
                # Without a manifest the module's own declaration names the plugin.
                del seen[record.id]
                record.id = declared_id
                if record.name == candidate.id_hint:
                    record.name = declared_id
                if not _admit(registry, record, candidate, seen, normalized, log):
                    continue
        plugin_id = record.id
        record.name = str(_definition_attr(definition, 'name') or record.name)
        record.description = str(_definition_attr(definition, 'description') or record.description)
        record.kind = _definition_attr(definition, 'kind') or record.kind

        memory_enabled, memory_reason, selected = resolve_memory_slot_decision(
            plugin_id, record.kind, normalized.memory_slot, memory_selected,
        )
        if not memory_enabled:
            record.error = memory_reason
            registry.add(record)
            continue
        if selected:
            memory_selected = plugin_id

        plugin_config = normalized.entries.get(plugin_id, {}).get('config')
        try:
            config_ok, config_errors = validate_plugin_config(
                _definition_attr(definition, 'config_schema'), plugin_config,
            )
        except Exception as e:
            config_ok, config_errors = False, [f"schema validation raised: {e}"]
        if not config_ok:
            _fail(registry, record, f"invalid config: {', '.join(config_errors)}", log)
            continue

        record.enabled = True
        record.status = 'loaded'
        registry.add(record)

        if mode == 'validate':
            continue

        register = _definition_attr(definition, 'register')
        if not callable(register):
            continue
        try:
            register(PluginApi(registry, record, config, plugin_config))
        except Exception as e:
            _fail(registry, record, f"plugin failed during register: {e}", log, add=False)
            continue
        log.debug(f"Registered plugin {plugin_id} from {source}")

    slot = normalized.memory_slot
    if normalized.enabled and slot and memory_selected is None:
        if not registry.has(slot) or registry.get(slot).status == 'loaded':
            registry.warn(f"memory slot plugin not found or not marked as memory: {slot}")

    if cache:
        _registry_cache[cache_key] = registry.copy()
    return registry


def _fail(registry: PluginRegistry, record: PluginRecord, message: str,
          log: logging.Logger, add: bool = True):
    record.enabled = False
    record.status = 'error'
    record.error = message
    if add:
        registry.add(record)
    registry.error(message, plugin_id=record.id, source=record.source)
    log.warning(f"Plugin {record.id}: {message}")
