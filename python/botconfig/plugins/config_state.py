"""
Decide which discovered plugins are enabled for a given config.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from botconfig.config.schema import PluginsConfig

DEFAULT_MEMORY_SLOT = 'memory-core'
BUNDLED_ENABLED_BY_DEFAULT = frozenset({'memory-core'})


@dataclass
class NormalizedPluginsConfig:
    enabled: bool = True
    allow: List[str] = field(default_factory=list)
    deny: List[str] = field(default_factory=list)
    load_paths: List[str] = field(default_factory=list)
    memory_slot: Optional[str] = DEFAULT_MEMORY_SLOT  # None means the slot is switched off
    entries: Dict[str, dict] = field(default_factory=dict)


def _clean_list(values) -> List[str]:
    if not values:
        return []
    return [value.strip() for value in values if isinstance(value, str) and value.strip()]


def _normalize_slot(value) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_MEMORY_SLOT
    if value.strip().lower() == 'none':
        return None
    return value.strip()


def normalize_plugins_config(plugins: Optional[PluginsConfig]) -> NormalizedPluginsConfig:
    if plugins is None:
        return NormalizedPluginsConfig()
    entries = {}
    for plugin_id, entry in (plugins.entries or {}).items():
        if not plugin_id.strip():
            continue
        entries[plugin_id.strip()] = {
            'enabled': entry.enabled if entry is not None else None,
            'config': entry.config if entry is not None else None,
        }
    return NormalizedPluginsConfig(
        enabled=plugins.enabled is not False,
        allow=_clean_list(plugins.allow),
        deny=_clean_list(plugins.deny),
        load_paths=_clean_list(plugins.load.paths if plugins.load else None),
        memory_slot=_normalize_slot(plugins.slots.memory if plugins.slots else None),
        entries=entries,
    )


def resolve_enable_state(plugin_id: str, origin: str,
                         config: NormalizedPluginsConfig) -> Tuple[bool, Optional[str]]:
    """Return (enabled, reason). ``reason`` explains a disabled plugin."""
    if not config.enabled:
        return False, 'plugins disabled'
    if plugin_id in config.deny:
        return False, 'blocked by denylist'
    if config.allow and plugin_id not in config.allow:
        return False, 'not in allowlist'
    if config.memory_slot == plugin_id:
        return True, None
    entry_enabled = config.entries.get(plugin_id, {}).get('enabled')
    if entry_enabled is True:
        return True, None
    if entry_enabled is False:
        return False, 'disabled in config'
    if origin == 'bundled':
        if plugin_id in BUNDLED_ENABLED_BY_DEFAULT:
            return True, None
        return False, 'bundled (disabled by default)'
    return True, None


def resolve_memory_slot_decision(plugin_id: str, kind: Optional[str], slot: Optional[str],
                                 selected_id: Optional[str]) -> Tuple[bool, Optional[str], bool]:
    """Return (enabled, reason, selected) for a plugin competing for the memory slot."""
    if kind != 'memory':
        return True, None, False
    if slot is None:
        return False, 'memory slot disabled', False
    if slot != plugin_id:
        return False, f'memory slot set to "{slot}"', False
    if selected_id is not None:
        return False, f'memory slot already filled by "{selected_id}"', False
    return True, None, True
