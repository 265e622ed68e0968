from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

PLUGIN_ORIGINS = ('config', 'workspace', 'global', 'bundled')
LOAD_MODES = ('full', 'validate')


@dataclass
class PluginRecord:
    """What the loader knows about one discovered plugin."""
    id: str
    name: str
    source: str
    origin: str
    enabled: bool
    status: str  # 'loaded' | 'disabled' | 'error'
    description: str = ''
    kind: Optional[str] = None
    error: Optional[str] = None
    tool_names: List[str] = field(default_factory=list)
    hook_names: List[str] = field(default_factory=list)
    channel_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'kind': self.kind,
            'source': self.source,
            'origin': self.origin,
            'enabled': self.enabled,
            'status': self.status,
            'error': self.error,
            'tools': list(self.tool_names),
            'hooks': list(self.hook_names),
            'channels': list(self.channel_ids),
        }


@dataclass(frozen=True)
class PluginDiagnostic:
    level: str  # 'warn' | 'error'
    message: str
    plugin_id: Optional[str] = None
    source: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'level': self.level,
            'message': self.message,
            'pluginId': self.plugin_id,
            'source': self.source,
        }


class PluginRegistry:
    def __init__(self):
        self.plugins: List[PluginRecord] = []
        self.diagnostics: List[PluginDiagnostic] = []
        self.tools: List[Dict[str, Any]] = []      # {'plugin_id', 'tool'}
        self.hooks: List[Dict[str, Any]] = []      # {'plugin_id', 'event', 'handler'}
        self.channels: List[Dict[str, Any]] = []   # {'plugin_id', 'channel'}

    def add(self, record: PluginRecord) -> PluginRecord:
        self.plugins.append(record)
        return record

    def has(self, plugin_id) -> bool:
        return any(record.id == plugin_id for record in self.plugins)

    def get(self, plugin_id) -> Optional[PluginRecord]:
        for record in self.plugins:
            if record.id == plugin_id:
                return record
        return None

    def ids(self) -> List[str]:
        return [record.id for record in self.plugins]

    def warn(self, message, plugin_id=None, source=None):
        self.diagnostics.append(PluginDiagnostic('warn', message, plugin_id, source))

    def error(self, message, plugin_id=None, source=None):
        self.diagnostics.append(PluginDiagnostic('error', message, plugin_id, source))

    def errors(self) -> List[PluginDiagnostic]:
        return [diag for diag in self.diagnostics if diag.level == 'error']

    def hooks_for(self, event: str) -> List[Callable]:
        return [entry['handler'] for entry in self.hooks if entry['event'] == event]

    def copy(self) -> 'PluginRegistry':
        """Copy records and lists; registered tool and channel objects are shared."""
        clone = PluginRegistry()
        clone.plugins = [
            replace(record,
                    tool_names=list(record.tool_names),
                    hook_names=list(record.hook_names),
                    channel_ids=list(record.channel_ids))
            for record in self.plugins
        ]
        clone.diagnostics = list(self.diagnostics)
        clone.tools = [dict(entry) for entry in self.tools]
        clone.hooks = [dict(entry) for entry in self.hooks]
        clone.channels = [dict(entry) for entry in self.channels]
        return clone
