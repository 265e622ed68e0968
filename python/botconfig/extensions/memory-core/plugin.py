from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MemoryCoreConfig(BaseModel):
    model_config = ConfigDict(extra='forbid', alias_generator=to_camel, populate_by_name=True)

    max_results: int = Field(default=6, gt=0)
    min_score: Optional[float] = Field(default=None, ge=0, le=1)


class MemorySearchTool:
    name = 'memory_search'
    description = 'Search stored memories for relevant notes'

    def __init__(self, settings: MemoryCoreConfig):
        self.settings = settings


class MemoryGetTool:
    name = 'memory_get'
    description = 'Read a stored memory by id'


def register(api):
    settings = MemoryCoreConfig.model_validate(api.plugin_config)
    api.register_tool(MemorySearchTool(settings))
    api.register_tool(MemoryGetTool())


plugin = {
    'id': 'memory-core',
    'name': 'Memory (Core)',
    'description': 'File-backed memory search tools',
    'kind': 'memory',
    'config_schema': MemoryCoreConfig,
    'register': register,
}
