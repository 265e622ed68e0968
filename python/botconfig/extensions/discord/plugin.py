from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DiscordPluginConfig(BaseModel):
    model_config = ConfigDict(extra='forbid', alias_generator=to_camel, populate_by_name=True)

    token: Optional[str] = None
    allow_from: List[str] = []
    mention_only: bool = True


class DiscordChannel:
    id = 'discord'
    name = 'Discord'

    def __init__(self, settings: DiscordPluginConfig):
        self.settings = settings


def register(api):
    settings = DiscordPluginConfig.model_validate(api.plugin_config)
    api.register_channel(DiscordChannel(settings))


plugin = {
    'id': 'discord',
    'name': 'Discord',
    'description': 'Discord bot channel',
    'kind': 'channel',
    'config_schema': DiscordPluginConfig,
    'register': register,
}
