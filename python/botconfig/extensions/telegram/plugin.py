from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TelegramPluginConfig(BaseModel):
    model_config = ConfigDict(extra='forbid', alias_generator=to_camel, populate_by_name=True)

    bot_token: Optional[str] = None
    allow_from: List[str] = []


class TelegramChannel:
    id = 'telegram'
    name = 'Telegram'

    def __init__(self, settings: TelegramPluginConfig):
        self.settings = settings


def register(api):
    api.register_channel(TelegramChannel(TelegramPluginConfig.model_validate(api.plugin_config)))


plugin = {
    'id': 'telegram',
    'name': 'Telegram',
    'description': 'Telegram bot channel',
    'kind': 'channel',
    'config_schema': TelegramPluginConfig,
    'register': register,
}
