class SlackConfigSchema:
    """Hand-written validator; Slack needs both tokens or neither."""

    def validate(self, value):
        errors = []
        if not isinstance(value, dict):
            return {'ok': False, 'errors': ['config must be an object']}
        has_bot = bool(value.get('botToken'))
        has_app = bool(value.get('appToken'))
        if has_bot != has_app:
            errors.append('botToken and appToken must be set together')
        for key in value:
            if key not in ('botToken', 'appToken', 'channels'):
                errors.append(f'unknown key: {key}')
        return {'ok': not errors, 'errors': errors}


class SlackChannel:
    id = 'slack'
    name = 'Slack'

    def __init__(self, settings):
        self.settings = dict(settings)


def register(api):
    api.register_channel(SlackChannel(api.plugin_config))


plugin = {
    'id': 'slack',
    'name': 'Slack',
    'description': 'Slack app channel (socket mode)',
    'kind': 'channel',
    'config_schema': SlackConfigSchema(),
    'register': register,
}
