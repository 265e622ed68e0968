from botconfig.config.schema import BotConfig, SessionConfig

DEFAULT_MAIN_KEY = 'main'
DEFAULT_CONTEXT_TOKENS = 200_000
DEFAULT_MAX_TOKENS = 8192
DEFAULT_MODEL_INPUT = ['text']


def apply_session_defaults(config: BotConfig) -> BotConfig:
    """Return a copy of ``config`` with session.mainKey filled in."""
    config = config.model_copy(deep=True)
    if config.session is None:
        config.session = SessionConfig()
    if not (config.session.main_key or '').strip():
        config.session.main_key = DEFAULT_MAIN_KEY
    return config


def apply_model_defaults(config: BotConfig) -> BotConfig:
    """Return a copy of ``config`` where every provider model has limits set."""
    config = config.model_copy(deep=True)
    if config.models is None or not config.models.providers:
        return config
    for provider in config.models.providers.values():
        for model in provider.models:
            if not model.name:
                model.name = model.id
            if model.reasoning is None:
                model.reasoning = False
            if not model.input:
                model.input = list(DEFAULT_MODEL_INPUT)
            if model.context_window is None:
                model.context_window = DEFAULT_CONTEXT_TOKENS
            if model.max_tokens is None:
                model.max_tokens = min(DEFAULT_MAX_TOKENS, model.context_window)
    return config
