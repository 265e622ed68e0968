"""
Config schema for bot configuration files.

Every section is optional. Keys are camelCase on the wire and snake_case on the
models; unknown keys are rejected so typos surface as validation issues.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SchemaModel(BaseModel):
    model_config = ConfigDict(
        extra='forbid',
        populate_by_name=True,
        alias_generator=to_camel,
    )


# --- Gateway ---

class GatewayAuthConfig(SchemaModel):
    mode: Optional[Literal['token', 'password']] = None
    token: Optional[str] = None
    password: Optional[str] = None


class GatewayConfig(SchemaModel):
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    host: Optional[str] = None
    auth: Optional[GatewayAuthConfig] = None


# --- Agents ---

class AgentIdentity(SchemaModel):
    name: Optional[str] = None
    emoji: Optional[str] = None
    theme: Optional[str] = None


class AgentConfig(SchemaModel):
    id: str
    default: Optional[bool] = None
    name: Optional[str] = None
    workspace: Optional[str] = None
    agent_dir: Optional[str] = None
    model: Optional[str] = None
    identity: Optional[AgentIdentity] = None

    @field_validator('id')
    @classmethod
    def _id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('agent id must not be empty')
        return value


class AgentDefaultsConfig(SchemaModel):
    workspace: Optional[str] = None
    model: Optional[str] = None


class AgentsConfig(SchemaModel):
    defaults: Optional[AgentDefaultsConfig] = None
    agent_list: Optional[List[AgentConfig]] = Field(default=None, alias='list')


# --- Session ---

class SessionConfig(SchemaModel):
    scope: Optional[Literal['per-sender', 'global']] = None
    main_key: Optional[str] = None
    idle_minutes: Optional[int] = Field(default=None, gt=0)
    store: Optional[str] = None


# --- Models ---

class ModelDefinition(SchemaModel):
    id: str
    name: Optional[str] = None
    reasoning: Optional[bool] = None
    input: Optional[List[Literal['text', 'image']]] = None
    context_window: Optional[int] = Field(default=None, gt=0)
    max_tokens: Optional[int] = Field(default=None, gt=0)


class ModelProviderConfig(SchemaModel):
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    api: Optional[str] = None
    models: List[ModelDefinition] = Field(default_factory=list)


class ModelsConfig(SchemaModel):
    mode: Optional[Literal['merge', 'replace']] = None
    providers: Optional[Dict[str, ModelProviderConfig]] = None


# --- Plugins ---

class PluginEntryConfig(SchemaModel):
    enabled: Optional[bool] = None
    config: Optional[Dict[str, Any]] = None


class PluginLoadConfig(SchemaModel):
    paths: Optional[List[str]] = None


class PluginSlotsConfig(SchemaModel):
    memory: Optional[str] = None


class PluginsConfig(SchemaModel):
    enabled: Optional[bool] = None
    allow: Optional[List[str]] = None
    deny: Optional[List[str]] = None
    load: Optional[PluginLoadConfig] = None
    slots: Optional[PluginSlotsConfig] = None
    entries: Optional[Dict[str, PluginEntryConfig]] = None


# --- Root ---

class MetaConfig(SchemaModel):
    last_touched_version: Optional[str] = None
    last_touched_at: Optional[str] = None


class BotConfig(SchemaModel):
    meta: Optional[MetaConfig] = None
    gateway: Optional[GatewayConfig] = None
    agents: Optional[AgentsConfig] = None
    session: Optional[SessionConfig] = None
    models: Optional[ModelsConfig] = None
    channels: Optional[Dict[str, Any]] = None
    memory: Optional[Dict[str, Any]] = None
    cron: Optional[Dict[str, Any]] = None
    plugins: Optional[PluginsConfig] = None

    def to_dict(self) -> dict:
        """Serialize back to the camelCase shape found in config files."""
        return self.model_dump(by_alias=True, exclude_none=True)


def get_config_json_schema() -> dict:
    """Return a JSON Schema dict describing valid config objects."""
    return BotConfig.model_json_schema(by_alias=True)
