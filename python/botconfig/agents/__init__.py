"""
botconfig Agents Package

Resolution of agent ids, agent directories and workspaces from config.
"""

from botconfig.agents.scope import (
    DEFAULT_AGENT_ID,
    normalize_agent_id,
    list_agents,
    resolve_default_agent_id,
    resolve_agent_config,
    resolve_agent_dir,
    resolve_agent_workspace_dir,
)

__all__ = [
    'DEFAULT_AGENT_ID',
    'normalize_agent_id',
    'list_agents',
    'resolve_default_agent_id',
    'resolve_agent_config',
    'resolve_agent_dir',
    'resolve_agent_workspace_dir',
]
