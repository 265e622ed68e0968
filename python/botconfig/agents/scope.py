from pathlib import Path
from typing import Optional

from botconfig.utils.paths import resolve_state_dir, resolve_user_path

DEFAULT_AGENT_ID = 'main'


def normalize_agent_id(value: Optional[str]) -> str:
    normalized = (value or '').strip().lower()
    return normalized or DEFAULT_AGENT_ID


def list_agents(config) -> list:
    if config.agents is None or not config.agents.agent_list:
        return []
    return list(config.agents.agent_list)


def resolve_default_agent_id(config) -> str:
    """First agent flagged default, else the first listed agent, else 'main'."""
    agents = list_agents(config)
    if not agents:
        return DEFAULT_AGENT_ID
    for agent in agents:
        if agent.default:
            return normalize_agent_id(agent.id)
    return normalize_agent_id(agents[0].id)


def resolve_agent_config(config, agent_id: str):
    wanted = normalize_agent_id(agent_id)
    for agent in list_agents(config):
        if normalize_agent_id(agent.id) == wanted:
            return agent
    return None


def resolve_agent_workspace_dir(config, agent_id: str) -> str:
    agent_id = normalize_agent_id(agent_id)
    agent = resolve_agent_config(config, agent_id)
    if agent is not None and agent.workspace and agent.workspace.strip():
        return resolve_user_path(agent.workspace)

    state_dir = resolve_state_dir()
    if agent_id == resolve_default_agent_id(config):
        defaults = config.agents.defaults if config.agents else None
        if defaults is not None and defaults.workspace and defaults.workspace.strip():
            return resolve_user_path(defaults.workspace)
        return str(state_dir / 'workspace')
    return str(state_dir / f'workspace-{agent_id}')


def resolve_agent_dir(config, agent_id: str) -> str:
    agent_id = normalize_agent_id(agent_id)
    agent = resolve_agent_config(config, agent_id)
    if agent is not None and agent.agent_dir and agent.agent_dir.strip():
        return resolve_user_path(agent.agent_dir)
    return str(Path(resolve_state_dir()) / 'agents' / agent_id / 'agent')
