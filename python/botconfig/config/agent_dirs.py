"""Detect agents that would share one agent directory."""

from dataclasses import dataclass, field
from typing import Dict, List

from botconfig.agents.scope import list_agents, normalize_agent_id, resolve_agent_dir
from botconfig.config.schema import BotConfig


@dataclass
class DuplicateAgentDir:
    agent_dir: str
    agent_ids: List[str] = field(default_factory=list)


def find_duplicate_agent_dirs(config: BotConfig) -> List[DuplicateAgentDir]:
    by_dir: Dict[str, DuplicateAgentDir] = {}
    for agent in list_agents(config):
        agent_id = normalize_agent_id(agent.id)
        agent_dir = resolve_agent_dir(config, agent_id)
        entry = by_dir.setdefault(agent_dir, DuplicateAgentDir(agent_dir=agent_dir))
        if agent_id not in entry.agent_ids:
            entry.agent_ids.append(agent_id)
    return [entry for entry in by_dir.values() if len(entry.agent_ids) > 1]


def format_duplicate_agent_dir_error(dupes: List[DuplicateAgentDir]) -> str:
    lines = ['Duplicate agentDir detected (multi-agent config).',
             'Each agent must have a unique agentDir; sharing it causes auth/session state collisions.',
             '']
    for dupe in dupes:
        ids = ', '.join(f'"{agent_id}"' for agent_id in dupe.agent_ids)
        lines.append(f'- {dupe.agent_dir}: {ids}')
    lines.append('')
    lines.append('Fix: remove the shared agents.list[].agentDir override (or give each agent its own directory).')
    return '\n'.join(lines)
