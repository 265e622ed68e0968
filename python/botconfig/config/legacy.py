"""
Detection of config shapes that older releases accepted.

Legacy keys are reported before schema validation so operators get a pointer
to the new location instead of a generic "unrecognized key" error.
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence


@dataclass(frozen=True)
class LegacyConfigIssue:
    path: str
    message: str


@dataclass(frozen=True)
class LegacyConfigRule:
    path: Sequence[str]
    message: str
    match: Callable[[object], bool] = lambda value: True


LEGACY_CONFIG_RULES = [
    LegacyConfigRule(
        path=('agent',),
        message='agent.* was moved; use agents.defaults (and agents.list for per-agent overrides) instead.',
    ),
    LegacyConfigRule(
        path=('routing', 'allowFrom'),
        message='routing.allowFrom was removed; use channels.whatsapp.allowFrom instead.',
    ),
    LegacyConfigRule(
        path=('identity',),
        message='identity was moved; use agents.list[].identity instead.',
    ),
    LegacyConfigRule(
        path=('gateway', 'token'),
        message='gateway.token is ignored; use gateway.auth.token instead.',
    ),
    LegacyConfigRule(
        path=('plugins', 'paths'),
        message='plugins.paths was renamed; use plugins.load.paths instead.',
        match=lambda value: isinstance(value, list),
    ),
]


def _lookup(raw, path):
    cursor = raw
    for key in path:
        if not isinstance(cursor, dict) or key not in cursor:
            return False, None
        cursor = cursor[key]
    return True, cursor


def find_legacy_config_issues(raw) -> List[LegacyConfigIssue]:
    """Return one issue per legacy rule that matches the raw config."""
    if not isinstance(raw, dict):
        return []
    issues = []
    for rule in LEGACY_CONFIG_RULES:
        found, value = _lookup(raw, rule.path)
        if found and rule.match(value):
            issues.append(LegacyConfigIssue(path='.'.join(rule.path), message=rule.message))
    return issues
