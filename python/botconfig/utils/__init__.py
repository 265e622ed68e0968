"""
botconfig Utils Package

Filesystem path helpers shared by config, agent and plugin resolution.
"""

from botconfig.utils.paths import resolve_user_path, resolve_state_dir, STATE_DIR_ENV

__all__ = [
    'resolve_user_path',
    'resolve_state_dir',
    'STATE_DIR_ENV',
]
