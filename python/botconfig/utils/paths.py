import os
from pathlib import Path

STATE_DIR_ENV = 'BOTCONFIG_STATE_DIR'
DEFAULT_STATE_DIRNAME = '.botconfig'


def resolve_user_path(value: str) -> str:
    """Expand ~ and make a user supplied path absolute. Blank input stays blank.

    Pure path arithmetic: the filesystem is never consulted, so strings the OS
    would reject (embedded NUL) come back as paths that simply do not exist.
    """
    trimmed = value.strip()
    if not trimmed:
        return trimmed
    return os.path.abspath(os.path.expanduser(trimmed))


def resolve_state_dir() -> Path:
    """Directory holding agent dirs, workspaces and user extensions."""
    override = os.environ.get(STATE_DIR_ENV, '').strip()
    if override:
        return Path(resolve_user_path(override))
    return Path.home() / DEFAULT_STATE_DIRNAME
