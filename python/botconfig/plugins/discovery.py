"""
Plugin discovery.

Plugins are found in, by precedence:
    1. plugins.load.paths from config
    2. <workspace>/.botconfig/extensions
    3. <state dir>/extensions
    4. the extensions bundled with this package

A plugin is either a single ``.py`` file or a directory holding ``plugin.py``
or ``__init__.py``. Directories may ship a ``plugin.yaml`` manifest naming
the plugin id, so disabled plugins can be listed without importing them:

    id: discord
    name: Discord
    description: Discord channel integration
    kind: channel
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from botconfig.plugins.types import PluginDiagnostic
from botconfig.utils.paths import resolve_state_dir, resolve_user_path

logger = logging.getLogger(__name__)

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
BUNDLED_EXTENSIONS_DIR = PACKAGE_ROOT / 'extensions'
WORKSPACE_EXTENSIONS_DIRNAME = Path('.botconfig') / 'extensions'
MANIFEST_FILENAME = 'plugin.yaml'
ENTRY_FILENAMES = ('plugin.py', '__init__.py')


@dataclass
class PluginCandidate:
    id_hint: str
    source: Path
    root_dir: Path
    origin: str
    is_package: bool = False
    manifest: dict = field(default_factory=dict)

    @property
    def has_manifest_id(self) -> bool:
        manifest_id = self.manifest.get('id')
        return isinstance(manifest_id, str) and bool(manifest_id.strip())

    @property
    def plugin_id(self) -> str:
        if self.has_manifest_id:
            return self.manifest['id'].strip()
        return self.id_hint


def read_plugin_manifest(path: Path) -> dict:
    """Parse a plugin.yaml. Raises ValueError when it is not a mapping."""
    data = yaml.safe_load(path.read_text(encoding='utf-8'))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError('manifest must be a mapping')
    return data


def _entry_file(directory: Path) -> Optional[Path]:
    for name in ENTRY_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _candidate_from_dir(directory: Path, origin: str,
                        diagnostics: List[PluginDiagnostic]) -> Optional[PluginCandidate]:
    entry = _entry_file(directory)
    if entry is None:
        return None
    manifest = {}
    manifest_path = directory / MANIFEST_FILENAME
    if manifest_path.is_file():
        try:
            manifest = read_plugin_manifest(manifest_path)
        except (yaml.YAMLError, ValueError) as e:
            diagnostics.append(PluginDiagnostic(
                level='error',
                message=f'invalid plugin manifest: {e}',
                source=str(manifest_path),
            ))
    return PluginCandidate(
        id_hint=directory.name,
        source=entry,
        root_dir=directory,
        origin=origin,
        is_package=entry.name == '__init__.py',
        manifest=manifest,
    )


def _candidate_from_file(path: Path, origin: str) -> Optional[PluginCandidate]:
    if path.suffix != '.py' or path.name.startswith('_'):
        return None
    return PluginCandidate(id_hint=path.stem, source=path, root_dir=path.parent, origin=origin)


def _scan_path(path: Path, origin: str, diagnostics: List[PluginDiagnostic]) -> List[PluginCandidate]:
    """A path is either one plugin or a directory of plugins."""
    if path.is_file():
        candidate = _candidate_from_file(path, origin)
        return [candidate] if candidate else []
    if not path.is_dir():
        return []

    candidate = _candidate_from_dir(path, origin, diagnostics)
    if candidate is not None:
        return [candidate]

    found = []
    for child in sorted(path.iterdir()):
        if child.name.startswith(('.', '_')):
            continue
        if child.is_dir():
            candidate = _candidate_from_dir(child, origin, diagnostics)
        else:
            candidate = _candidate_from_file(child, origin)
        if candidate is not None:
            found.append(candidate)
    return found


def discover_plugin_candidates(
    workspace_dir: Optional[str] = None,
    extra_paths: Optional[List[str]] = None,
    bundled_dir: Optional[Path] = None,
) -> Tuple[List[PluginCandidate], List[PluginDiagnostic]]:
    """Return candidates in precedence order plus any discovery diagnostics."""
    diagnostics: List[PluginDiagnostic] = []
    roots = []
    for raw_path in extra_paths or []:
        resolved = resolve_user_path(raw_path)
        if not resolved:
            continue
        if not os.path.exists(resolved):
            logger.debug(f"Skipping missing plugin path: {resolved}")
            continue
        roots.append((Path(resolved), 'config'))
    if workspace_dir:
        roots.append((Path(workspace_dir) / WORKSPACE_EXTENSIONS_DIRNAME, 'workspace'))
    roots.append((resolve_state_dir() / 'extensions', 'global'))
    roots.append((bundled_dir or BUNDLED_EXTENSIONS_DIR, 'bundled'))

    candidates = []
    seen_sources = set()
    for root, origin in roots:
        for candidate in _scan_path(root, origin, diagnostics):
            source_key = str(candidate.source.resolve())
            if source_key in seen_sources:
                continue
            seen_sources.add(source_key)
            candidates.append(candidate)
    logger.debug(f"Discovered {len(candidates)} plugin candidate(s)")
    return candidates, diagnostics
