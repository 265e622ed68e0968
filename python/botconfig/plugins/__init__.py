"""
botconfig Plugins Package

Plugin discovery, enable-state resolution and loading into a PluginRegistry.
"""

from botconfig.plugins.types import PluginRecord, PluginDiagnostic, PluginRegistry
from botconfig.plugins.loader import load_plugins, clear_plugin_cache, PluginApi

__all__ = [
    'PluginRecord',
    'PluginDiagnostic',
    'PluginRegistry',
    'PluginApi',
    'load_plugins',
    'clear_plugin_cache',
]
