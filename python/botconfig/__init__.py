"""botconfig: bot configuration and plugin reference validation."""

__version__ = '0.1.0'
