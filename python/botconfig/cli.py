#!/usr/bin/env python3
"""
botconfig: bot configuration checker

Validates a bot config file and cross-checks its plugin references against the
plugins that actually load, before the bot is started.

Usage:
    botconfig validate                      # Validate the default config file
    botconfig validate --config bot.json5   # Validate a specific file
    botconfig validate --json               # Machine-readable output
    botconfig plugins list                  # Show discovered plugins
    botconfig schema                        # Print the config JSON Schema
"""

import argparse
import json
import logging
import sys

from botconfig.agents.scope import resolve_agent_workspace_dir, resolve_default_agent_id
from botconfig.config.loader import read_config_file_snapshot
from botconfig.config.schema import get_config_json_schema
from botconfig.plugins.loader import load_plugins

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')


def cmd_validate(args) -> int:
    snapshot = read_config_file_snapshot(args.config)
    if args.json:
        print(json.dumps({
            'path': snapshot.path,
            'exists': snapshot.exists,
            'valid': snapshot.valid,
            'issues': [issue.to_dict() for issue in snapshot.issues],
        }, indent=2))
        return 0 if snapshot.valid else 1

    if not snapshot.exists:
        print(f"No config at {snapshot.path}; defaults apply.")
    if snapshot.valid:
        print(f"Config valid: {snapshot.path}")
        return 0
    print(f"Config invalid: {snapshot.path}")
    for issue in snapshot.issues:
        print(f"  • {issue.path or '<root>'}: {issue.message}")
    return 1


def cmd_plugins_list(args) -> int:
    snapshot = read_config_file_snapshot(args.config, with_plugins=False)
    if not snapshot.valid:
        logging.error("Config is invalid; run `botconfig validate` for details")
        return 1
    config = snapshot.config
    workspace_dir = resolve_agent_workspace_dir(config, resolve_default_agent_id(config))
    registry = load_plugins(config, workspace_dir=workspace_dir, cache=False, mode='validate')

    if args.json:
        print(json.dumps({
            'plugins': [record.to_dict() for record in registry.plugins],
            'diagnostics': [diag.to_dict() for diag in registry.diagnostics],
        }, indent=2))
        return 0

    if not registry.plugins:
        print("No plugins found")
        return 0
    for record in registry.plugins:
        suffix = f" ({record.error})" if record.error else ''
        print(f"  • {record.id} [{record.origin}] {record.status}{suffix}")
    for diag in registry.diagnostics:
        target = diag.plugin_id or 'plugins'
        print(f"  {diag.level.upper()} {target}: {diag.message}")
    return 0


def cmd_schema(args) -> int:
    print(json.dumps(get_config_json_schema(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='botconfig',
        description='Validate bot configuration and plugin references',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  botconfig validate                     Validate the default config file
  botconfig validate --config bot.yaml   Validate a specific file
  botconfig plugins list --json          List discovered plugins as JSON
""",
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    validate_parser = subparsers.add_parser('validate', help='Validate a config file')
    validate_parser.add_argument('--config', '-c', help='Config file path')
    validate_parser.add_argument('--json', action='store_true', help='Print JSON output')
    validate_parser.set_defaults(func=cmd_validate)

    plugins_parser = subparsers.add_parser('plugins', help='Plugin inspection')
    plugins_sub = plugins_parser.add_subparsers(dest='plugins_command')
    list_parser = plugins_sub.add_parser('list', help='List discovered plugins')
    list_parser.add_argument('--config', '-c', help='Config file path')
    list_parser.add_argument('--json', action='store_true', help='Print JSON output')
    list_parser.set_defaults(func=cmd_plugins_list)

    schema_parser = subparsers.add_parser('schema', help='Print the config JSON Schema')
    schema_parser.set_defaults(func=cmd_schema)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    func = getattr(args, 'func', None)
    if func is None:
        parser.print_help()
        return 2
    return func(args)


if __name__ == "__main__":
    sys.exit(main())
