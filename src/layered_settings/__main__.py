from __future__ import annotations

import argparse
import dataclasses
import importlib
import json
import logging
import sys
from typing import Optional, Sequence

import yaml
from pydantic import TypeAdapter

from layered_settings.errors import ConfigError
from layered_settings.interfaces import ConfigLoader
from layered_settings.loader import LayeredConfigLoader
from layered_settings.logging import LoggingSettings, init_logging
from layered_settings.profile import DEFAULT_PROFILE, ConfigProfile, profile_for

logger = logging.getLogger(__name__)

_PROFILE_OPTIONS = {
    "prefix": "prefix",
    "separator": "separator",
    "config_dir": "configuration_dir",
    "default_environment": "default_environment",
    "environment_variable": "environment_variable",
    "dotenv": "dotenv_path",
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="layered-settings", description="Inspect layered configuration")
    parser.add_argument("--base-dir", default=None, help="Directory holding the configuration dir (default: cwd)")
    parser.add_argument("--prefix", default=None, help="Environment variable override prefix (default: APP)")
    parser.add_argument("--separator", default=None, help="Nested key separator (default: __)")
    parser.add_argument("--config-dir", default=None, help="Configuration directory name (default: configuration)")
    parser.add_argument("--default-environment", default=None, help="Environment used when unset (default: dev)")
    parser.add_argument(
        "--environment-variable",
        default=None,
        help="Variable naming the active environment (default: APP_ENVIRONMENT)",
    )
    parser.add_argument(
        "--optional-environment-file",
        action="store_true",
        help="Do not fail when the environment-specific file is missing",
    )
    parser.add_argument("--dotenv", default=None, help="Read additional variables from this .env file")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: env
    subparsers.add_parser("env", help="Print the detected environment")

    # Command: sources
    subparsers.add_parser("sources", help="Print the source chain, lowest precedence first")

    # Command: show
    show_parser = subparsers.add_parser("show", help="Print the merged configuration tree")
    show_parser.add_argument("--format", choices=("yaml", "json"), default="yaml")

    # Command: check
    check_parser = subparsers.add_parser("check", help="Decode the configuration into a settings type")
    check_parser.add_argument("--settings", required=True, help="Settings type as module:QualifiedName")

    return parser


def _import_settings_type(target_path: str) -> type:
    module_name, sep, qualname = target_path.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Expected module:QualifiedName, got: {target_path}")
    target = importlib.import_module(module_name)
    for attr in qualname.split("."):
        target = getattr(target, attr)
    return target


def _build_profile(args: argparse.Namespace, base: ConfigProfile) -> ConfigProfile:
    overrides = {
        field: getattr(args, option)
        for option, field in _PROFILE_OPTIONS.items()
        if getattr(args, option) is not None
    }
    if args.optional_environment_file:
        overrides["environment_file_required"] = False
    return dataclasses.replace(base, **overrides)


def _run(args: argparse.Namespace) -> None:
    settings_type = _import_settings_type(args.settings) if args.command == "check" else None
    base_profile = profile_for(settings_type) if settings_type is not None else DEFAULT_PROFILE
    loader: ConfigLoader = LayeredConfigLoader(_build_profile(args, base_profile), base_dir=args.base_dir)

    if args.command == "env":
        print(loader.environment())
    elif args.command == "sources":
        for source in loader.sources():
            print(source.describe())
    elif args.command == "show":
        tree = loader.load_tree()
        if args.format == "json":
            print(json.dumps(tree, indent=2, sort_keys=True, default=str))
        else:
            print(yaml.safe_dump(tree, sort_keys=False, default_flow_style=False), end="")
    elif args.command == "check":
        settings = loader.load(settings_type)
        print(TypeAdapter(settings_type).dump_json(settings, indent=2).decode("utf-8"))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        init_logging(LoggingSettings(level=args.log_level))
        _run(args)
    except ConfigError as e:
        logger.debug("cli.config_error command=%s", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (ImportError, AttributeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
