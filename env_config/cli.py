"""
Command-line diagnostics for env-config classes.

**Conceptual**: When a service refuses to start because of its configuration,
the quickest check is to run the same assembly by hand, in the same shell,
and see which variable is wrong. This module does exactly that.

Usage:
    python -m env_config check myapp.settings:AppConfig
    python -m env_config check myapp.settings:AppConfig --env-file .env -v
    python -m env_config vars myapp.settings:AppConfig

Exit codes:
    0: config assembled (check) / variables listed (vars)
    1: config error (missing or invalid variable)
    2: usage error (bad target, import failure, not an @env_config class)
"""

import argparse
import importlib
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from env_config.assembly import config_prefix, field_plan, from_env, is_env_config
from env_config.errors import ConfigDefinitionError, ConfigError
from env_config.logging_setup import setup_logging

_SECRET_MARKERS = ("KEY", "SECRET", "TOKEN", "PASSWORD")

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_USAGE_ERROR = 2


class TargetError(Exception):
    """The MODULE:CLASS argument does not name an @env_config class."""
    pass


def resolve_target(target: str) -> type:
    """
    Import ``module:ClassName`` and return the class.

    Raises:
        TargetError: Malformed target, import failure, missing attribute,
            or a class that was not decorated with @env_config.
    """
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise TargetError(f"expected MODULE:CLASS, got {target!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetError(f"cannot import {module_name}: {e}") from e
    except ConfigDefinitionError as e:
        raise TargetError(f"invalid config class in {module_name}: {e}") from e

    try:
        cls = getattr(module, class_name)
    except AttributeError:
        raise TargetError(f"{module_name} has no attribute {class_name}") from None

    if not is_env_config(cls):
        raise TargetError(f"{target} is not an @env_config class")
    return cls


def _display(env_var_name: str, value: object) -> str:
    if value is not None and any(marker in env_var_name for marker in _SECRET_MARKERS):
        return "'***'"
    return repr(value)


def cmd_check(cls: type) -> int:
    try:
        config = from_env(cls)
    except (ConfigError, ValueError) as e:
        # ValueError: validation in the class's own __post_init__
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    for spec in field_plan(cls):
        value = getattr(config, spec.name)
        print(f"{spec.env_var_name} -> {spec.name} = {_display(spec.env_var_name, value)}")
    return EXIT_OK


def cmd_vars(cls: type) -> int:
    prefix = config_prefix(cls)
    print(f"# {cls.__name__} (prefix: {prefix if prefix is not None else 'none'})")
    for spec in field_plan(cls):
        kind = "optional" if spec.optional else "required"
        type_name = getattr(spec.target_type, "__name__", repr(spec.target_type))
        print(f"{spec.env_var_name}\t{kind}\t{type_name}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="env_config",
        description="Check configuration classes against the current environment.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", parents=[common], help="Assemble a config class and print its values")
    check.add_argument("target", help="MODULE:CLASS of an @env_config class")
    check.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load variables from this .env file first (existing variables win)",
    )

    listing = subparsers.add_parser("vars", parents=[common], help="List the variables a config class reads")
    listing.add_argument("target", help="MODULE:CLASS of an @env_config class")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if getattr(args, "env_file", None) is not None:
        if not args.env_file.is_file():
            print(f"error: env file not found: {args.env_file}", file=sys.stderr)
            return EXIT_USAGE_ERROR
        load_dotenv(dotenv_path=args.env_file, override=False)

    try:
        cls = resolve_target(args.target)
    except TargetError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    if args.command == "check":
        return cmd_check(cls)
    return cmd_vars(cls)
