"""
@file cli.py
@brief Command-line interface for uiauto-finders.

Exit codes: 0 found/valid, 1 usage or configuration error, 2 not found/invalid.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

from .actionlogger import ACTION_LOGGER
from .config import TimeConfig, timeout_overrides
from .exceptions import ConfigError, ElementNotFoundError, TimeoutError
from .node import UiElement, build_path
from .repository import ALLOWED_LOCATOR_KEYS, Repository, check_locator_patterns, finder_from_locator
from .resolver import Resolver
from .snapshot import load_tree
from .timinglogger import TIMING_LOGGER

_TRUTHY = {"1", "true", "yes", "on"}


def _resolve_timing_options(args: argparse.Namespace) -> Tuple[str, Dict[str, Any]]:
    """Resolve timing preset and CLI overrides without mutating global state."""
    preset = "default"
    if getattr(args, "ci", False):
        preset = "ci"
    elif getattr(args, "fast", False):
        preset = "fast"
    elif getattr(args, "slow", False):
        preset = "slow"

    timeout = getattr(args, "timeout", None)
    overrides = timeout_overrides(timeout) if timeout is not None else {}
    return preset, overrides


def _parse_locator(pairs: List[str]) -> Dict[str, str]:
    locator: Dict[str, str] = {}
    for item in pairs:
        if "=" not in item:
            raise ConfigError(f"Invalid --locator '{item}', expected KEY=VALUE")
        key, value = item.split("=", 1)
        key = key.strip()
        if key not in ALLOWED_LOCATOR_KEYS:
            raise ConfigError(
                f"Unknown locator key '{key}'. Allowed: {sorted(ALLOWED_LOCATOR_KEYS)}"
            )
        locator[key] = value
    check_locator_patterns(locator, "--locator")
    return locator


def _print_match(element: UiElement) -> None:
    print(f"+ Found: {element}")
    print(f"  - Path: {build_path(element)}")


def _configure_action_logger_from_env() -> None:
    """Configure action logging from environment variables."""
    if os.getenv("UIAUTO_ACTION_LOGGING", "").lower() not in _TRUTHY:
        ACTION_LOGGER.disable()
        return

    ACTION_LOGGER.configure(
        console=True,
        file_path=os.getenv("UIAUTO_ACTION_LOG_FILE"),
        level=os.getenv("UIAUTO_ACTION_LOG_LEVEL", "INFO"),
        format=os.getenv("UIAUTO_ACTION_LOG_FORMAT", "line"),
    )
    ACTION_LOGGER.enable()


def _configure_timing_logger_from_env() -> None:
    """Configure timing logging from environment variables."""
    if os.getenv("UIAUTO_TIMING_LOGGING", "").lower() not in _TRUTHY:
        TIMING_LOGGER.disable()
        return

    TIMING_LOGGER.configure(
        console=True,
        file_path=os.getenv("UIAUTO_TIMING_LOG_FILE"),
        level=os.getenv("UIAUTO_TIMING_LOG_LEVEL", "INFO"),
    )
    TIMING_LOGGER.enable()


def _cmd_find(args: argparse.Namespace) -> int:
    if bool(args.locator) == bool(args.element):
        print("Error: use either --locator or --element", file=sys.stderr)
        return 1
    if args.element and not args.elements:
        print("Error: --element requires --elements", file=sys.stderr)
        return 1

    try:
        if args.locator:
            finder = finder_from_locator(_parse_locator(args.locator))
            root = load_tree(args.tree)
            element = finder.find(root)
        else:
            repo = Repository(args.elements)
            preset, overrides = _resolve_timing_options(args)
            TimeConfig.install_run_config(TimeConfig.build_from(
                preset=preset,
                overrides=overrides,
                app_defaults={
                    "default_timeout": repo.app.default_timeout,
                    "polling_interval": repo.app.polling_interval,
                },
            ))
            try:
                element = Resolver(repo, lambda: load_tree(args.tree)).resolve(args.element)
            finally:
                TimeConfig.clear_run_config()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ElementNotFoundError, TimeoutError) as e:
        print(f"X Not found: {e}", file=sys.stderr)
        return 2

    _print_match(element)
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    if not args.tree and not args.elements:
        print("Error: one of --tree or --elements is required", file=sys.stderr)
        return 1

    errors: List[str] = []
    if args.tree:
        try:
            load_tree(args.tree)
            print(f"+ Tree snapshot is valid: {args.tree}")
        except ConfigError as e:
            errors.append(str(e))
            print(f"X Tree snapshot is invalid: {e}", file=sys.stderr)

    if args.elements:
        try:
            repo = Repository(args.elements)
            print(f"+ Elements file is valid: {args.elements}")
            print(f"  - Windows: {len(repo.list_windows())}")
            print(f"  - Elements: {len(repo.list_elements())}")
        except ConfigError as e:
            errors.append(str(e))
            print(f"X Elements file is invalid: {e}", file=sys.stderr)

    return 2 if errors else 0


def _cmd_list_elements(args: argparse.Namespace) -> int:
    try:
        repo = Repository(args.elements)
    except ConfigError as e:
        print(f"Error loading elements file: {e}", file=sys.stderr)
        return 1

    windows = repo.list_windows()
    print(f"Windows ({len(windows)}):")
    for name in windows:
        print(f"  - {name}: {repo.get_window_finder(name)}")

    elements = repo.list_elements()
    print(f"\nElements ({len(elements)}):")
    for name in elements:
        print(f"  - {name}: {repo.get_element_finder(name)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]
    _configure_action_logger_from_env()
    _configure_timing_logger_from_env()

    p = argparse.ArgumentParser(
        prog="uiauto-find",
        description="uiauto-finders - locate elements in UI tree snapshots",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    findp = sub.add_parser("find", help="Find the first matching element in a tree snapshot")
    findp.add_argument("--tree", "-t", required=True, help="Path to tree snapshot (YAML or JSON)")
    findp.add_argument("--locator", "-l", action="append", default=None, help="Locator in KEY=VALUE format (can be used multiple times)")
    findp.add_argument("--elements", "-e", default=None, help="Path to elements.yaml (object map)")
    findp.add_argument("--element", default=None, help="Element name from the object map")
    findp.add_argument("--timeout", type=float, default=None, help="Override resolve timeouts in seconds (element mode)")
    findp.add_argument("--ci", action="store_true", help="Use CI-optimized timeout settings")
    findp.add_argument("--fast", action="store_true", help="Use fast timeout settings for local development")
    findp.add_argument("--slow", action="store_true", help="Use slow timeout settings for unstable environments")

    valp = sub.add_parser("validate", help="Validate tree snapshots and object maps")
    valp.add_argument("--tree", "-t", default=None, help="Path to tree snapshot")
    valp.add_argument("--elements", "-e", default=None, help="Path to elements.yaml file")

    listp = sub.add_parser("list-elements", help="List windows and elements with their finders")
    listp.add_argument("--elements", "-e", required=True, help="Path to elements.yaml file")

    args = p.parse_args(argv)

    if args.cmd == "find":
        return _cmd_find(args)
    if args.cmd == "validate":
        return _cmd_validate(args)
    if args.cmd == "list-elements":
        return _cmd_list_elements(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
