#!/usr/bin/env python3
"""
Slayfi: Command-line front end for the application launcher backend.

Lists installed applications (from the cache or a fresh scan), starts one,
or prints the effective configuration.

Usage:
    slayfi apps [--cached] [--json]
    slayfi launch firefox --new-window
    slayfi config
"""

import argparse
import json
import logging
import sys

from slayfi.app_cache import DEFAULT_CACHE_PATH, AppCache, try_get_cached_applications
from slayfi.app_scanner import scan_applications
from slayfi.config_manager import DEFAULT_CONFIG_PATH, load_settings
from slayfi.launcher import start_program


def _cmd_apps(args, settings, cache) -> int:
    apps = None
    if args.cached:
        apps = try_get_cached_applications(cache)
    if apps is None:
        apps = scan_applications(settings, cache)

    if args.json:
        print(json.dumps([app.to_dict() for app in apps], indent=2))
    else:
        for app in apps:
            print(f"{app.name}\t{app.exec}")
    return 0


def _cmd_launch(args) -> int:
    return 0 if start_program(" ".join(args.exec)) else 1


def _cmd_config(manager) -> int:
    print(manager.to_json())
    print(json.dumps(manager.client_config()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slayfi", description="Desktop application launcher backend")
    parser.add_argument(
        "--config",
        default=str(DEFAULT_CONFIG_PATH),
        help=f"Config file path (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--cache",
        default=str(DEFAULT_CACHE_PATH),
        help=f"Application cache path (default: {DEFAULT_CACHE_PATH})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    apps = subparsers.add_parser("apps", help="List installed applications")
    apps.add_argument("--cached", action="store_true", help="Use the cache when it can be read")
    apps.add_argument("--json", action="store_true", help="Print the list as JSON")

    launch = subparsers.add_parser("launch", help="Start an application command")
    launch.add_argument("exec", nargs=argparse.REMAINDER, help="Command line to run, options included")

    subparsers.add_parser("config", help="Print the effective configuration")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    manager, settings = load_settings(args.config)
    cache = AppCache(args.cache)

    if args.command == "apps":
        return _cmd_apps(args, settings, cache)
    if args.command == "launch":
        return _cmd_launch(args)
    return _cmd_config(manager)


if __name__ == "__main__":
    sys.exit(main())
