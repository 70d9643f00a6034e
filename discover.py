#!/usr/bin/env python3
"""
Shell discovery - list the command-line shells installed on this machine.

Usage:
    discover.py               # Table of confirmed shells
    discover.py --json        # JSON output
    discover.py --default     # Print the default shell only
    discover.py --platform windows --config my.yml
"""

import argparse
import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from shell_discovery import __version__
from shell_discovery.candidates import ShellsFileError
from shell_discovery.config import load_config, validate_config
from shell_discovery.discovery import detect_available_shells, get_default_shell, sort_shells
from shell_discovery.environment import OSKind, platform_from_override
from shell_discovery.logging_config import setup_logging
from shell_discovery.render import print_summary, render_json, render_table


EXIT_OK = 0
EXIT_DISCOVERY_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shell-discovery",
        description="Discover the command-line shells installed on this machine.",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of a table")
    parser.add_argument("--default", action="store_true", help="Print the default shell and exit")
    parser.add_argument("--config", metavar="PATH", help="Configuration file (YAML or JSON)")
    parser.add_argument(
        "--platform",
        choices=["auto"] + [kind.value for kind in OSKind],
        default=None,
        help="Force candidate generation for a platform (default: from config, else auto)",
    )
    parser.add_argument("--workers", type=int, default=None, help="Parallel validation workers")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--log-file", metavar="PATH", help="Also write a debug log to PATH")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        config = load_config(args.config, verbose=args.verbose)
        env = platform_from_override(args.platform or config.platform)
    except ValueError as e:
        logger.error(str(e))
        return EXIT_CONFIG_ERROR

    for warning in validate_config(config):
        logger.warning(warning)

    default_shell = get_default_shell(env)
    if args.default:
        print(default_shell)
        return EXIT_OK

    try:
        shells = detect_available_shells(
            env,
            config=config,
            max_workers=args.workers,
            verbose=args.verbose,
        )
    except ShellsFileError as e:
        logger.error(str(e))
        return EXIT_DISCOVERY_FAILED

    shells = sort_shells(shells)
    if args.json:
        print(render_json(shells, default_shell))
        return EXIT_OK

    table = render_table(shells, default_shell)
    if table:
        print(table)
    if not args.quiet:
        print_summary(shells)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
