#!/usr/bin/env python3
"""
phanalist/__main__.py
=====================

Command line entry point.

Usage
-----
    python -m phanalist [--config FILE] [--default-config] [--src PATH]
                        [--output-format text|json] [--summary-only]
                        [--quiet] [-v|-vv] [--list-rules]

Exit codes
----------
    0   no violations
    1   violations found
    2   bad arguments or configuration
    3   the source path does not exist
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .analyse import Analyse, scan
from .config import DEFAULT_CONFIG_FILE, OUTPUT_FORMATS, Config, load_config
from .errors import ConfigError
from .output import make_renderer

_log = logging.getLogger("phanalist")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_VIOLATION: int = 1
EXIT_USAGE: int = 2
EXIT_IOERR: int = 3


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``phanalist`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("phanalist")
    root.setLevel(level)
    root.handlers[:] = [handler]


def _load(args: argparse.Namespace) -> Config:
    if args.default_config:
        return Config.default()
    path = Path(args.config)
    if not path.exists():
        _log.warning("No configuration file %s has been found, using defaults", path)
        return Config.default()
    return load_config(path)


def _list_rules() -> int:
    analyse = Analyse(Config.default())
    for rule in analyse.registry.all():
        print(f"{rule.code}  {rule.description}")
    return EXIT_OK


# ===========================================================================
# Argument parser construction
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phanalist",
        description="A static analyser for your PHP project.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              phanalist --src ./src
              phanalist --config phanalist.json --output-format json
              phanalist --default-config --summary-only
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG_FILE,
        metavar="FILE",
        help=f"JSON configuration file (default: {DEFAULT_CONFIG_FILE}).",
    )
    parser.add_argument(
        "-d", "--default-config",
        action="store_true",
        help="Ignore the configuration file and use the defaults.",
    )
    parser.add_argument(
        "-s", "--src",
        default=None,
        metavar="PATH",
        help="Directory or file to analyse (overrides the configuration).",
    )
    parser.add_argument(
        "-o", "--output-format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: from the configuration, else text).",
    )
    parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Only print the per-rule summary.",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Do not print the results.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List the available rules and exit.",
    )
    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def run(args: argparse.Namespace) -> int:
    if args.list_rules:
        return _list_rules()

    try:
        config = _load(args)
    except ConfigError as exc:
        _log.error("%s", exc)
        return EXIT_USAGE
    if args.src is not None:
        config.src = args.src
    if args.output_format is not None:
        config.output = args.output_format

    if not Path(config.src).exists():
        _log.error("Path %s does not exist", config.src)
        return EXIT_IOERR

    results = scan(config)
    if not args.quiet:
        make_renderer(config.output, summary_only=args.summary_only).render(results)
    return EXIT_VIOLATION if results.has_any_violations() else EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the phanalist CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return run(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main())
