"""Argument parser construction for the toolenv CLI.

``toolenv`` takes no positional arguments: run it in a directory holding a
``toolenv.yml`` and it builds ``./env``.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from toolenv.bootstrap.download import DEFAULT_TIMEOUT
from toolenv.bootstrap.paths import DEFAULT_ENV_NAME, DEFAULT_MANIFEST_NAME, TOOLENV_MANIFEST_ENV


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add logging and version options."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show toolenv version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_provision_options(parser: argparse.ArgumentParser) -> None:
    """Add options controlling the provisioning run."""
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help=(
            f"Path to the manifest (default: ${TOOLENV_MANIFEST_ENV} "
            f"or ./{DEFAULT_MANIFEST_NAME})."
        ),
    )
    parser.add_argument(
        "--env-name",
        default=DEFAULT_ENV_NAME,
        help=f"Name of the environment directory to create (default: {DEFAULT_ENV_NAME}).",
    )
    parser.add_argument(
        "--strict-templates",
        action="store_true",
        help="Fail on template placeholders other than version, os and arch.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Download timeout in seconds (default: {DEFAULT_TIMEOUT:g}).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the toolenv argument parser."""
    parser = argparse.ArgumentParser(
        prog="toolenv",
        description="toolenv - A virtual tool environment manager.",
    )
    _add_global_options(parser)
    _add_provision_options(parser)
    return parser
