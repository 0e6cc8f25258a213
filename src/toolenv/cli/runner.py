"""CLI runner orchestration.

Parses arguments, detects the host platform once, and hands everything to
the provisioning pipeline. This is the only place toolenv errors are turned
into exit codes.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Optional

from importlib.metadata import version, PackageNotFoundError

from toolenv.bootstrap.paths import EnvironmentPaths, find_manifest
from toolenv.bootstrap.platform import get_platform_info
from toolenv.cli.arguments import build_parser
from toolenv.cli.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_PROVISION_FAILURE,
    EXIT_SUCCESS,
)
from toolenv.config.loader import load_manifest
from toolenv.core.errors import ConfigError, ToolenvError
from toolenv.core.logging import configure_logging, get_logger
from toolenv.core.templating import UndefinedPolicy
from toolenv.pipeline.provisioner import EnvironmentProvisioner

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get toolenv version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("toolenv")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from toolenv import __version__
        return __version__


def _is_valid_env_name(env_name: str) -> bool:
    return bool(env_name) and env_name not in (".", "..") and Path(env_name).name == env_name


class CLIRunner:
    """Runs the single toolenv command."""

    def __init__(self, cwd: Optional[Path] = None) -> None:
        """Initialize CLIRunner.

        Args:
            cwd: Directory to provision in; defaults to the process working
                directory, read once here.
        """
        self.parser = build_parser()
        self._version = get_version()
        self._cwd = cwd

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        try:
            args = self.parser.parse_args(list(argv) if argv is not None else None)
        except SystemExit as e:
            # argparse exits on --help (0) and on usage errors (2)
            return e.code if isinstance(e.code, int) else EXIT_INVALID_USAGE

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        if not _is_valid_env_name(args.env_name):
            _print_error(f"invalid environment name: {args.env_name!r}")
            return EXIT_INVALID_USAGE

        root = self._cwd or Path.cwd()
        manifest_path = find_manifest(root, args.manifest)

        try:
            manifest = load_manifest(manifest_path)
        except ConfigError as e:
            LOGGER.debug("Manifest loading failed", exc_info=True)
            _print_error(str(e))
            return EXIT_CONFIG_ERROR

        provisioner = EnvironmentProvisioner(
            paths=EnvironmentPaths(root=root, env_name=args.env_name),
            platform_info=get_platform_info(),
            policy=UndefinedPolicy.STRICT if args.strict_templates else UndefinedPolicy.LENIENT,
            download_timeout=args.timeout,
        )

        try:
            provisioner.provision(manifest)
        except ToolenvError as e:
            LOGGER.debug("Provisioning failed", exc_info=True)
            _print_error(str(e))
            return EXIT_PROVISION_FAILURE

        return EXIT_SUCCESS


def _print_error(message: str) -> None:
    print(message, file=sys.stderr)
