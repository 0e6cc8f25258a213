"""Command-line interface for toolenv."""

from __future__ import annotations

from typing import Iterable, Optional

from toolenv.cli.runner import CLIRunner


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the ``toolenv`` console script.

    Args:
        argv: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code.
    """
    return CLIRunner().run(argv)


__all__ = ["main", "CLIRunner"]
