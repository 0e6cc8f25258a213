"""Logging setup for toolenv.

Progress output meant for the user is printed by the provisioner; this
module only governs diagnostic logging, which goes to stderr so it never
interleaves with the activation hint on stdout.
"""

from __future__ import annotations

import logging
from typing import Optional

ROOT_LOGGER_NAME = "toolenv"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> int:
    """Map CLI flags to a logging level.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - verbose → INFO
    - default → WARNING
    """
    if quiet:
        return logging.ERROR
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging level based on CLI flags."""
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet)

    logging.basicConfig(level=level, format=DEBUG_LOG_FORMAT if debug else LOG_FORMAT)
    # basicConfig is a no-op once the root logger has handlers.
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""
    return logging.getLogger(name if name is not None else ROOT_LOGGER_NAME)
