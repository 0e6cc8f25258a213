"""Path management for a tool environment.

Directory structure:
    <env_name>/
        bin/
            activate                - Generated activation script
        storage/
            <name>@<version>/       - One install root per tool
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Optional

from toolenv.core.errors import DirectoryCreateFailed
from toolenv.core.logging import get_logger

LOGGER = get_logger(__name__)

# Default manifest file name, looked up in the working directory
DEFAULT_MANIFEST_NAME = "toolenv.yml"

# Environment variable to override the manifest location
TOOLENV_MANIFEST_ENV = "TOOLENV_MANIFEST"

# Default environment directory name
DEFAULT_ENV_NAME = "env"

DIR_PERMISSIONS = 0o755


def find_manifest(project_root: Path, override: Optional[Path] = None) -> Path:
    """Get the manifest path.

    Resolution order:
    1. Explicit override (``--manifest``)
    2. TOOLENV_MANIFEST environment variable (if set)
    3. ``toolenv.yml`` in the project root (default)

    Relative paths from 1 and 2 are taken relative to the project root.
    """
    if override is None:
        env_manifest = os.environ.get(TOOLENV_MANIFEST_ENV)
        if env_manifest:
            override = Path(env_manifest)

    if override is None:
        return project_root / DEFAULT_MANIFEST_NAME
    if override.is_absolute():
        return override
    return project_root / override


@dataclass(frozen=True)
class EnvironmentPaths:
    """Paths within a tool environment directory."""

    root: Path
    env_name: str = DEFAULT_ENV_NAME

    # Subdirectory names
    _BIN_DIR: ClassVar[str] = "bin"
    _STORAGE_DIR: ClassVar[str] = "storage"
    _ACTIVATE_SCRIPT: ClassVar[str] = "activate"

    @property
    def env_dir(self) -> Path:
        """The environment directory itself."""
        return self.root / self.env_name

    @property
    def bin_dir(self) -> Path:
        """Directory holding the activation script."""
        return self.env_dir / self._BIN_DIR

    @property
    def storage_dir(self) -> Path:
        """Directory holding every tool install root."""
        return self.env_dir / self._STORAGE_DIR

    @property
    def activate_script(self) -> Path:
        return self.bin_dir / self._ACTIVATE_SCRIPT

    def install_dir(self, name: str, version: str) -> Path:
        """Get the install root for a tool version.

        Two tools with the same name and version share (and overwrite) the
        same directory.
        """
        return self.storage_dir / f"{name}@{version}"

    def ensure_bin_dir(self) -> None:
        """Create ``<env>/bin`` if it doesn't exist."""
        _mkdir(self.bin_dir)

    def reset_storage(self) -> None:
        """Delete ``<env>/storage`` and everything in it.

        The directory itself is recreated lazily by ``create_install_dir``.
        """
        if not self.storage_dir.exists():
            return
        LOGGER.debug(f"Removing {self.storage_dir}")
        try:
            shutil.rmtree(self.storage_dir)
        except OSError as e:
            raise DirectoryCreateFailed(f"cannot clean up {self.storage_dir}: {e}") from e

    def create_install_dir(self, name: str, version: str) -> Path:
        """Create and return the install root for a tool version."""
        install_dir = self.install_dir(name, version)
        _mkdir(install_dir)
        return install_dir


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(mode=DIR_PERMISSIONS, parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateFailed(f"cannot create {path}: {e}") from e
