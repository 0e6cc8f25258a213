"""Platform detection and per-tool normalization.

Detects the host OS and architecture once, using the identifiers release
pages most commonly use (``linux``/``darwin``/``windows``,
``amd64``/``arm64``), then lets each tool remap them to its own naming
scheme through its manifest ``normalization`` tables.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from toolenv.config.models import Normalization

# Architecture normalization map
_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


def normalize_arch(machine: str) -> str:
    """Normalize architecture string to standard form.

    Args:
        machine: Raw architecture string from platform.machine()

    Returns:
        Normalized architecture string; unknown values are returned
        lowercased rather than rejected.
    """
    lowered = machine.lower()
    return _ARCH_MAP.get(lowered, lowered)


def detect_os() -> str:
    """Detect the current operating system.

    Returns:
        Lowercase OS name (darwin, linux, windows, freebsd, ...).
    """
    return platform.system().lower()


def detect_arch() -> str:
    """Detect the current CPU architecture (amd64, arm64, ...)."""
    return normalize_arch(platform.machine())


@dataclass(frozen=True)
class PlatformInfo:
    """Information about a platform.

    Attributes:
        os: Operating system identifier.
        arch: CPU architecture identifier.
    """

    os: str
    arch: str

    @property
    def name(self) -> str:
        """Return the ``os-arch`` pair, e.g. "linux-amd64"."""
        return f"{self.os}-{self.arch}"


def get_platform_info() -> PlatformInfo:
    """Detect and return current platform information."""
    return PlatformInfo(os=detect_os(), arch=detect_arch())


def normalize_platform(
    detected: PlatformInfo,
    normalization: Optional["Normalization"] = None,
) -> PlatformInfo:
    """Apply a tool's normalization tables to the detected platform.

    Each axis is looked up independently; there is no joint (os, arch)
    lookup. A missing table or missing entry keeps the detected value.

    Args:
        detected: Platform as detected on the host.
        normalization: The tool's optional remapping tables.

    Returns:
        The (os, arch) pair to use for URL resolution.
    """
    if normalization is None:
        return detected

    return PlatformInfo(
        os=normalization.os.get(detected.os, detected.os),
        arch=normalization.arch.get(detected.arch, detected.arch),
    )
