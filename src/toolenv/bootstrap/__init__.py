"""
Bootstrap module for toolenv environments.

This module handles:
- Platform detection (OS + architecture) and per-tool normalization
- Environment directory layout (bin/, storage/)
- Downloading and unpacking tool archives
"""

from toolenv.bootstrap.platform import get_platform_info, normalize_platform, PlatformInfo
from toolenv.bootstrap.paths import find_manifest, EnvironmentPaths
from toolenv.bootstrap.installer import install_archive, ArchiveFormat

__all__ = [
    "get_platform_info",
    "normalize_platform",
    "PlatformInfo",
    "find_manifest",
    "EnvironmentPaths",
    "install_archive",
    "ArchiveFormat",
]
