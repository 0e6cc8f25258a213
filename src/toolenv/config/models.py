"""Typed manifest records.

The manifest is read-only input: every record is frozen and nothing derived
from it (resolved URLs, resolved env values) is stored back on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class Normalization:
    """Per-tool remapping of detected platform identifiers.

    Attributes:
        arch: Detected architecture -> name used in the tool's URLs.
        os: Detected OS -> name used in the tool's URLs.
    """

    arch: Dict[str, str] = field(default_factory=dict)
    os: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolSpec:
    """A single tool entry from the manifest.

    Attributes:
        name: Identifier used to namespace the install directory.
        version: Opaque version string substituted into templates.
        url: Download URL template.
        env: Variable name -> value template, in manifest order. The
            ``PATH`` key prepends to PATH instead of being exported.
        normalization: Optional platform remapping tables.
    """

    name: str = ""
    version: str = ""
    url: str = ""
    env: Dict[str, str] = field(default_factory=dict)
    normalization: Optional[Normalization] = None

    @property
    def install_dir_name(self) -> str:
        """Directory name under ``storage/``, e.g. ``node@20.11.0``."""
        return f"{self.name}@{self.version}"


@dataclass(frozen=True)
class Manifest:
    """Ordered list of tools; order is install order and PATH precedence."""

    tools: Tuple[ToolSpec, ...] = ()

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self.tools)

    def __len__(self) -> int:
        return len(self.tools)
