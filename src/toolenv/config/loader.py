"""Manifest file loading.

Reads ``toolenv.yml`` and decodes it into typed records. Decoding is
structural only: missing fields become empty values and unknown keys are
reported as warnings. Semantic problems (an unsupported archive extension,
a bad template) surface later, when the value is used.

Example manifest::

    tools:
      - name: node
        version: 20.11.0
        url: https://nodejs.org/dist/v{{version}}/node-v{{version}}-{{os}}-{{arch}}.tar.xz
        env:
          PATH: storage/node@{{version}}/bin
        normalization:
          arch:
            amd64: x64
"""

from __future__ import annotations

from difflib import get_close_matches
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from toolenv.config.models import Manifest, Normalization, ToolSpec
from toolenv.core.errors import ConfigMalformed, ConfigNotFound
from toolenv.core.logging import get_logger

LOGGER = get_logger(__name__)


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps numbers, booleans and dates as their literal text.

    Versions are opaque strings: an unquoted ``1.20`` must stay ``"1.20"``
    rather than round-trip through a float.
    """


for _tag in ("bool", "int", "float", "timestamp"):
    ManifestLoader.add_constructor(f"tag:yaml.org,2002:{_tag}", ManifestLoader.construct_yaml_str)

VALID_TOP_LEVEL_KEYS = frozenset({"tools"})
VALID_TOOL_KEYS = frozenset({"name", "version", "url", "env", "normalization"})
VALID_NORMALIZATION_KEYS = frozenset({"arch", "os"})


def load_manifest(path: Path) -> Manifest:
    """Load and decode a manifest file.

    Args:
        path: Path to the YAML manifest.

    Returns:
        Decoded Manifest, tools in file order.

    Raises:
        ConfigNotFound: If the file is absent or unreadable.
        ConfigMalformed: If the content is not valid YAML or does not have
            the manifest's shape.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        raise ConfigNotFound(f"failed to open {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigMalformed(f"{path} is not valid UTF-8: {e}") from e

    try:
        data = yaml.load(content, Loader=ManifestLoader)  # nosec B506
    except yaml.YAMLError as e:
        raise ConfigMalformed(f"failed to parse {path}: {e}") from e

    manifest = parse_manifest(data, source=str(path))
    LOGGER.debug(f"Loaded {len(manifest)} tool(s) from {path}")
    return manifest


def parse_manifest(data: Any, source: str = "<manifest>") -> Manifest:
    """Convert already-parsed YAML data into a Manifest.

    Raises:
        ConfigMalformed: If the data does not have the manifest's shape.
    """
    if data is None:
        return Manifest()

    if not isinstance(data, dict):
        raise ConfigMalformed(
            f"{source}: manifest must be a YAML mapping, got {type(data).__name__}"
        )

    _warn_unknown_keys(data, VALID_TOP_LEVEL_KEYS, source)

    tools_data = data.get("tools")
    if tools_data is None:
        return Manifest()
    if not isinstance(tools_data, list):
        raise ConfigMalformed(f"{source}: 'tools' must be a list, got {type(tools_data).__name__}")

    tools: List[ToolSpec] = []
    for index, tool_data in enumerate(tools_data):
        tools.append(_parse_tool(tool_data, f"{source}: tools[{index}]"))

    return Manifest(tools=tuple(tools))


def _parse_tool(tool_data: Any, where: str) -> ToolSpec:
    if not isinstance(tool_data, dict):
        raise ConfigMalformed(f"{where} must be a mapping, got {type(tool_data).__name__}")

    _warn_unknown_keys(tool_data, VALID_TOOL_KEYS, where)

    env = _string_mapping(tool_data.get("env"), f"{where}.env")

    normalization: Optional[Normalization] = None
    normalization_data = tool_data.get("normalization")
    if normalization_data is not None:
        if not isinstance(normalization_data, dict):
            raise ConfigMalformed(f"{where}.normalization must be a mapping")
        _warn_unknown_keys(normalization_data, VALID_NORMALIZATION_KEYS, f"{where}.normalization")
        normalization = Normalization(
            arch=_string_mapping(normalization_data.get("arch"), f"{where}.normalization.arch"),
            os=_string_mapping(normalization_data.get("os"), f"{where}.normalization.os"),
        )

    return ToolSpec(
        name=_scalar(tool_data.get("name"), f"{where}.name"),
        version=_scalar(tool_data.get("version"), f"{where}.version"),
        url=_scalar(tool_data.get("url"), f"{where}.url"),
        env=env,
        normalization=normalization,
    )


def _scalar(value: Any, where: str) -> str:
    """Coerce a YAML scalar to text; missing values become ``""``."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ConfigMalformed(f"{where} must be a scalar, got {type(value).__name__}")
    return str(value)


def _string_mapping(value: Any, where: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigMalformed(f"{where} must be a mapping, got {type(value).__name__}")
    return {str(key): _scalar(item, f"{where}.{key}") for key, item in value.items()}


def _warn_unknown_keys(data: Dict[Any, Any], valid_keys: Iterable[str], where: str) -> None:
    valid = list(valid_keys)
    for key in data:
        if key in valid:
            continue
        msg = f"Unknown key '{key}' in {where}"
        matches = get_close_matches(str(key), valid, n=1, cutoff=0.6)
        if matches:
            msg += f" (did you mean '{matches[0]}'?)"
        LOGGER.warning(msg)
