"""Activation script generator.

Renders ``<env>/bin/activate``: a POSIX shell script that, when sourced,
points PATH and the manifest's env variables at the environment's storage,
decorates the prompt, and defines a ``deactivate`` function that undoes all
of it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from toolenv.config.models import ToolSpec
from toolenv.core.errors import WriteFailed
from toolenv.core.logging import get_logger
from toolenv.core.templating import UndefinedPolicy, resolve_env_value

LOGGER = get_logger(__name__)

PATH_KEY = "PATH"

SCRIPT_PERMISSIONS = 0o755


def _escape_double_quotes(value: str) -> str:
    return value.replace('"', '\\"')


def iter_env_entries(tools: Iterable[ToolSpec]) -> Iterator[Tuple[ToolSpec, str, str]]:
    """Yield ``(tool, key, raw_value)`` in manifest order, then env order."""
    for tool in tools:
        for key, value in tool.env.items():
            yield tool, key, value


class ActivationScriptGenerator:
    """Generates the shell activation script for a tool environment."""

    def __init__(self, policy: UndefinedPolicy = UndefinedPolicy.LENIENT) -> None:
        self._policy = policy

    def generate(self, env_name: str, tools: Sequence[ToolSpec]) -> str:
        """Generate activation script content.

        Args:
            env_name: Environment directory name, relative to the directory
                the script is sourced from.
            tools: Tools in manifest order. Later tools' PATH entries end up
                in front of earlier ones.

        Returns:
            Shell source text.

        Raises:
            TemplateMalformed: If an env value template does not parse.
            TemplateExpansionFailed: If an env value template fails to render.
        """
        lines: List[str] = [
            f'# This file must be used with "source {env_name}/bin/activate"',
            "# It modifies the current shell environment.",
            f'export TOOLENV_DIR="$(pwd)/{env_name}"',
            'export PREVIOUS_PATH="$PATH"',
        ]
        lines.extend(self._export_lines(tools))
        lines.extend(self._prompt_lines(env_name))
        lines.extend(self._deactivate_lines(tools))
        return "\n".join(lines) + "\n"

    def write(self, output_path: Path, env_name: str, tools: Sequence[ToolSpec]) -> Path:
        """Generate the script and write it to ``output_path``.

        Returns:
            Path to the written file.

        Raises:
            WriteFailed: If the file cannot be written.
        """
        content = self.generate(env_name, tools)
        write_script(output_path, content)
        return output_path

    def _export_lines(self, tools: Sequence[ToolSpec]) -> List[str]:
        lines = []
        for tool, key, value in iter_env_entries(tools):
            # Quotes are escaped before expansion so the assignment stays valid.
            resolved = resolve_env_value(_escape_double_quotes(value), tool.version, self._policy)
            if key == PATH_KEY:
                lines.append(f'export PATH="$TOOLENV_DIR/{resolved}:$PATH"')
            else:
                lines.append(f'export {key}="$TOOLENV_DIR/{resolved}"')
        return lines

    @staticmethod
    def _prompt_lines(env_name: str) -> List[str]:
        return [
            'export OLD_PS1="$PS1"',
            f'export PS1="(toolenv:{env_name}) $PS1"',
        ]

    @staticmethod
    def _deactivate_lines(tools: Sequence[ToolSpec]) -> List[str]:
        lines = [
            "deactivate() {",
            '\texport PS1="$OLD_PS1"',
            "\tunset OLD_PS1",
        ]
        for _, key, _ in iter_env_entries(tools):
            if key == PATH_KEY:
                continue
            lines.append(f"\tunset {key}")
        lines.extend([
            '\texport PATH="$PREVIOUS_PATH"',
            "\tunset PREVIOUS_PATH",
            "\tunset TOOLENV_DIR",
            "\tunset -f deactivate",
            "}",
        ])
        return lines


def write_script(path: Path, content: str, mode: Optional[int] = SCRIPT_PERMISSIONS) -> None:
    """Write ``content`` to ``path`` and mark it executable.

    Raises:
        WriteFailed: If the file cannot be written.
    """
    try:
        path.write_text(content, encoding="utf-8")
        if mode is not None:
            path.chmod(mode)
    except OSError as e:
        raise WriteFailed(f"failed to write {path}: {e}") from e
    LOGGER.debug(f"Wrote activation script to {path}")
