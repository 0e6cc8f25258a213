"""Placeholder expansion for download URLs and environment values.

Templates use the ``{{version}}``, ``{{os}}`` and ``{{arch}}`` placeholders
and are rendered with Jinja2. The dotted field form ``{{.version}}`` is
accepted as a synonym. URL templates see all three bindings; env value
templates only see ``version``.

How unknown names behave is a policy: LENIENT renders them as empty text,
STRICT fails the expansion.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import Mapping

from jinja2 import ChainableUndefined, Environment, StrictUndefined, TemplateSyntaxError

from toolenv.bootstrap.platform import PlatformInfo
from toolenv.core.errors import TemplateExpansionFailed, TemplateMalformed
from toolenv.core.logging import get_logger

LOGGER = get_logger(__name__)

# Leading dot of a text/template field reference, as in "{{ .version }}".
_DOTTED_FIELD = re.compile(r"(\{\{-?\s*)\.(?=[A-Za-z_])")


class UndefinedPolicy(str, Enum):
    """What to do with placeholders that have no binding."""

    LENIENT = "lenient"
    STRICT = "strict"


@lru_cache(maxsize=None)
def _environment(policy: UndefinedPolicy) -> Environment:
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined if policy is UndefinedPolicy.STRICT else ChainableUndefined,
        keep_trailing_newline=True,
    )
    # Only the explicit bindings are visible to templates.
    env.globals.clear()
    return env


def render_template(
    template: str,
    variables: Mapping[str, str],
    policy: UndefinedPolicy = UndefinedPolicy.LENIENT,
) -> str:
    """Expand a template string against a set of bindings.

    Args:
        template: Template text, e.g. ``"https://x/{{version}}/{{os}}.tgz"``.
        variables: Placeholder bindings.
        policy: Handling of unbound placeholders.

    Returns:
        The rendered string. No further interpretation (URL-encoding,
        shell quoting) is applied.

    Raises:
        TemplateMalformed: If the template syntax is invalid.
        TemplateExpansionFailed: If rendering fails.
    """
    env = _environment(policy)

    try:
        compiled = env.from_string(_DOTTED_FIELD.sub(r"\1", template))
    except TemplateSyntaxError as e:
        raise TemplateMalformed(f"invalid template {template!r}: {e}") from e

    try:
        return compiled.render(**variables)
    except Exception as e:
        raise TemplateExpansionFailed(f"cannot expand template {template!r}: {e}") from e


def resolve_url(
    template: str,
    version: str,
    platform_info: PlatformInfo,
    policy: UndefinedPolicy = UndefinedPolicy.LENIENT,
) -> str:
    """Resolve a tool's download URL template."""
    url = render_template(
        template,
        {"version": version, "os": platform_info.os, "arch": platform_info.arch},
        policy,
    )
    LOGGER.debug(f"Resolved {template!r} to {url!r}")
    return url


def resolve_env_value(
    template: str,
    version: str,
    policy: UndefinedPolicy = UndefinedPolicy.LENIENT,
) -> str:
    """Resolve an env value template; only ``version`` is bound."""
    return render_template(template, {"version": version}, policy)
