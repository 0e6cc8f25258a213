"""Tests for template resolution."""

from __future__ import annotations

import pytest

from toolenv.bootstrap.platform import PlatformInfo
from toolenv.core.errors import TemplateExpansionFailed, TemplateMalformed
from toolenv.core.templating import (
    UndefinedPolicy,
    render_template,
    resolve_env_value,
    resolve_url,
)

LINUX_X64 = PlatformInfo(os="linux", arch="x64")


class TestResolveUrl:
    """Tests for URL template resolution."""

    def test_substitutes_all_placeholders(self) -> None:
        url = resolve_url("https://x/{{version}}/{{os}}-{{arch}}.tgz", "1.0", LINUX_X64)
        assert url == "https://x/1.0/linux-x64.tgz"

    def test_whitespace_inside_braces(self) -> None:
        url = resolve_url("https://x/{{ version }}/{{ os }}.tgz", "1.0", LINUX_X64)
        assert url == "https://x/1.0/linux.tgz"

    def test_repeated_placeholder(self) -> None:
        url = resolve_url("https://x/v{{version}}/tool-{{version}}.tgz", "2.3.4", LINUX_X64)
        assert url == "https://x/v2.3.4/tool-2.3.4.tgz"

    def test_dotted_field_form(self) -> None:
        url = resolve_url("https://x/{{.version}}/{{ .os }}-{{- .arch}}.tgz", "1.0", LINUX_X64)
        assert url == "https://x/1.0/linux-x64.tgz"

    def test_bare_dot_is_malformed(self) -> None:
        with pytest.raises(TemplateMalformed):
            resolve_url("https://x/{{.}}.tgz", "1.0", LINUX_X64)

    def test_no_placeholders(self) -> None:
        assert resolve_url("https://x/tool.tgz", "1.0", LINUX_X64) == "https://x/tool.tgz"

    def test_is_deterministic(self) -> None:
        template = "https://x/{{version}}/{{os}}-{{arch}}.tgz"
        first = resolve_url(template, "1.0", LINUX_X64)
        second = resolve_url(template, "1.0", LINUX_X64)
        assert first == second

    def test_no_url_encoding_or_escaping(self) -> None:
        url = resolve_url("https://x/a b&c/{{version}}.tgz", "1.0<rc>", LINUX_X64)
        assert url == "https://x/a b&c/1.0<rc>.tgz"

    def test_unclosed_placeholder_is_malformed(self) -> None:
        with pytest.raises(TemplateMalformed):
            resolve_url("https://x/{{version/tool.tgz", "1.0", LINUX_X64)

    def test_unknown_filter_is_malformed(self) -> None:
        with pytest.raises(TemplateMalformed):
            resolve_url("https://x/{{version|nosuchfilter}}.tgz", "1.0", LINUX_X64)

    def test_calling_unknown_function_fails_expansion(self) -> None:
        with pytest.raises(TemplateExpansionFailed):
            resolve_url("https://x/{{ download() }}.tgz", "1.0", LINUX_X64)


class TestUndefinedPolicy:
    """Tests for unknown placeholder handling."""

    def test_lenient_renders_unknown_as_empty(self) -> None:
        assert render_template("a{{nope}}b", {}) == "ab"

    def test_lenient_chained_attribute_is_empty(self) -> None:
        assert render_template("a{{nope.deeper}}b", {}) == "ab"

    def test_strict_rejects_unknown(self) -> None:
        with pytest.raises(TemplateExpansionFailed, match="nope"):
            render_template("a{{nope}}b", {}, UndefinedPolicy.STRICT)

    def test_strict_accepts_known(self) -> None:
        assert render_template("{{version}}", {"version": "1"}, UndefinedPolicy.STRICT) == "1"

    def test_jinja_globals_are_not_exposed(self) -> None:
        assert render_template("[{{range}}]", {}) == "[]"


class TestResolveEnvValue:
    """Tests for env value resolution."""

    def test_binds_version(self) -> None:
        assert resolve_env_value("storage/go@{{version}}/bin", "1.22.0") == "storage/go@1.22.0/bin"

    def test_os_and_arch_are_not_bound(self) -> None:
        assert resolve_env_value("{{os}}-{{arch}}", "1.0") == "-"

    def test_os_is_an_error_under_strict_policy(self) -> None:
        with pytest.raises(TemplateExpansionFailed):
            resolve_env_value("{{os}}", "1.0", UndefinedPolicy.STRICT)
