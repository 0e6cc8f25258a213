"""Tests for environment path management."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from toolenv.bootstrap.paths import (
    DEFAULT_ENV_NAME,
    DEFAULT_MANIFEST_NAME,
    TOOLENV_MANIFEST_ENV,
    EnvironmentPaths,
    find_manifest,
)
from toolenv.core.errors import DirectoryCreateFailed


class TestFindManifest:
    """Tests for find_manifest function."""

    def test_default_is_toolenv_yml_in_root(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop(TOOLENV_MANIFEST_ENV, None)
            assert find_manifest(tmp_path) == tmp_path / DEFAULT_MANIFEST_NAME

    def test_respects_env_var(self, tmp_path: Path) -> None:
        custom = tmp_path / "other.yml"
        with patch.dict(os.environ, {TOOLENV_MANIFEST_ENV: str(custom)}):
            assert find_manifest(tmp_path) == custom

    def test_relative_env_var_is_relative_to_root(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {TOOLENV_MANIFEST_ENV: "conf/tools.yml"}):
            assert find_manifest(tmp_path) == tmp_path / "conf" / "tools.yml"

    def test_explicit_override_wins_over_env_var(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {TOOLENV_MANIFEST_ENV: "from-env.yml"}):
            result = find_manifest(tmp_path, Path("from-cli.yml"))
            assert result == tmp_path / "from-cli.yml"


class TestEnvironmentPaths:
    """Tests for EnvironmentPaths."""

    def test_layout(self, tmp_path: Path) -> None:
        paths = EnvironmentPaths(tmp_path)
        assert paths.env_name == DEFAULT_ENV_NAME
        assert paths.env_dir == tmp_path / "env"
        assert paths.bin_dir == tmp_path / "env" / "bin"
        assert paths.storage_dir == tmp_path / "env" / "storage"
        assert paths.activate_script == tmp_path / "env" / "bin" / "activate"

    def test_install_dir_uses_name_at_version(self, tmp_path: Path) -> None:
        paths = EnvironmentPaths(tmp_path, "tools")
        assert paths.install_dir("node", "20.11.0") == tmp_path / "tools" / "storage" / "node@20.11.0"

    def test_ensure_bin_dir(self, tmp_path: Path) -> None:
        paths = EnvironmentPaths(tmp_path)
        paths.ensure_bin_dir()
        assert paths.bin_dir.is_dir()
        # Idempotent
        paths.ensure_bin_dir()

    def test_reset_storage_removes_everything(self, tmp_path: Path) -> None:
        paths = EnvironmentPaths(tmp_path)
        stale = paths.create_install_dir("go", "1.22.0")
        (stale / "bin").mkdir()
        (stale / "bin" / "go").write_text("#!/bin/sh\n")

        paths.reset_storage()

        assert not paths.storage_dir.exists()

    def test_reset_storage_keeps_bin(self, tmp_path: Path) -> None:
        paths = EnvironmentPaths(tmp_path)
        paths.ensure_bin_dir()
        paths.activate_script.write_text("# old\n")
        paths.create_install_dir("go", "1.22.0")

        paths.reset_storage()

        assert paths.activate_script.exists()

    def test_reset_storage_when_missing_is_noop(self, tmp_path: Path) -> None:
        EnvironmentPaths(tmp_path).reset_storage()

    def test_reset_storage_failure_raises(self, tmp_path: Path) -> None:
        paths = EnvironmentPaths(tmp_path)
        paths.create_install_dir("go", "1.22.0")
        with patch("toolenv.bootstrap.paths.shutil.rmtree", side_effect=PermissionError("denied")):
            with pytest.raises(DirectoryCreateFailed, match="denied"):
                paths.reset_storage()

    def test_create_install_dir_failure_raises(self, tmp_path: Path) -> None:
        # A regular file where the env directory should be
        (tmp_path / "env").write_text("not a directory")
        paths = EnvironmentPaths(tmp_path)
        with pytest.raises(DirectoryCreateFailed):
            paths.create_install_dir("go", "1.22.0")
