"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import functools
import io
import shutil
import tarfile
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Dict, Iterator

import pytest


def _is_tar_available() -> bool:
    """Check if the tar binary is in PATH."""
    return shutil.which("tar") is not None


tar_available = pytest.mark.skipif(
    not _is_tar_available(),
    reason="tar binary not available",
)

xz_available = pytest.mark.skipif(
    shutil.which("xz") is None,
    reason="xz binary not available",
)


def make_tarball(path: Path, files: Dict[str, bytes], mode: str = "w:gz") -> Path:
    """Write a release-style tarball (member name -> content)."""
    with tarfile.open(path, mode) as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
    return path


class _QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format: str, *args) -> None:  # noqa: A002
        pass


@pytest.fixture
def release_server(tmp_path: Path) -> Iterator[tuple]:
    """Serve ``<tmp>/releases`` over HTTP on localhost.

    Yields:
        (base_url, releases_dir)
    """
    releases = tmp_path / "releases"
    releases.mkdir()
    handler = functools.partial(_QuietHandler, directory=str(releases))
    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}", releases
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
