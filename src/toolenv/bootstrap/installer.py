"""Archive download and extraction for tool installs.

An artifact is downloaded to a private scratch file, then unpacked with the
system ``tar`` binary into the tool's install directory. Release archives
conventionally wrap everything in a single top-level folder; that folder is
stripped so ``archive/bin/tool`` lands at ``<install_dir>/bin/tool``.
"""

from __future__ import annotations

import posixpath
import shutil
import subprocess
import tempfile
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import unquote, urlsplit

from toolenv.bootstrap.download import DEFAULT_TIMEOUT, download_to
from toolenv.core.errors import ExtractionFailed, UnsupportedFormat
from toolenv.core.logging import get_logger

LOGGER = get_logger(__name__)

SCRATCH_PREFIX = "toolenv-download-"

TAR_BINARY = "tar"

Reporter = Callable[[str], None]


class ArchiveFormat(str, Enum):
    """Archive formats the installer knows how to unpack."""

    GZIP_TAR = "gzip-tar"
    XZ_TAR = "xz-tar"

    @property
    def tar_flags(self) -> str:
        return "-xzf" if self is ArchiveFormat.GZIP_TAR else "-xJf"


# Extension (lowercase, with dot) -> archive format
_EXTENSION_FORMATS = {
    ".tgz": ArchiveFormat.GZIP_TAR,
    ".gz": ArchiveFormat.GZIP_TAR,
    ".xz": ArchiveFormat.XZ_TAR,
}


def url_extension(url: str) -> str:
    """Return the trailing extension of the URL path, e.g. ``.gz``.

    Query string and fragment are ignored. Returns an empty string when the
    last path segment has no extension.
    """
    path = unquote(urlsplit(url).path)
    return posixpath.splitext(posixpath.basename(path))[1].lower()


def archive_format_for(url: str) -> ArchiveFormat:
    """Pick the extraction strategy from the URL's extension.

    Raises:
        UnsupportedFormat: If the extension is not a recognised archive type.
    """
    extension = url_extension(url)
    try:
        return _EXTENSION_FORMATS[extension]
    except KeyError:
        shown = extension or "(none)"
        raise UnsupportedFormat(f"unsupported archive format: {shown}") from None


def build_tar_command(archive: Path, install_dir: Path, archive_format: ArchiveFormat) -> List[str]:
    """Build the ``tar`` invocation that strips one leading path component."""
    return [
        TAR_BINARY,
        archive_format.tar_flags,
        str(archive),
        "-C",
        str(install_dir),
        "--strip-components=1",
    ]


def extract_archive(archive: Path, install_dir: Path, archive_format: ArchiveFormat) -> None:
    """Unpack ``archive`` into ``install_dir`` using the system tar binary.

    Raises:
        ExtractionFailed: If tar is missing, cannot start, or exits non-zero.
    """
    if shutil.which(TAR_BINARY) is None:
        raise ExtractionFailed(f"'{TAR_BINARY}' was not found on PATH")

    cmd = build_tar_command(archive, install_dir, archive_format)
    LOGGER.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise ExtractionFailed(f"failed to run {TAR_BINARY}: {e}") from e

    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit status {result.returncode}"
        raise ExtractionFailed(f"{TAR_BINARY} failed to extract {archive.name}: {detail}")


def install_archive(
    url: str,
    install_dir: Path,
    reporter: Optional[Reporter] = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> None:
    """Download ``url`` and unpack it into ``install_dir``.

    The format is decided from the URL before anything is fetched. The
    scratch file is removed on every exit path. A failed extraction leaves
    whatever was already unpacked in ``install_dir``.

    Args:
        url: Fully resolved artifact URL.
        install_dir: Existing (normally empty) destination directory.
        reporter: Progress sink for user-facing lines.
        timeout: Download socket timeout in seconds.

    Raises:
        UnsupportedFormat: If the URL extension is not recognised.
        NetworkError, RemoteNotFound, RemoteError: If the download fails.
        ExtractionFailed: If unpacking fails.
    """
    report = reporter or (lambda line: None)
    archive_format = archive_format_for(url)

    report(f'|- Downloading from "{url}"')

    # delete=False so tar can reopen the file by name on every platform
    scratch = tempfile.NamedTemporaryFile(prefix=SCRATCH_PREFIX, delete=False)
    scratch_path = Path(scratch.name)
    LOGGER.info(f"Created temporary file {scratch_path}")
    try:
        written = download_to(url, scratch, timeout=timeout)
        scratch.close()
        LOGGER.debug(f"Downloaded {written} bytes to {scratch_path}")

        extract_archive(scratch_path, install_dir, archive_format)
    finally:
        if not scratch.closed:
            scratch.close()
        LOGGER.info(f"Removing temporary file {scratch_path}")
        scratch_path.unlink(missing_ok=True)
