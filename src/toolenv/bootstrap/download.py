"""Download utilities with SSL certificate handling.

Fetches remote artifacts over plain HTTP(S) GET. HTTPS connections verify
against certifi's CA bundle so standalone interpreters without access to
the system certificate store still work.
"""

from __future__ import annotations

import shutil
import ssl
from typing import BinaryIO, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlsplit
from urllib.request import Request, urlopen

import certifi

from toolenv import __version__ as TOOLENV_VERSION
from toolenv.core.errors import NetworkError, RemoteError, RemoteNotFound
from toolenv.core.logging import get_logger

LOGGER = get_logger(__name__)

SUPPORTED_SCHEMES = frozenset({"http", "https"})

DEFAULT_TIMEOUT = 300.0


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle."""
    return ssl.create_default_context(cafile=certifi.where())


def download_to(url: str, dest: BinaryIO, timeout: Optional[float] = DEFAULT_TIMEOUT) -> int:
    """Download ``url`` and stream the body into ``dest``.

    No retries and no authentication are performed.

    Args:
        url: The http(s) URL to download from.
        dest: Writable binary file object.
        timeout: Socket timeout in seconds.

    Returns:
        Number of bytes written.

    Raises:
        NetworkError: On transport failure or unsupported URL scheme.
        RemoteNotFound: If the server answers 404.
        RemoteError: If the server answers with any other non-200 status.
    """
    scheme = urlsplit(url).scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise NetworkError(f"Only http and https URLs are supported: {url}")

    request = Request(url, headers={"User-Agent": f"toolenv/{TOOLENV_VERSION}"})
    context = get_ssl_context()

    try:
        with urlopen(request, timeout=timeout, context=context) as response:  # nosec B310
            if response.status != 200:
                raise RemoteError(
                    f"failed to download file: {response.status} {response.reason}",
                    status=response.status,
                )

            total_size = response.getheader("Content-Length")
            if total_size:
                LOGGER.info(f"Artifact size: {int(total_size) / 1024 / 1024:.1f} MB")

            start = dest.tell()
            shutil.copyfileobj(response, dest)
            dest.flush()
            return dest.tell() - start

    except HTTPError as e:
        message = f"failed to download file: {e.code} {e.reason}"
        if e.code == 404:
            raise RemoteNotFound(message, status=e.code) from e
        raise RemoteError(message, status=e.code) from e
    except URLError as e:
        raise NetworkError(f"failed to reach {url}: {e.reason}") from e
    except OSError as e:
        raise NetworkError(f"transfer from {url} failed: {e}") from e
