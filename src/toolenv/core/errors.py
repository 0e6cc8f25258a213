"""Exception hierarchy for toolenv.

Every failure the provisioning pipeline can surface derives from
``ToolenvError``. Lower layers translate library exceptions into these
types; the orchestrator wraps them in ``ProvisioningError`` with the stage
and tool that failed; only the CLI turns them into exit codes.
"""

from __future__ import annotations

from typing import Optional


class ToolenvError(Exception):
    """Base class for all toolenv errors."""


class ConfigError(ToolenvError):
    """Manifest loading or parsing error."""


class ConfigNotFound(ConfigError):
    """The manifest file is absent or unreadable."""


class ConfigMalformed(ConfigError):
    """The manifest does not decode into the expected structure."""


class TemplateError(ToolenvError):
    """Template parsing or rendering error."""


class TemplateMalformed(TemplateError):
    """The template's substitution syntax is invalid."""


class TemplateExpansionFailed(TemplateError):
    """The template parsed but could not be rendered."""


class DirectoryCreateFailed(ToolenvError):
    """An environment or install directory could not be created or reset."""


class DownloadError(ToolenvError):
    """Error fetching a remote artifact."""


class NetworkError(DownloadError):
    """Transport-level failure (DNS, connection refused, TLS, timeout)."""


class RemoteError(DownloadError):
    """The server answered with a non-success status."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RemoteNotFound(RemoteError):
    """The server answered 404 Not Found."""


class UnsupportedFormat(ToolenvError):
    """The artifact's extension does not map to a known archive format."""


class ExtractionFailed(ToolenvError):
    """The archive could not be unpacked into the install directory."""


class WriteFailed(ToolenvError):
    """The activation script could not be written."""


class ProvisioningError(ToolenvError):
    """A pipeline stage failed.

    Attributes:
        stage: Human readable stage name (e.g. "resolve the URL for").
        tool: Tool name the stage was working on, or None for
            environment-wide stages.
        cause: The underlying error, also chained as ``__cause__``.
    """

    def __init__(self, stage: str, cause: BaseException, tool: Optional[str] = None) -> None:
        self.stage = stage
        self.tool = tool
        self.cause = cause
        target = f" {tool}" if tool else ""
        super().__init__(f"failed to {stage}{target}: {cause}")
