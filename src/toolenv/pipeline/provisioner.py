"""Environment provisioning pipeline.

Stages, strictly sequential:

    ResetStorage → for each tool: Normalize → ResolveURL (and archive format) → CreateInstallDir
    → Install → GenerateActivationScript → ReportSuccess

The first failure aborts the run. It is re-raised as ``ProvisioningError``
naming the stage and tool, with the original error chained. Whatever was
already on disk at that point is left as is; the next run starts by wiping
``storage/``.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from toolenv.bootstrap.download import DEFAULT_TIMEOUT
from toolenv.bootstrap.installer import archive_format_for, install_archive
from toolenv.bootstrap.paths import EnvironmentPaths
from toolenv.bootstrap.platform import PlatformInfo, normalize_platform
from toolenv.config.models import Manifest, ToolSpec
from toolenv.core.errors import ProvisioningError, ToolenvError
from toolenv.core.logging import get_logger
from toolenv.core.templating import UndefinedPolicy, resolve_url
from toolenv.generation.activation import ActivationScriptGenerator

LOGGER = get_logger(__name__)

Reporter = Callable[[str], None]


@dataclass
class InstalledTool:
    """Record of one finished install."""

    name: str
    version: str
    url: str
    platform: PlatformInfo
    install_dir: Path


@dataclass
class ProvisionResult:
    """Outcome of a successful provisioning run."""

    env_dir: Path
    activate_script: Path
    installed: List[InstalledTool] = field(default_factory=list)


@contextmanager
def _stage(name: str, tool: Optional[ToolSpec] = None) -> Iterator[None]:
    """Wrap toolenv and OS errors raised inside a stage with its context."""
    try:
        yield
    except ProvisioningError:
        raise
    except (ToolenvError, OSError) as e:
        LOGGER.debug(f"Stage '{name}' failed: {e!r}")
        raise ProvisioningError(name, e, tool=tool.name if tool else None) from e


class EnvironmentProvisioner:
    """Builds a tool environment from a manifest."""

    def __init__(
        self,
        paths: EnvironmentPaths,
        platform_info: PlatformInfo,
        policy: UndefinedPolicy = UndefinedPolicy.LENIENT,
        reporter: Optional[Reporter] = None,
        download_timeout: Optional[float] = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the provisioner.

        Args:
            paths: Layout of the environment being built.
            platform_info: Host platform, detected once by the caller.
            policy: Handling of unknown template placeholders.
            reporter: Sink for user-facing progress lines (print by default).
            download_timeout: Socket timeout for each artifact download.
        """
        self._paths = paths
        self._platform_info = platform_info
        self._policy = policy
        self._report = reporter or print
        self._download_timeout = download_timeout
        self._generator = ActivationScriptGenerator(policy=policy)

    def provision(self, manifest: Manifest) -> ProvisionResult:
        """Run the full pipeline for ``manifest``.

        Raises:
            ProvisioningError: On the first failing stage.
        """
        paths = self._paths

        with _stage("create env"):
            paths.ensure_bin_dir()

        with _stage("cleanup the storage"):
            paths.reset_storage()

        installed = [self._install_tool(tool) for tool in manifest]

        with _stage("generate the activation script"):
            self._generator.write(paths.activate_script, paths.env_name, manifest.tools)

        env_display = f"./{paths.env_name}"
        self._report(f"Environment created at {env_display}")
        self._report(f"Activate with: source {env_display}/bin/activate")

        return ProvisionResult(
            env_dir=paths.env_dir,
            activate_script=paths.activate_script,
            installed=installed,
        )

    def _install_tool(self, tool: ToolSpec) -> InstalledTool:
        platform_info = normalize_platform(self._platform_info, tool.normalization)
        LOGGER.debug(f"{tool.name}: platform {self._platform_info.name} -> {platform_info.name}")

        with _stage("build the tool URL for", tool):
            url = resolve_url(tool.url, tool.version, platform_info, self._policy)
            archive_format_for(url)

        with _stage("create installation directory for", tool):
            install_dir = self._paths.create_install_dir(tool.name, tool.version)

        self._report("")
        self._report(f"Installing {tool.name} version {tool.version} ...")

        with _stage("download and extract", tool):
            install_archive(
                url,
                install_dir,
                reporter=self._report,
                timeout=self._download_timeout,
            )

        self._report("|- Done!")
        self._report("")

        return InstalledTool(
            name=tool.name,
            version=tool.version,
            url=url,
            platform=platform_info,
            install_dir=install_dir,
        )
