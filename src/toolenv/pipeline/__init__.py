"""Provisioning pipeline for toolenv environments."""

from toolenv.pipeline.provisioner import (
    EnvironmentProvisioner,
    InstalledTool,
    ProvisionResult,
)

__all__ = [
    "EnvironmentProvisioner",
    "InstalledTool",
    "ProvisionResult",
]
