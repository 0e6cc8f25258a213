"""Manifest loading for toolenv."""

from toolenv.config.loader import load_manifest
from toolenv.config.models import Manifest, Normalization, ToolSpec

__all__ = [
    "load_manifest",
    "Manifest",
    "Normalization",
    "ToolSpec",
]
