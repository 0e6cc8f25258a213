"""Generation of files written into a tool environment."""

from toolenv.generation.activation import ActivationScriptGenerator

__all__ = ["ActivationScriptGenerator"]
