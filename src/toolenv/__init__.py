"""toolenv - virtual tool environment manager.

Provisions a per-project directory of versioned command-line tools from a
``toolenv.yml`` manifest and generates a shell activation script for it.
"""

__version__ = "0.1.0"
