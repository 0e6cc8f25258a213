"""Allow ``python -m toolenv``."""

from __future__ import annotations

import sys

from toolenv.cli import main

if __name__ == "__main__":
    sys.exit(main())
