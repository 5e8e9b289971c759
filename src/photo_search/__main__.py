"""
Allow running the console client as module: python -m photo_search
"""

from __future__ import annotations

import sys

from .presentation.cli.app import main

if __name__ == "__main__":
    sys.exit(main())
