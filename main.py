#!/usr/bin/env python3
"""
Tide - repository history graph for a desktop git client

This is a convenience wrapper for running from the repo root.
The actual entry point is tide.main:main (for pip install).
"""

import sys

from tide.main import main

if __name__ == "__main__":
    sys.exit(main())
