"""
Entry point for running quillpress as a module.

Usage:
    python -m quillpress render document.json styles.json -o out.pdf
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
