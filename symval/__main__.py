#!/usr/bin/env python3
"""
symval CLI entry point for `python -m symval`.

Usage:
    python -m symval demo
    python -m symval solve query.smt2
    python -m symval parse "(ADD 10 <x:8>)"
    python -m symval encode "(ADD 10 <x:8>)" --eq 15 --solve
"""

import sys
from symval.cli import main

if __name__ == "__main__":
    sys.exit(main())
