"""
Main entry point for running the package as a module.

Uses the Click-based CLI from vscdb_recover/cli/.
"""
import sys

from vscdb_recover.cli import main

if __name__ == "__main__":
    sys.exit(main())
