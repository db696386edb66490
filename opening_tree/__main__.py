"""
Main entry point for running opening-tree.

Usage:
    python -m opening_tree --config config.json
"""

from opening_tree.cli import main

if __name__ == "__main__":
    main()
