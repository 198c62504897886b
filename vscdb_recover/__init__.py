"""
Recover chat conversations from VSCode-family ``state.vscdb`` databases.
"""

__version__ = "0.1.0"
