"""
Command-line interface for the cwreporter package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
