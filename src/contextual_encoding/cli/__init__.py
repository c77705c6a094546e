"""Command-line interface module for contextual encoding.

This module provides the contextual-encode filter, which encodes one value
read from a file or stdin for a chosen container.
"""

from .main import main

__all__ = ["main"]
