"""Command-line interface module for wish-xml.

Document checking, reformatting, element search and settings-file dumps.
"""

from .main import main

__all__ = ["main"]
