"""
Top-level package for changelog_thing.

This package exposes the main CLI entry point via the
``changelog_thing.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.3.0"
