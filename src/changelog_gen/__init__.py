"""
Top-level package for changelog_gen.

This package exposes the main CLI entry point via the
``changelog_gen.cli`` module.
"""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:
    __version__ = version("changelog-gen")
except PackageNotFoundError:
    # Running from a source checkout without installation
    __version__ = "0.0.0.dev0"
