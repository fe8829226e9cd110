"""
Version import for the Code Escape backend.

Single source of truth: codeescape/_version.py
"""

from codeescape._version import __version__, __release_date__

__all__ = ["__version__", "__release_date__"]
