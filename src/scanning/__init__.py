# src/scanning/__init__.py

"""
Directory scanning with Ant/regex exclude patterns.
"""

from .patterns import DEFAULT_EXCLUDES, ExcludePatternSet
from .scanner import ContentScanner

__all__ = ["DEFAULT_EXCLUDES", "ExcludePatternSet", "ContentScanner"]
