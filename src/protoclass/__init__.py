"""
protoclass: rewrite prototype-style JavaScript classes into class syntax.
"""

from .version import __version__  # noqa: F401

__all__ = [
    "syntax",
    "matcher",
    "edits",
    "migration",
    "errors",
    "config",
    "__version__",
]
