"""Utility modules for the HTML spellchecker.

Only small, dependency-free helpers live here; the spellcheck pipeline itself
is in ``src.spellcheck``.
"""

from __future__ import annotations

from . import option_utils

__all__ = [
    "option_utils",
]
