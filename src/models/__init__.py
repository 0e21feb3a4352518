"""Public model exports for the project.

Keep the :mod:`src` namespace clean: tests and other modules should import
``from src.models import CheckResult, ResultType``.
"""

from __future__ import annotations

from .check_result import CheckContext, CheckRequest, CheckResult, Misspelling
from .enums import FaultCategory, ResultType
from .options import SpellcheckOptions

__all__ = [
    "CheckContext",
    "CheckRequest",
    "CheckResult",
    "Misspelling",
    "FaultCategory",
    "ResultType",
    "SpellcheckOptions",
]
