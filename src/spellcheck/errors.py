"""Exceptions raised by the spellcheck package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from src.models.enums import FaultCategory


class SpellcheckError(Exception):
    """Base class for faults that abort a spellcheck run."""


class ConfigurationError(SpellcheckError):
    """Raised for malformed options or a root selector that matches nothing."""


class DocumentError(SpellcheckError):
    """Raised when an input document cannot be read."""


class ProtocolMismatchError(SpellcheckError):
    """Raised when a checker response cannot be matched to the queued request."""

    def __init__(self, expected: str | None, received: str | None, line: str = "") -> None:
        self.expected = expected
        self.received = received
        self.line = line
        if expected is None:
            message = f"unexpected response with no pending request: {line!r}"
        elif received is None and not line:
            message = f"no verdict for {expected!r} before end of results"
        elif received is None:
            message = f"unexpected response for {expected!r}: {line!r}"
        else:
            message = f"expected word: {expected}, got: {received}"
        super().__init__(message)


class CheckerProcessError(SpellcheckError):
    """Raised when the checker process fails to start, complains or dies."""

    def __init__(self, category: FaultCategory, message: str, *, language: str = "") -> None:
        self.category = category
        self.message = message.strip()
        self.language = language
        prefix = f"aspell ({language})" if language else "aspell"
        super().__init__(f"{prefix} {category.value} failure: {self.message}")
