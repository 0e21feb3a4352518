"""Request and result records exchanged between the tree walker and a checker.

A :class:`CheckRequest` lives only while its word is in flight; the
:class:`CheckResult` it resolves to is immutable and is discarded once the
owning text node has been reconciled.
"""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any

from .enums import ResultType


@dataclass(frozen=True)
class CheckContext:
    """Where a word came from.

    Attributes:
        node: The text node holding the word (opaque to the checker)
        offset: Character offset of the word within the node's text
        language: Language code the word is checked against
    """

    node: Any
    offset: int
    language: str


@dataclass
class CheckRequest:
    """A word waiting for its verdict."""

    word: str
    context: CheckContext
    future: Future = field(default_factory=Future, repr=False)


@dataclass(frozen=True)
class CheckResult:
    """Outcome for one span of a text node.

    ``position`` is the offset reported by the checker and is only set for
    misspellings. ``alternatives`` keeps the checker's suggestion order.
    """

    word: str
    offset: int
    language: str
    result_type: ResultType = ResultType.OK
    position: int | None = None
    alternatives: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return self.result_type is not ResultType.MISSPELLING

    @classmethod
    def passed(cls, word: str, context: CheckContext) -> "CheckResult":
        return cls(word=word, offset=context.offset, language=context.language)

    @property
    def title(self) -> str:
        """Tooltip listing the alternatives, always ending with ``?``."""
        return ", ".join(self.alternatives) + "?"


@dataclass
class Misspelling:
    """A text node together with the verdicts for every span it contains."""

    node: Any
    results: list[CheckResult]

    @property
    def failures(self) -> list[CheckResult]:
        return [result for result in self.results if not result.success]
