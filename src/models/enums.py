"""Enumerations shared by the spellcheck models.

Values are the lower-case labels that appear in log output, so keep them
stable.
"""

from __future__ import annotations

from enum import Enum


class ResultType(str, Enum):
    """Kind of verdict the checker produced for a single word.

    Values:
        OK: Word found in the dictionary (``*`` or ``+`` lines)
        RUN_TOGETHER: Word accepted as a compound of dictionary words (``-``)
        MISSPELLING: Word not found (``&`` with suggestions, ``#`` without)
    """

    OK = "ok"
    RUN_TOGETHER = "run-together"
    MISSPELLING = "misspelling"


class FaultCategory(str, Enum):
    """Where a checker process fault was observed.

    Values:
        SPAWN: The process could not be started
        STDERR: The process wrote diagnostics to its error stream
        STDIN: Writing a word to the process failed
        EXIT: The process exited while requests were still pending
    """

    SPAWN = "spawn"
    STDERR = "stderr"
    STDIN = "stdin"
    EXIT = "exit"

    @property
    def is_fatal(self) -> bool:
        return self is not FaultCategory.STDIN
