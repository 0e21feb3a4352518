"""Long-lived ``aspell -a`` process wrapped as an asynchronous word checker.

Each :class:`AspellSession` owns one aspell process bound to a single
language. Words are written one per line to the process's stdin and every
call to :meth:`AspellSession.check_word` returns a
:class:`concurrent.futures.Future` that is resolved by a reader thread once
the matching response line arrives.

Aspell answers in request order, so responses are matched positionally
against a FIFO of pending requests; the word echoed back by ``&``/``#``
lines must equal the word at the head of the queue. Each request line is
closed by a blank line, and a blank line reached before the head request got
its verdict is a mismatch too. Anything else means the session is
desynchronised and every pending request is failed.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable, Sequence

from src.models import CheckContext, CheckRequest, CheckResult, FaultCategory, ResultType

from .errors import CheckerProcessError, ProtocolMismatchError, SpellcheckError
from .spellcheck_config import DEFAULT_ASPELL_COMMAND
from .word_segmenter import is_word

LOGGER = logging.getLogger(__name__)

# Leading character of a response line -> verdict
RESPONSE_TYPES = {
    "*": ResultType.OK,
    "+": ResultType.OK,
    "-": ResultType.RUN_TOGETHER,
    "&": ResultType.MISSPELLING,
    "#": ResultType.MISSPELLING,
}

PopenFactory = Callable[..., Any]


def parse_response(line: str, word: str, context: CheckContext) -> CheckResult:
    """Turn one aspell response line into the result for ``word``.

    Formats handled (each followed by a blank line)::

        *                                   correct
        -                                   run-together word accepted
        & <word> <count> <offset>: <a>, <b>  misspelled, with suggestions
        # <word> <offset>                    misspelled, no suggestions

    Raises:
        ProtocolMismatchError: unknown marker, malformed line, or a line that
            describes a different word than ``word``.
    """
    marker = line[:1]
    result_type = RESPONSE_TYPES.get(marker)
    if result_type is None:
        raise ProtocolMismatchError(word, None, line)

    if result_type is not ResultType.MISSPELLING:
        return CheckResult(
            word=word,
            offset=context.offset,
            language=context.language,
            result_type=result_type,
        )

    head, _, tail = line.partition(": ")
    fields = head.split()
    claimed = fields[1] if len(fields) > 1 else None
    if claimed != word:
        raise ProtocolMismatchError(word, claimed, line)

    position_index = 2 if marker == "#" else 3
    try:
        position = int(fields[position_index])
    except (IndexError, ValueError) as exc:
        raise ProtocolMismatchError(word, claimed, line) from exc

    alternatives: tuple[str, ...] = ()
    if marker == "&" and tail:
        alternatives = tuple(alt.strip() for alt in tail.split(",") if alt.strip())

    return CheckResult(
        word=word,
        offset=context.offset,
        language=context.language,
        result_type=result_type,
        position=position,
        alternatives=alternatives,
    )


class AspellSession:
    """One aspell process checking words for ``language``."""

    def __init__(
        self,
        language: str,
        args: Sequence[str] | None = None,
        *,
        command: Sequence[str] = DEFAULT_ASPELL_COMMAND,
        popen: PopenFactory = subprocess.Popen,
    ) -> None:
        self.language = language
        self.args = list(args or [])
        self.command = [*command, "-a", f"--lang={language}", *self.args]

        self._queue: deque[CheckRequest] = deque()
        self._lock = threading.Lock()
        self._fault: SpellcheckError | None = None
        self._ended = False
        # Reader-thread state: the head request already got its verdict.
        self._answered = False

        try:
            self._process = popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                bufsize=1,
            )
        except (OSError, ValueError) as exc:
            error = CheckerProcessError(FaultCategory.SPAWN, str(exc), language=language)
            LOGGER.error("Failed to run aspell: %s", FaultCategory.SPAWN.value)
            LOGGER.error("%s", error.message)
            raise error from exc

        LOGGER.debug("Started aspell for %s: %s", language, " ".join(self.command))

        self._stdout_thread = threading.Thread(
            target=self._read_results,
            name=f"aspell-{language}-stdout",
            daemon=True,
        )
        self._stderr_thread = threading.Thread(
            target=self._read_diagnostics,
            name=f"aspell-{language}-stderr",
            daemon=True,
        )
        self._stdout_thread.start()
        self._stderr_thread.start()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def check_word(self, word: str, context: CheckContext) -> Future:
        """Queue ``word`` for checking and return the future of its result."""
        if not is_word(word):
            raise ValueError(
                f"aspell should get only words (letters and numbers), got {word!r}"
            )

        request = CheckRequest(word=word, context=context)
        with self._lock:
            if self._fault is not None:
                raise self._fault
            if self._ended:
                raise RuntimeError(f"aspell session for {self.language} already ended")
            self._queue.append(request)

        # Written outside the lock: a full stdin pipe must not block the reader.
        try:
            self._process.stdin.write(word + "\n")
            self._process.stdin.flush()
        except (OSError, ValueError) as exc:
            self._report(FaultCategory.STDIN, str(exc))
        return request.future

    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def fault(self) -> SpellcheckError | None:
        return self._fault

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------
    def end(self) -> None:
        """Half-close stdin so aspell flushes its remaining answers and exits."""
        with self._lock:
            if self._ended:
                return
            self._ended = True
        try:
            self._process.stdin.close()
        except (OSError, ValueError) as exc:
            self._report(FaultCategory.STDIN, str(exc))

    def close(self) -> None:
        """End the session, wait for the process and raise any fatal fault."""
        self.end()
        self._stdout_thread.join()
        self._stderr_thread.join()
        returncode = self._process.wait()
        if returncode:
            LOGGER.warning("aspell (%s) exited with status %s", self.language, returncode)
        if self._fault is not None:
            raise self._fault

    def __enter__(self) -> "AspellSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        try:
            self.close()
        except SpellcheckError:
            LOGGER.debug("Suppressed aspell fault while unwinding", exc_info=True)

    # ------------------------------------------------------------------
    # Reader threads
    # ------------------------------------------------------------------
    def _read_results(self) -> None:
        try:
            for raw_line in self._process.stdout:
                if self._fault is not None:
                    continue
                line = raw_line.rstrip("\r\n")
                try:
                    self._handle_line(line)
                except ProtocolMismatchError as exc:
                    LOGGER.error("aspell (%s) protocol mismatch: %s", self.language, exc)
                    self._fail(exc)
        except (OSError, ValueError) as exc:
            self._report(FaultCategory.EXIT, f"reading results failed: {exc}")
            return

        pending = self.pending()
        if pending:
            self._report(
                FaultCategory.EXIT,
                f"process exited with {pending} pending request(s)",
            )

    def _handle_line(self, line: str) -> None:
        if not line:
            self._end_of_results()
            return
        if line.startswith("@"):
            LOGGER.debug("ignored aspell result (%s): comment %s", self.language, line)
            return

        with self._lock:
            request = self._queue.popleft() if self._queue else None
        if request is None:
            raise ProtocolMismatchError(None, None, line)
        self._answered = True

        try:
            result = parse_response(line, request.word, request.context)
        except ProtocolMismatchError as exc:
            request.future.set_exception(exc)
            raise
        request.future.set_result(result)

    def _end_of_results(self) -> None:
        """A blank line closes the results of one request line.

        The head request must have received its verdict before the blank
        line; aspell answers some tokens (digits-only words) with nothing
        but the terminator.
        """
        if self._answered:
            self._answered = False
            return

        with self._lock:
            request = self._queue.popleft() if self._queue else None
        if request is None:
            LOGGER.debug("ignored aspell result (%s): line-break", self.language)
            return

        error = ProtocolMismatchError(request.word, None)
        request.future.set_exception(error)
        raise error

    def _read_diagnostics(self) -> None:
        try:
            for raw_line in self._process.stderr:
                message = raw_line.strip()
                if message:
                    self._report(FaultCategory.STDERR, message)
        except (OSError, ValueError) as exc:
            self._report(FaultCategory.STDERR, str(exc))

    # ------------------------------------------------------------------
    # Faults
    # ------------------------------------------------------------------
    def _report(self, category: FaultCategory, message: str) -> None:
        error = CheckerProcessError(category, message, language=self.language)
        if not category.is_fatal:
            LOGGER.warning("aspell (%s) %s error ignored: %s", self.language, category.value, error.message)
            return
        LOGGER.error("Failed to run aspell: %s", category.value)
        LOGGER.error("%s", error.message)
        self._fail(error)

    def _fail(self, error: SpellcheckError) -> None:
        """Record the first fatal fault and fail every request still queued."""
        with self._lock:
            if self._fault is None:
                self._fault = error
            pending = list(self._queue)
            self._queue.clear()
        for request in pending:
            if not request.future.done():
                request.future.set_exception(error)
