"""Per-language aspell session bookkeeping.

Sessions are created the first time a language is needed and are shared by
every document of the run; :meth:`AspellSessionManager.close_all` tears them
down once the last document has been checked.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from src.models import SpellcheckOptions

from .aspell_session import AspellSession
from .errors import SpellcheckError

LOGGER = logging.getLogger(__name__)

SessionFactory = Callable[..., Any]


class AspellSessionManager:
    """Factory and registry of :class:`AspellSession` objects keyed by language."""

    def __init__(
        self,
        options: SpellcheckOptions,
        *,
        session_factory: SessionFactory = AspellSession,
    ) -> None:
        self.options = options
        self._session_factory = session_factory
        self._sessions: dict[str, Any] = {}

    def session_for(self, language: str) -> Any:
        """Return the session for ``language``, starting it on first use."""
        session = self._sessions.get(language)
        if session is None:
            args = self.options.checker_args_for(language)
            LOGGER.info("Starting aspell session for %s", language)
            session = self._session_factory(
                language,
                args,
                command=self.options.aspell_command,
            )
            self._sessions[language] = session
        return session

    def close_all(self) -> None:
        """Close every session; the first fatal fault is re-raised afterwards."""
        first_error: SpellcheckError | None = None
        sessions, self._sessions = self._sessions, {}
        for language, session in sessions.items():
            try:
                session.close()
            except SpellcheckError as exc:
                LOGGER.debug("aspell session for %s closed with a fault", language)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "AspellSessionManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close_all()
            return
        try:
            self.close_all()
        except SpellcheckError:
            LOGGER.debug("Suppressed aspell fault while unwinding", exc_info=True)
