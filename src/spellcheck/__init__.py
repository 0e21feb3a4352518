"""HTML spellcheck package exports.

This package exposes the key helpers used by other parts of the project
so callers can import from ``src.spellcheck``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .aspell_session import AspellSession, parse_response
    from .errors import (
        CheckerProcessError,
        ConfigurationError,
        DocumentError,
        ProtocolMismatchError,
        SpellcheckError,
    )
    from .reconciler import output_path_for, reconcile_document
    from .session_manager import AspellSessionManager
    from .spellcheck_html import (
        DocumentReport,
        iter_html_documents,
        run_spellcheck,
        spellcheck_document,
    )
    from .tree_walker import TreeWalker
    from .word_segmenter import is_word, iter_spans, split_words_and_spaces

__all__ = [
    "AspellSession",
    "AspellSessionManager",
    "CheckerProcessError",
    "ConfigurationError",
    "DocumentError",
    "DocumentReport",
    "ProtocolMismatchError",
    "SpellcheckError",
    "TreeWalker",
    "is_word",
    "iter_html_documents",
    "iter_spans",
    "output_path_for",
    "parse_response",
    "reconcile_document",
    "run_spellcheck",
    "spellcheck_document",
    "split_words_and_spaces",
]

_LAZY_EXPORTS = {
    # attribute -> (module, attribute)
    "AspellSession": (".aspell_session", "AspellSession"),
    "parse_response": (".aspell_session", "parse_response"),
    "AspellSessionManager": (".session_manager", "AspellSessionManager"),
    "CheckerProcessError": (".errors", "CheckerProcessError"),
    "ConfigurationError": (".errors", "ConfigurationError"),
    "DocumentError": (".errors", "DocumentError"),
    "ProtocolMismatchError": (".errors", "ProtocolMismatchError"),
    "SpellcheckError": (".errors", "SpellcheckError"),
    "DocumentReport": (".spellcheck_html", "DocumentReport"),
    "iter_html_documents": (".spellcheck_html", "iter_html_documents"),
    "run_spellcheck": (".spellcheck_html", "run_spellcheck"),
    "spellcheck_document": (".spellcheck_html", "spellcheck_document"),
    "TreeWalker": (".tree_walker", "TreeWalker"),
    "output_path_for": (".reconciler", "output_path_for"),
    "reconcile_document": (".reconciler", "reconcile_document"),
    "is_word": (".word_segmenter", "is_word"),
    "iter_spans": (".word_segmenter", "iter_spans"),
    "split_words_and_spaces": (".word_segmenter", "split_words_and_spaces"),
}


def __getattr__(name: str):
    """Lazily import and return exported attributes.

    Submodules import :mod:`src.models`, which in turn reads defaults from
    ``src.spellcheck.spellcheck_config``; importing them eagerly here would
    make that a cycle.
    """

    if name in _LAZY_EXPORTS:
        module_name, attr = _LAZY_EXPORTS[name]
        from importlib import import_module

        mod = import_module(f"src.spellcheck{module_name}")
        value = getattr(mod, attr)
        globals()[name] = value
        return value
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_EXPORTS.keys()))
