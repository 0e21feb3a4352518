"""Depth-first walk over a parsed document collecting misspelled text nodes."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from src.models import CheckContext, CheckResult, Misspelling, SpellcheckOptions

from .errors import ConfigurationError
from .word_segmenter import iter_spans

LOGGER = logging.getLogger(__name__)


def select_root(soup: BeautifulSoup, selector: str) -> Tag:
    """Return the element matching ``selector`` or raise ConfigurationError."""
    root = soup.select_one(selector)
    if root is None:
        raise ConfigurationError(
            f"Could not find root element using CSS selector: {selector}"
        )
    return root


class TreeWalker:
    """Walks a document tree and checks every text node against aspell.

    ``sessions`` only needs a ``session_for(language)`` method returning an
    object with ``check_word(word, context) -> Future``.
    """

    def __init__(self, options: SpellcheckOptions, sessions: Any) -> None:
        self.options = options
        self.sessions = sessions

    def check_root(self, soup: BeautifulSoup) -> list[Misspelling]:
        root = select_root(soup, self.options.root_selector)
        return self.check_children(root, self.options.language)

    def check_children(self, node: Tag, language: str) -> list[Misspelling]:
        misspellings: list[Misspelling] = []
        # Snapshot: the walk must not see nodes added by reconciliation.
        for child in list(node.children):
            misspellings.extend(self.check_node(child, language))
            if misspellings and self.options.fail_fast:
                break
        return misspellings

    def check_node(self, node: Any, language: str) -> list[Misspelling]:
        if isinstance(node, PreformattedString):
            # Comments, CDATA, doctypes and processing instructions
            LOGGER.debug("Skipping %s node", type(node).__name__)
            return []
        if isinstance(node, NavigableString):
            return self.check_text(node, language)
        if isinstance(node, Tag):
            return self.check_tag(node, language)
        LOGGER.warning("UNHANDLED: unexpected node type: %s", type(node).__name__)
        return []

    def check_tag(self, node: Tag, parent_language: str) -> list[Misspelling]:
        if node.name in self.options.ignore_elements:
            LOGGER.debug("ignored element: <%s>", node.name)
            return []
        language = self.options.element_languages.get(node.name, parent_language)
        return self.check_children(node, language)

    def check_text(self, node: NavigableString, language: str) -> list[Misspelling]:
        """Check every word of ``node`` concurrently and wait for all verdicts."""
        text = str(node)
        pending: list[Future | CheckResult] = []
        session = None
        for span in iter_spans(text):
            context = CheckContext(node=node, offset=span.offset, language=language)
            if not span.is_word:
                pending.append(CheckResult.passed(span.text, context))
                continue
            if session is None:
                session = self.sessions.session_for(language)
            pending.append(session.check_word(span.text, context))

        results = [
            item.result() if isinstance(item, Future) else item for item in pending
        ]
        if all(result.success for result in results):
            return []
        return [Misspelling(node=node, results=results)]
