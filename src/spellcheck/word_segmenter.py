"""Word / non-word segmentation of text node contents.

A word is a maximal run of Unicode letters and digits; everything else
(whitespace, punctuation, symbols and the underscore) forms non-word spans.
Only word spans are ever sent to the checker.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

WORD_CLASS = r"[^\W_]"
WORD_PATTERN = re.compile(rf"{WORD_CLASS}+")
SPAN_PATTERN = re.compile(rf"{WORD_CLASS}+|[\W_]+")


@dataclass(frozen=True)
class WordSpan:
    """A slice of the original text."""

    text: str
    offset: int
    is_word: bool


def is_word(text: str) -> bool:
    """Return True when ``text`` consists only of letters and digits."""
    return WORD_PATTERN.fullmatch(text) is not None


def iter_spans(text: str) -> Iterator[WordSpan]:
    """Yield alternating word and non-word spans covering ``text`` exactly."""
    for match in SPAN_PATTERN.finditer(text):
        span = match.group(0)
        yield WordSpan(text=span, offset=match.start(), is_word=is_word(span))


def split_words_and_spaces(text: str) -> list[str]:
    """Return the spans of ``text`` as plain strings."""
    return [span.text for span in iter_spans(text)]
