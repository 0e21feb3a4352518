"""Rewrite misspelled text nodes in place and write the annotated document.

Each failing text node is replaced by plain text for the spans that passed
and one ``<abbr class="misspelling lang-xx">`` element per misspelled word,
whose ``title`` lists the suggestions. Documents without misspellings are
left untouched and nothing is written for them.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag

from src.models import CheckResult, Misspelling

from .spellcheck_config import (
    ANNOTATION_CLASS,
    ANNOTATION_STYLE,
    ANNOTATION_TAG,
    HTML_SUFFIX,
    SPELLCHECKED_SUFFIX,
)

LOGGER = logging.getLogger(__name__)


def output_path_for(document_path: Path, output_dir: Path) -> Path:
    """Return where the annotated copy of ``document_path`` is written.

    The input path (made relative to the working directory when possible) is
    placed under ``output_dir`` with ``-spellchecked`` inserted before the
    extension, e.g. ``reports/a.html`` -> ``<output_dir>/reports/a-spellchecked.html``.
    """
    relative = document_path
    if relative.is_absolute():
        try:
            relative = relative.relative_to(Path.cwd())
        except ValueError:
            relative = Path(relative.name)
    parts = [part for part in relative.parts if part not in ("", ".", "..")]
    relative = Path(*parts) if parts else Path(document_path.name)
    extension = relative.suffix or HTML_SUFFIX
    return output_dir / relative.with_name(f"{relative.stem}{SPELLCHECKED_SUFFIX}{extension}")


def build_annotation(soup: BeautifulSoup, result: CheckResult) -> Tag:
    tag = soup.new_tag(
        ANNOTATION_TAG,
        attrs={
            "class": [ANNOTATION_CLASS, f"lang-{result.language}"],
            "title": result.title,
        },
    )
    tag.string = result.word
    return tag


def build_fragments(soup: BeautifulSoup, results: Iterable[CheckResult]) -> list[PageElement]:
    """Replacement nodes for a text node, merging consecutive plain spans."""
    fragments: list[PageElement] = []
    plain = ""
    for result in results:
        if result.success:
            plain += result.word
            continue
        if plain:
            fragments.append(NavigableString(plain))
            plain = ""
        fragments.append(build_annotation(soup, result))
    if plain:
        fragments.append(NavigableString(plain))
    return fragments


def annotate_misspelling(
    soup: BeautifulSoup, misspelling: Misspelling, *, document: str = ""
) -> None:
    for failure in misspelling.failures:
        LOGGER.info("%s misspelled %s: %s", document, failure.language, failure.word)
    misspelling.node.replace_with(*build_fragments(soup, misspelling.results))


def inject_style(soup: BeautifulSoup) -> None:
    """Append the annotation style rule to ``<head>`` when the document has one."""
    head = soup.head
    if head is None:
        LOGGER.debug("Document has no <head>; annotation style not injected")
        return
    style = soup.new_tag("style", attrs={"type": "text/css"})
    style.string = ANNOTATION_STYLE
    head.append(style)


def write_annotated(soup: BeautifulSoup, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(str(soup), encoding="utf-8")
    return output_path


def reconcile_document(
    soup: BeautifulSoup,
    misspellings: list[Misspelling],
    output_path: Path,
    *,
    document: str = "",
) -> Path | None:
    """Annotate ``soup`` and write it; return ``None`` for a clean document."""
    if not misspellings:
        return None
    for misspelling in misspellings:
        annotate_misspelling(soup, misspelling, document=document)
    inject_style(soup)
    return write_annotated(soup, output_path)
