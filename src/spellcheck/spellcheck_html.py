"""Spellcheck rendered HTML documents and write annotated copies.

Each document is parsed with BeautifulSoup, walked from the configured root
element and every text node is checked by the aspell session of its
language. Documents with misspellings are written to the output directory
with ``<abbr class="misspelling">`` markers; clean documents only produce an
``Ok!`` line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from bs4 import BeautifulSoup

from src.models import SpellcheckOptions

from .errors import DocumentError
from .reconciler import output_path_for, reconcile_document
from .session_manager import AspellSessionManager
from .spellcheck_config import DEFAULT_INPUT_DIR, HTML_SUFFIX, SPELLCHECKED_SUFFIX
from .tree_walker import TreeWalker

LOGGER = logging.getLogger(__name__)

HTML_PARSER = "html.parser"


@dataclass
class DocumentReport:
    """Outcome of checking one document."""

    path: Path
    output_path: Path | None = None
    misspelled_nodes: int = 0
    misspelled_words: int = 0

    @property
    def clean(self) -> bool:
        return self.output_path is None

    def summary(self) -> str:
        if self.clean:
            return f"{self.path} => Ok!"
        return f"{self.path} => Failed: {self.output_path}"


def list_directory_htmls(directory: Path) -> list[Path]:
    """Return the HTML files directly inside ``directory``, skipping annotated copies."""
    annotated = f"{SPELLCHECKED_SUFFIX}{HTML_SUFFIX}"
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.name.endswith(HTML_SUFFIX) and not path.name.endswith(annotated)
    )


def iter_html_documents(
    inputs: Sequence[Path | str] | None, *, default_dir: Path | str = DEFAULT_INPUT_DIR
) -> list[Path]:
    """Expand the command-line inputs into the list of documents to check."""
    if not inputs:
        return list_directory_htmls(Path(default_dir))

    documents: list[Path] = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            documents.extend(list_directory_htmls(path))
        elif path.is_file():
            documents.append(path)
        else:
            raise FileNotFoundError(f"Document not found: {path}")
    return documents


def spellcheck_document(
    document_path: Path,
    options: SpellcheckOptions,
    sessions: AspellSessionManager,
) -> DocumentReport:
    """Check one document and write its annotated copy if anything failed."""
    try:
        markup = document_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentError(f"{document_path} is not valid UTF-8: {exc}") from exc
    soup = BeautifulSoup(markup, HTML_PARSER)

    misspellings = TreeWalker(options, sessions).check_root(soup)
    report = DocumentReport(
        path=document_path,
        misspelled_nodes=len(misspellings),
        misspelled_words=sum(len(m.failures) for m in misspellings),
    )
    report.output_path = reconcile_document(
        soup,
        misspellings,
        output_path_for(document_path, options.output_dir),
        document=str(document_path),
    )
    return report


def check_documents(
    documents: Iterable[Path],
    options: SpellcheckOptions,
    sessions: AspellSessionManager,
) -> list[DocumentReport]:
    """Check ``documents`` in order, stopping after the first failure when fail-fast is set."""
    reports: list[DocumentReport] = []
    for document_path in documents:
        LOGGER.debug("Checking %s", document_path)
        report = spellcheck_document(document_path, options, sessions)
        print(report.summary())
        reports.append(report)
        if not report.clean:
            LOGGER.info(
                "%s: %d misspelled word(s) in %d text node(s)",
                document_path,
                report.misspelled_words,
                report.misspelled_nodes,
            )
            if options.fail_fast:
                break
    return reports


def run_spellcheck(
    documents: Iterable[Path],
    options: SpellcheckOptions,
    *,
    sessions: AspellSessionManager | None = None,
) -> int:
    """Check every document and return the process exit status.

    0 means every document was clean, 1 means at least one was annotated.
    Sessions are closed once the loop ends, including when it halts early or
    a fault propagates.
    """
    manager = sessions or AspellSessionManager(options)
    with manager:
        reports = check_documents(documents, options, manager)
    return 0 if all(report.clean for report in reports) else 1
