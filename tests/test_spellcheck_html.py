"""Tests for the document loop: summaries, fail-fast and session teardown."""

from __future__ import annotations

import sys
from concurrent.futures import Future
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.models import CheckContext, CheckResult, FaultCategory, ResultType, SpellcheckOptions
from src.spellcheck.errors import CheckerProcessError, ConfigurationError, DocumentError
from src.spellcheck.session_manager import AspellSessionManager
from src.spellcheck.spellcheck_html import (
    iter_html_documents,
    run_spellcheck,
    spellcheck_document,
)

MISSPELLED = {"teh": ["the", "tech"], "wrold": ["world"]}


class DummySession:
    instances: list["DummySession"] = []

    def __init__(self, language: str, args: list[str], *, command=("aspell",)) -> None:
        self.language = language
        self.args = args
        self.command = command
        self.words: list[str] = []
        self.closed = False
        DummySession.instances.append(self)

    def check_word(self, word: str, context: CheckContext) -> Future:
        self.words.append(word)
        future: Future = Future()
        if word in MISSPELLED:
            future.set_result(
                CheckResult(
                    word=word,
                    offset=context.offset,
                    language=context.language,
                    result_type=ResultType.MISSPELLING,
                    position=0,
                    alternatives=tuple(MISSPELLED[word]),
                )
            )
        else:
            future.set_result(CheckResult.passed(word, context))
        return future

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_sessions(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # Output paths are derived relative to the working directory.
    monkeypatch.chdir(tmp_path)
    DummySession.instances = []
    yield
    DummySession.instances = []


def write_html(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        "<!DOCTYPE html><html><head><title>doc</title></head>"
        f'<body><div id="md-contents">{body}</div></body></html>',
        encoding="utf-8",
    )
    return path


def make_manager(options: SpellcheckOptions) -> AspellSessionManager:
    return AspellSessionManager(options, session_factory=DummySession)


def test_clean_document_writes_nothing(tmp_path: Path) -> None:
    document = write_html(tmp_path / "clean.html", "<p>hello world</p>")
    options = SpellcheckOptions(output_dir=tmp_path / "out")

    report = spellcheck_document(document, options, make_manager(options))

    assert report.clean
    assert report.summary() == f"{document} => Ok!"
    assert not (tmp_path / "out").exists()


def test_annotated_document_is_written(tmp_path: Path) -> None:
    document = write_html(tmp_path / "bad.html", "<p>hello wrold</p><pre>teh</pre>")
    options = SpellcheckOptions(output_dir=tmp_path / "out")

    report = spellcheck_document(document, options, make_manager(options))

    assert not report.clean
    assert report.output_path == tmp_path / "out" / "bad-spellchecked.html"
    assert report.misspelled_words == 1
    html = report.output_path.read_text(encoding="utf-8")
    assert 'title="world?">wrold</abbr>' in html
    assert "<pre>teh</pre>" in html
    assert "abbr.misspelling" in html


def test_run_reports_each_document_and_fails(tmp_path: Path, capsys) -> None:
    first = write_html(tmp_path / "a.html", "<p>teh</p>")
    second = write_html(tmp_path / "b.html", "<p>hello</p>")
    options = SpellcheckOptions(output_dir=tmp_path / "out")

    status = run_spellcheck([first, second], options, sessions=make_manager(options))

    assert status == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        f"{first} => Failed: {tmp_path / 'out' / 'a-spellchecked.html'}",
        f"{second} => Ok!",
    ]
    assert all(session.closed for session in DummySession.instances)


def test_fail_fast_halts_after_first_annotated_document(tmp_path: Path, capsys) -> None:
    first = write_html(tmp_path / "a.html", "<p>teh</p>")
    second = write_html(tmp_path / "b.html", "<p>wrold</p>")
    options = SpellcheckOptions(output_dir=tmp_path / "out", fail_fast=True)

    status = run_spellcheck([first, second], options, sessions=make_manager(options))

    assert status == 1
    assert len(capsys.readouterr().out.splitlines()) == 1
    assert not (tmp_path / "out" / "b-spellchecked.html").exists()
    assert [s.words for s in DummySession.instances] == [["teh"]]
    assert all(session.closed for session in DummySession.instances)


def test_all_clean_documents_exit_zero(tmp_path: Path) -> None:
    documents = [
        write_html(tmp_path / "a.html", "<p>hello</p>"),
        write_html(tmp_path / "b.html", "<p>world</p>"),
    ]
    options = SpellcheckOptions(output_dir=tmp_path / "out")

    assert run_spellcheck(documents, options, sessions=make_manager(options)) == 0


def test_sessions_are_shared_and_created_per_language(tmp_path: Path) -> None:
    documents = [
        write_html(tmp_path / "a.html", "<p>hello <em>mundo</em></p>"),
        write_html(tmp_path / "b.html", "<p>world <em>bom</em></p>"),
    ]
    options = SpellcheckOptions(
        output_dir=tmp_path / "out",
        element_languages={"em": "pt_BR"},
        personal_dicts={"pt_BR": "pt.pws"},
    )

    run_spellcheck(documents, options, sessions=make_manager(options))

    by_language = {s.language: s for s in DummySession.instances}
    assert sorted(by_language) == ["en_US", "pt_BR"]
    assert by_language["en_US"].words == ["hello", "world"]
    assert by_language["pt_BR"].words == ["mundo", "bom"]
    assert by_language["pt_BR"].args[-1] == "--personal=pt.pws"
    assert "--personal=pt.pws" not in by_language["en_US"].args


def test_sessions_close_when_root_is_missing(tmp_path: Path) -> None:
    document = write_html(tmp_path / "a.html", "<p>hello</p>")
    options = SpellcheckOptions(output_dir=tmp_path / "out", root_selector="main")
    manager = make_manager(options)
    manager.session_for("en_US")

    with pytest.raises(ConfigurationError):
        run_spellcheck([document], options, sessions=manager)

    assert DummySession.instances[0].closed


def test_close_all_reraises_first_fault() -> None:
    class FaultySession(DummySession):
        def close(self) -> None:
            self.closed = True
            raise CheckerProcessError(FaultCategory.EXIT, "gone", language=self.language)

    options = SpellcheckOptions(element_languages={"em": "pt_BR"})
    manager = AspellSessionManager(options, session_factory=FaultySession)
    manager.session_for("en_US")
    manager.session_for("pt_BR")

    with pytest.raises(CheckerProcessError, match="gone"):
        manager.close_all()
    assert all(session.closed for session in DummySession.instances)


def test_directories_expand_to_unannotated_html(tmp_path: Path) -> None:
    reports = tmp_path / "reports"
    write_html(reports / "b.html", "")
    write_html(reports / "a.html", "")
    write_html(reports / "a-spellchecked.html", "")
    (reports / "notes.txt").write_text("x", encoding="utf-8")
    single = write_html(tmp_path / "single.html", "")

    documents = iter_html_documents([reports, single])

    assert documents == [reports / "a.html", reports / "b.html", single]


def test_no_inputs_use_default_directory(tmp_path: Path) -> None:
    write_html(tmp_path / "reports" / "x.html", "")

    assert iter_html_documents([], default_dir=tmp_path / "reports") == [
        tmp_path / "reports" / "x.html"
    ]


def test_missing_input_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        iter_html_documents([tmp_path / "missing.html"])


def test_undecodable_document_is_a_document_error(tmp_path: Path) -> None:
    document = tmp_path / "latin1.html"
    document.write_bytes("<p>ol\xe1</p>".encode("latin-1"))
    options = SpellcheckOptions(output_dir=tmp_path / "out")

    with pytest.raises(DocumentError, match="not valid UTF-8"):
        spellcheck_document(document, options, make_manager(options))
