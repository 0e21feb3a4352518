"""Defaults for the HTML spellcheck run.

Everything here can be overridden from the command line or the matching
environment variable (see :mod:`src.spellcheck.cli`).
"""

DEFAULT_INPUT_DIR = "./reports"
DEFAULT_OUTPUT_DIR = "./out/spellchecked"
DEFAULT_ROOT_SELECTOR = "#md-contents"
DEFAULT_LANGUAGE = "en_US"

# Subtrees that never contain prose worth checking
DEFAULT_IGNORE_ELEMENTS = ("pre", "code", "a", "svg", "script", "style")

DEFAULT_ASPELL_COMMAND = ("aspell",)
DEFAULT_ASPELL_OPTIONS = ("--encoding=utf-8", "--guess", "--run-together")

HTML_SUFFIX = ".html"
SPELLCHECKED_SUFFIX = "-spellchecked"

ANNOTATION_TAG = "abbr"
ANNOTATION_CLASS = "misspelling"
ANNOTATION_STYLE = (
    "abbr.misspelling { text-decoration: underline red; "
    "background-color: rgba(255, 40, 100, 0.25); }"
)
