"""Command-line entrypoint for the HTML spellchecker.

Every option falls back to an environment variable (``ROOT``, ``LANG``,
``ELEMENT_LANG``, ``IGNORE_ELEMENT``, ``PERSONAL_DICT``, ``ASPELL_OPTIONS``,
``ASPELL_COMMAND``, ``FAIL_FAST``, ``OUTPUT_DIR``, ``VERBOSE``) and then to
the defaults in :mod:`src.spellcheck.spellcheck_config`. A ``.env`` file in
the working directory is loaded first.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Iterable, Mapping, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from src.models import SpellcheckOptions
from src.utils.option_utils import (
    cleanup_language,
    env_flag,
    env_option_as_list,
    parse_key_value_pairs,
    parse_personal_dicts,
)

from .errors import CheckerProcessError, ConfigurationError, SpellcheckError
from .session_manager import AspellSessionManager, SessionFactory
from .spellcheck_config import (
    DEFAULT_ASPELL_COMMAND,
    DEFAULT_ASPELL_OPTIONS,
    DEFAULT_IGNORE_ELEMENTS,
    DEFAULT_INPUT_DIR,
    DEFAULT_LANGUAGE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_ROOT_SELECTOR,
)
from .spellcheck_html import iter_html_documents, run_spellcheck

LOGGER = logging.getLogger(__name__)

# Locale names that are not dictionaries
_NON_LANGUAGES = {"C", "POSIX"}


def build_parser(environ: Mapping[str, str] | None = None) -> argparse.ArgumentParser:
    env = os.environ if environ is None else environ
    parser = argparse.ArgumentParser(
        description="Spellcheck rendered HTML documents with aspell and write annotated copies.",
        usage="%(prog)s [options] file1.html [... fileN.html]",
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        help=f"HTML files or directories to check (default: {DEFAULT_INPUT_DIR})",
    )
    parser.add_argument(
        "-r",
        "--root-element",
        default=None,
        help=f"CSS selector of the root element to start spellcheck on (default: env ROOT or {DEFAULT_ROOT_SELECTOR})",
    )
    parser.add_argument(
        "-l",
        "--lang",
        default=None,
        help=f"Native (main) language of the documents (default: env LANG or {DEFAULT_LANGUAGE})",
    )
    parser.add_argument(
        "-e",
        "--element-lang",
        action="extend",
        nargs="+",
        metavar="ELEMENT=LANG",
        help="Map the given HTML element to the given language (ie: em=pt_BR)",
    )
    parser.add_argument(
        "-i",
        "--ignore-element",
        action="extend",
        nargs="+",
        metavar="ELEMENT",
        help=f"Ignore the given element (default: {' '.join(DEFAULT_IGNORE_ELEMENTS)})",
    )
    parser.add_argument(
        "-p",
        "--personal-dict",
        action="extend",
        nargs="+",
        metavar="LANG=PATH",
        help="Use the given dict for a language (ie: en_US=mydict-en_US.pws); a bare path applies to --lang",
    )
    parser.add_argument(
        "-A",
        "--aspell-option",
        action="extend",
        nargs="+",
        metavar="OPTION",
        help=f"Arguments passed to aspell (default: {' '.join(DEFAULT_ASPELL_OPTIONS)})",
    )
    parser.add_argument(
        "--aspell-command",
        default=None,
        help=f"Command used to start aspell (default: env ASPELL_COMMAND or {' '.join(DEFAULT_ASPELL_COMMAND)})",
    )
    parser.add_argument(
        "-f",
        "--fail-fast",
        action="store_true",
        default=env_flag(env.get("FAIL_FAST")),
        help="Fail fast, exit on the first document that fails.",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help=f"Output directory to place each file (default: env OUTPUT_DIR or {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=_env_int(env.get("VERBOSE")),
        help="Be verbose while spellchecking (repeat for more detail).",
    )
    return parser


def _env_int(value: str | None) -> int:
    if not value:
        return 0
    try:
        return max(0, int(value))
    except ValueError as exc:
        raise ConfigurationError(f"VERBOSE must be an integer, got: {value}") from exc


def parse_args(
    argv: Optional[Iterable[str]] = None, environ: Mapping[str, str] | None = None
) -> argparse.Namespace:
    return build_parser(environ).parse_args(list(argv) if argv is not None else None)


def _resolve_language(args: argparse.Namespace, env: Mapping[str, str]) -> str:
    language = cleanup_language(args.lang or env.get("LANG") or DEFAULT_LANGUAGE)
    if not language or language in _NON_LANGUAGES:
        return DEFAULT_LANGUAGE
    return language


def build_options(
    args: argparse.Namespace, environ: Mapping[str, str] | None = None
) -> SpellcheckOptions:
    """Merge parsed arguments, environment variables and defaults."""
    env = os.environ if environ is None else environ
    language = _resolve_language(args, env)

    element_langs = args.element_lang
    if element_langs is None:
        element_langs = env_option_as_list(env.get("ELEMENT_LANG"))

    ignore_elements = args.ignore_element
    if ignore_elements is None:
        ignore_elements = env_option_as_list(env.get("IGNORE_ELEMENT")) or list(DEFAULT_IGNORE_ELEMENTS)

    personal_dicts = args.personal_dict
    if personal_dicts is None:
        personal_dicts = env_option_as_list(env.get("PERSONAL_DICT"))

    aspell_options = args.aspell_option
    if aspell_options is None:
        aspell_options = env_option_as_list(env.get("ASPELL_OPTIONS")) or list(DEFAULT_ASPELL_OPTIONS)

    aspell_command = args.aspell_command or env.get("ASPELL_COMMAND") or DEFAULT_ASPELL_COMMAND

    try:
        return SpellcheckOptions(
            root_selector=args.root_element or env.get("ROOT") or DEFAULT_ROOT_SELECTOR,
            language=language,
            element_languages=parse_key_value_pairs(element_langs),
            ignore_elements=ignore_elements,
            personal_dicts=parse_personal_dicts(personal_dicts, language),
            aspell_options=tuple(aspell_options),
            aspell_command=aspell_command,
            fail_fast=args.fail_fast,
            output_dir=args.output_dir or Path(env.get("OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
            verbose=args.verbose or 0,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid options: {exc}") from exc


def configure_logging(verbose: int) -> None:
    """Map the verbosity count onto logging levels.

    0 warnings only, 1 every misspelling, 2 ignored elements, 3 the raw
    aspell protocol chatter as well.
    """
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG
    logging.basicConfig(level=level)
    protocol_level = logging.DEBUG if verbose > 2 else max(level, logging.INFO)
    logging.getLogger("src.spellcheck.aspell_session").setLevel(protocol_level)


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    environ: Mapping[str, str] | None = None,
    session_factory: SessionFactory | None = None,
) -> int:
    if environ is None:
        load_dotenv()
        environ = os.environ

    try:
        args = parse_args(argv, environ)
        options = build_options(args, environ)
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.WARNING)
        LOGGER.error("%s", exc)
        return 1

    configure_logging(options.verbose)

    try:
        documents = iter_html_documents(args.inputs)
    except FileNotFoundError as exc:
        LOGGER.error("%s", exc)
        return 1

    LOGGER.info(
        "Spellchecking %d document(s), languages: %s",
        len(documents),
        ", ".join(options.languages()),
    )

    if session_factory is None:
        sessions = AspellSessionManager(options)
    else:
        sessions = AspellSessionManager(options, session_factory=session_factory)

    try:
        return run_spellcheck(documents, options, sessions=sessions)
    except CheckerProcessError as exc:
        LOGGER.error("Spellcheck aborted, aspell %s failure: %s", exc.category.value, exc.message)
        return 1
    except SpellcheckError as exc:
        LOGGER.error("ERROR: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
