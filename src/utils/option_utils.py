"""Helpers for turning command-line and environment values into options.

Functions:
    - cleanup_language: Normalise locale-like codes (``pt-BR.UTF-8`` -> ``pt_BR``)
    - env_option_as_list: Decode a list stored in an environment variable
    - parse_key_value_pairs: Turn ``key=value`` strings into a mapping
    - parse_personal_dicts: Like ``parse_key_value_pairs`` but allows one bare path
    - env_flag: Interpret an environment variable as a boolean
"""

from __future__ import annotations

import json
import re
from typing import Iterable

from src.spellcheck.errors import ConfigurationError

_LOCALE_TAIL = re.compile(r"[.@].*$")
_TRUTHY = {"1", "true", "yes", "on"}


def cleanup_language(language: str) -> str:
    """Strip encoding/modifier suffixes and use ``_`` as the region separator.

    Example:
        >>> cleanup_language("en-US.UTF-8")
        'en_US'
    """
    return _LOCALE_TAIL.sub("", language.strip()).replace("-", "_")


def env_option_as_list(value: str | None) -> list[str]:
    """Decode a list-valued environment variable.

    JSON arrays are accepted as-is. Otherwise the value is split on ``;`` when
    present, else on ``,``. Quotes outside valid JSON are rejected because the
    intended splitting cannot be guessed.
    """
    if not value:
        return []
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as exc:
        if '"' in value or "'" in value:
            raise ConfigurationError(
                f"unexpected serialized array: {value}. Use proper JSON! {exc}"
            ) from exc
        parts = value.split(";")
        if len(parts) > 1:
            return parts
        return parts[0].split(",")

    if isinstance(decoded, list):
        return [str(item) for item in decoded]
    return [str(decoded)]


def parse_key_value_pairs(items: Iterable[str] | None) -> dict[str, str]:
    """Build a mapping from ``key=value`` strings.

    Only the first ``=`` separates key from value; later duplicates of a key
    replace earlier ones.
    """
    mapping: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep:
            raise ConfigurationError(f"Invalid map format. Expected key=value, got: {item}")
        mapping[key] = value
    return mapping


def parse_personal_dicts(items: list[str] | None, language: str) -> dict[str, str]:
    """Parse personal dictionary arguments.

    A single entry without ``=`` is taken as the dictionary of the base
    ``language``.
    """
    if items and len(items) == 1 and "=" not in items[0]:
        return {cleanup_language(language): items[0]}
    return parse_key_value_pairs(items)


def env_flag(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY
