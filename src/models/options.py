"""Validated run configuration for the HTML spellchecker."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.spellcheck.spellcheck_config import (
    DEFAULT_ASPELL_COMMAND,
    DEFAULT_ASPELL_OPTIONS,
    DEFAULT_IGNORE_ELEMENTS,
    DEFAULT_LANGUAGE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_ROOT_SELECTOR,
)
from src.utils.option_utils import cleanup_language


class SpellcheckOptions(BaseModel):
    """Options shared read-only by every component for the whole run.

    - root_selector: CSS selector of the element the walk starts from
    - language: Base language of the documents
    - element_languages: Element name -> language override (e.g. ``em`` -> ``pt_BR``)
    - ignore_elements: Element names whose subtrees are never checked
    - personal_dicts: Language -> personal word list passed to aspell
    - aspell_options: Extra arguments for every aspell process
    - aspell_command: Executable (plus leading arguments) used to start aspell
    - fail_fast: Stop after the first document with misspellings
    - output_dir: Where annotated documents are written
    - verbose: Verbosity count from the command line
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    root_selector: str = DEFAULT_ROOT_SELECTOR
    language: str = DEFAULT_LANGUAGE
    element_languages: dict[str, str] = Field(default_factory=dict)
    ignore_elements: frozenset[str] = frozenset(DEFAULT_IGNORE_ELEMENTS)
    personal_dicts: dict[str, Path] = Field(default_factory=dict)
    aspell_options: tuple[str, ...] = DEFAULT_ASPELL_OPTIONS
    aspell_command: tuple[str, ...] = DEFAULT_ASPELL_COMMAND
    fail_fast: bool = False
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    verbose: int = Field(default=0, ge=0)

    @field_validator("root_selector", mode="before")
    def _strip_selector(cls, value: object) -> str:
        result = str(value or "").strip()
        if not result:
            raise ValueError("root_selector must not be empty")
        return result

    @field_validator("language", mode="before")
    def _normalise_language(cls, value: object) -> str:
        result = cleanup_language(str(value or ""))
        if not result:
            raise ValueError("language must not be empty")
        return result

    @field_validator("element_languages", mode="before")
    def _normalise_element_languages(cls, value: object) -> dict[str, str]:
        if not value:
            return {}
        return {
            str(name).strip().lower(): cleanup_language(str(language))
            for name, language in dict(value).items()
        }

    @field_validator("personal_dicts", mode="before")
    def _normalise_personal_dicts(cls, value: object) -> dict[str, Path]:
        if not value:
            return {}
        return {cleanup_language(str(lang)): Path(path) for lang, path in dict(value).items()}

    @field_validator("ignore_elements", mode="before")
    def _normalise_ignore_elements(cls, value: object) -> frozenset[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        return frozenset(str(name).strip().lower() for name in value if str(name).strip())

    @field_validator("aspell_command", mode="before")
    def _require_command(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            value = value.split()
        result = tuple(str(part) for part in (value or ()) if str(part))
        if not result:
            raise ValueError("aspell_command must name an executable")
        return result

    @model_validator(mode="after")
    def _check_override_languages(self) -> "SpellcheckOptions":
        for name, language in self.element_languages.items():
            if not name or not language:
                raise ValueError(f"Invalid element language override: {name}={language}")
        return self

    def languages(self) -> list[str]:
        """Return the base language followed by every override language, once each."""
        ordered = [self.language]
        for language in self.element_languages.values():
            if language not in ordered:
                ordered.append(language)
        return ordered

    def checker_args_for(self, language: str) -> list[str]:
        """Arguments for the aspell process of ``language``."""
        args = list(self.aspell_options)
        personal = self.personal_dicts.get(language)
        if personal is not None:
            args.append(f"--personal={personal}")
        return args
