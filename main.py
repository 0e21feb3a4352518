"""Command-line entrypoint for the HTML spellchecker."""

from __future__ import annotations

from src.spellcheck.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
