"""Word corpus loading.

The corpus is a flat file with one row per word, either CSV (with a header
row) or JSON lines. Both use the same field names::

    book, chapter, verse, position, word, punctuation, italic,
    open_paren, close_paren

Every row is validated into a ``Word``; a row that fails validation aborts
loading with ``CompilationError``.
"""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bible_search.compiler import CompilationError
from bible_search.models import Word

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("book", "chapter", "verse", "position", "word")
FLAG_FIELDS = ("italic", "open_paren", "close_paren")


def _word_from_row(row: dict[str, Any], where: str) -> Word:
    missing = [f for f in REQUIRED_FIELDS if row.get(f) in (None, "")]
    if missing:
        raise CompilationError(f"{where}: missing field(s) {', '.join(missing)}")

    data: dict[str, Any] = {
        "book": row["book"],
        "chapter": row["chapter"],
        "verse": row["verse"],
        "position": row["position"],
        "text": row["word"],
        "punctuation": row.get("punctuation") or None,
    }
    for flag in FLAG_FIELDS:
        value = row.get(flag)
        if value not in (None, ""):
            data[flag] = value

    try:
        return Word(**data)
    except ValidationError as e:
        raise CompilationError(f"{where}: invalid word record: {e}") from e


def _iter_csv(path: Path) -> Iterator[Word]:
    with path.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        # Header is line 1
        for lineno, row in enumerate(reader, start=2):
            yield _word_from_row(row, f"{path.name}:{lineno}")


def _iter_jsonl(path: Path) -> Iterator[Word]:
    with path.open(encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            where = f"{path.name}:{lineno}"
            try:
                row = json.loads(line)
            except json.JSONDecodeError as e:
                raise CompilationError(f"{where}: {e}") from e
            if not isinstance(row, dict):
                raise CompilationError(f"{where}: expected a JSON object")
            yield _word_from_row(row, where)


def load_words(path: str | Path) -> list[Word]:
    """Read every word record from a CSV or JSON-lines corpus file."""
    path = Path(path)
    if not path.exists():
        raise CompilationError(f"Word corpus not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        words = list(_iter_csv(path))
    elif suffix in (".jsonl", ".ndjson"):
        words = list(_iter_jsonl(path))
    else:
        raise CompilationError(
            f"Unsupported corpus format '{suffix}'. Use .csv or .jsonl"
        )

    logger.info("Loaded %d words from %s", len(words), path)
    return words
