"""Verse compiler: groups corpus words into verses and renders their text."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from itertools import groupby

from bible_search.models import Verse, Word

logger = logging.getLogger(__name__)

MAX_BOOK = 66
MAX_CHAPTER = 999
MAX_VERSE = 999

EMPHASIS_OPEN = "<em>"
EMPHASIS_CLOSE = "</em>"


class CompilationError(ValueError):
    """The word corpus cannot be compiled into a complete verse set."""


def verse_id(book: int, chapter: int, verse: int) -> int:
    """Encode a verse address as ``book * 1_000_000 + chapter * 1_000 + verse``.

    Chapter and verse each occupy three decimal digits, so ascending ids
    follow canonical reading order.
    """
    if not 1 <= book <= MAX_BOOK:
        raise CompilationError(f"Book id {book} is outside 1..{MAX_BOOK}")
    if not 1 <= chapter <= MAX_CHAPTER:
        raise CompilationError(
            f"Chapter {chapter} of book {book} is outside 1..{MAX_CHAPTER}"
        )
    if not 1 <= verse <= MAX_VERSE:
        raise CompilationError(
            f"Verse {book}:{chapter}:{verse} is outside 1..{MAX_VERSE}"
        )
    return book * 1_000_000 + chapter * 1_000 + verse


def split_verse_id(vid: int) -> tuple[int, int, int]:
    book, rest = divmod(vid, 1_000_000)
    chapter, verse = divmod(rest, 1_000)
    return book, chapter, verse


def render_word(word: Word, annotated: bool = False) -> str:
    text = word.text
    if annotated and word.italic:
        text = f"{EMPHASIS_OPEN}{text}{EMPHASIS_CLOSE}"
    # Punctuation trails the word (and its emphasis) inside any closing paren
    if word.punctuation:
        text += word.punctuation
    if word.open_paren:
        text = f"({text}"
    if word.close_paren:
        text = f"{text})"
    return text


def render_verse(words: list[Word], annotated: bool = False) -> str:
    return " ".join(render_word(w, annotated) for w in words)


def _verse_key(word: Word) -> tuple[int, int, int]:
    return (word.book, word.chapter, word.verse)


def compile_verse(words: list[Word]) -> Verse:
    """Compile the words of one verse partition, in position order."""
    if not words:
        raise CompilationError("Cannot compile a verse with no words")

    book, chapter, verse = _verse_key(words[0])
    vid = verse_id(book, chapter, verse)

    ordered = sorted(words, key=lambda w: w.position)
    positions = [w.position for w in ordered]
    if len(set(positions)) != len(positions):
        raise CompilationError(
            f"Duplicate word positions in verse {book}:{chapter}:{verse}"
        )

    return Verse(
        id=vid,
        book=book,
        chapter=chapter,
        verse=verse,
        plain=render_verse(ordered),
        annotated=render_verse(ordered, annotated=True),
    )


def _compile_partition(words: list[Word]) -> list[Verse]:
    words = sorted(words, key=_verse_key)
    return [compile_verse(list(group)) for _, group in groupby(words, key=_verse_key)]


def compile_verses(words: Iterable[Word], workers: int = 1) -> list[Verse]:
    """Compile the full word corpus into verses sorted by verse id.

    Books are disjoint partitions; with ``workers > 1`` they are compiled
    on a thread pool. The result is identical either way.
    """
    by_book: dict[int, list[Word]] = {}
    for word in words:
        by_book.setdefault(word.book, []).append(word)

    if not by_book:
        raise CompilationError("The word corpus is empty")

    partitions = [by_book[b] for b in sorted(by_book)]
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_compile_partition, partitions))
    else:
        results = [_compile_partition(p) for p in partitions]

    verses = [v for book_verses in results for v in book_verses]
    verses.sort(key=lambda v: v.id)
    logger.info(
        "Compiled %d verses from %d books (workers=%d)",
        len(verses),
        len(partitions),
        workers,
    )
    return verses
