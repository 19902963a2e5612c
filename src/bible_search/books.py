"""Canonical book table and the book-alias index used for reference lookup.

Books are listed in King James order; the position in ``BOOKS`` is the book
id. Aliases are configuration data: each entry lists the abbreviations for
the book, and numbered books (``1 Samuel``, ``2 Kings``, ...) have their
abbreviations expanded with arabic, roman and ordinal prefixes.
"""

from __future__ import annotations

import logging
import re

from bible_search.models import Book, Testament

logger = logging.getLogger(__name__)

# (name, chapter_count, abbreviations). For numbered books the abbreviations
# are for the unnumbered part and get every NUMBER_PREFIXES variant.
BOOK_TABLE: list[tuple[str, int, tuple[str, ...]]] = [
    ("Genesis", 50, ("gen", "ge", "gn")),
    ("Exodus", 40, ("exod", "exo", "exd")),
    ("Leviticus", 27, ("lev", "lv")),
    ("Numbers", 36, ("num", "nm", "nb")),
    ("Deuteronomy", 34, ("deut", "deu", "dt")),
    ("Joshua", 24, ("josh", "jos", "jsh")),
    ("Judges", 21, ("judg", "jdg", "jdgs", "jg")),
    ("Ruth", 4, ("rut", "rth", "ru")),
    ("1 Samuel", 31, ("samuel", "sam", "sa", "sm")),
    ("2 Samuel", 24, ("samuel", "sam", "sa", "sm")),
    ("1 Kings", 22, ("kings", "kgs", "kin", "ki")),
    ("2 Kings", 25, ("kings", "kgs", "kin", "ki")),
    ("1 Chronicles", 29, ("chronicles", "chron", "chr", "ch")),
    ("2 Chronicles", 36, ("chronicles", "chron", "chr", "ch")),
    ("Ezra", 10, ("ezr",)),
    ("Nehemiah", 13, ("neh", "ne")),
    ("Esther", 10, ("esth", "est", "es")),
    ("Job", 42, ("jb",)),
    ("Psalms", 150, ("psalm", "pss", "psa", "psm", "ps")),
    ("Proverbs", 31, ("prov", "prv", "pro", "pr")),
    ("Ecclesiastes", 12, ("eccl", "ecc", "ec", "qoheleth", "qoh")),
    ("Song of Solomon", 8, ("song of songs", "canticles", "song", "sng", "sos")),
    ("Isaiah", 66, ("isa",)),
    ("Jeremiah", 52, ("jer", "je")),
    ("Lamentations", 5, ("lam", "la")),
    ("Ezekiel", 48, ("ezek", "eze", "ezk")),
    ("Daniel", 12, ("dan", "da", "dn")),
    ("Hosea", 14, ("hos", "ho")),
    ("Joel", 3, ("jol", "jl")),
    ("Amos", 9, ("amo",)),
    ("Obadiah", 1, ("obad", "oba", "ob")),
    ("Jonah", 4, ("jon", "jnh")),
    ("Micah", 7, ("mic", "mi")),
    ("Nahum", 3, ("nah", "na")),
    ("Habakkuk", 3, ("hab", "hb")),
    ("Zephaniah", 3, ("zeph", "zep", "zp")),
    ("Haggai", 2, ("hag", "hg")),
    ("Zechariah", 14, ("zech", "zec", "zch", "zc")),
    ("Malachi", 4, ("mal", "ml")),
    ("Matthew", 28, ("matt", "mat", "mt")),
    ("Mark", 16, ("mrk", "mar", "mk", "mr")),
    ("Luke", 24, ("luk", "lk")),
    ("John", 21, ("jhn", "joh", "jn")),
    ("Acts", 28, ("act", "ac")),
    ("Romans", 16, ("rom", "ro", "rm")),
    ("1 Corinthians", 16, ("corinthians", "cor", "co")),
    ("2 Corinthians", 13, ("corinthians", "cor", "co")),
    ("Galatians", 6, ("gal", "ga")),
    ("Ephesians", 6, ("ephes", "eph")),
    ("Philippians", 4, ("phil", "php")),
    ("Colossians", 4, ("col",)),
    ("1 Thessalonians", 5, ("thessalonians", "thess", "thes", "ths", "th")),
    ("2 Thessalonians", 3, ("thessalonians", "thess", "thes", "ths", "th")),
    ("1 Timothy", 6, ("timothy", "tim", "tm", "ti")),
    ("2 Timothy", 4, ("timothy", "tim", "tm", "ti")),
    ("Titus", 3, ("tit",)),
    ("Philemon", 1, ("philem", "phlm", "phm")),
    ("Hebrews", 13, ("heb",)),
    ("James", 5, ("jas", "jam", "jm")),
    ("1 Peter", 5, ("peter", "pet", "ptr", "pe", "pt")),
    ("2 Peter", 3, ("peter", "pet", "ptr", "pe", "pt")),
    ("1 John", 5, ("john", "jhn", "joh", "jn")),
    ("2 John", 1, ("john", "jhn", "joh", "jn")),
    ("3 John", 1, ("john", "jhn", "joh", "jn")),
    ("Jude", 1, ("jud", "jde", "jd")),
    ("Revelation", 22, ("revelations", "apocalypse", "rev", "re", "rv")),
]

# Ordinal -> prefixes written before a numbered book's name.
NUMBER_PREFIXES: dict[str, tuple[str, ...]] = {
    "1": ("1", "1st", "i", "first"),
    "2": ("2", "2nd", "ii", "second"),
    "3": ("3", "3rd", "iii", "third"),
}

NEW_TESTAMENT_START = 40

_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, collapse internal whitespace and strip."""
    return _WHITESPACE_RE.sub(" ", text).strip().lower()


def _aliases_for(name: str, abbreviations: tuple[str, ...]) -> tuple[str, ...]:
    number, _, rest = name.partition(" ")
    if number not in NUMBER_PREFIXES:
        candidates = [name, *abbreviations]
    else:
        candidates = []
        for base in (rest, *abbreviations):
            for prefix in NUMBER_PREFIXES[number]:
                candidates.append(f"{prefix} {base}")
                if prefix == number:
                    candidates.append(f"{prefix}{base}")

    seen: dict[str, None] = {}
    for alias in candidates:
        seen.setdefault(normalize(alias), None)
    return tuple(seen)


def _build_books() -> tuple[Book, ...]:
    books = []
    for book_id, (name, chapters, abbreviations) in enumerate(BOOK_TABLE, start=1):
        books.append(
            Book(
                id=book_id,
                name=name,
                chapter_count=chapters,
                testament=(
                    Testament.new if book_id >= NEW_TESTAMENT_START else Testament.old
                ),
                aliases=_aliases_for(name, abbreviations),
            )
        )
    return tuple(books)


def build_alias_index(books: tuple[Book, ...]) -> dict[str, int]:
    """Map every normalized alias to its book id.

    Raises ``ValueError`` if two books claim the same alias.
    """
    index: dict[str, int] = {}
    for book in books:
        for alias in book.aliases:
            owner = index.get(alias)
            if owner is not None and owner != book.id:
                raise ValueError(
                    f"Alias '{alias}' is claimed by book {owner} and book {book.id}"
                )
            index[alias] = book.id
    return index


BOOKS: tuple[Book, ...] = _build_books()
ALIASES: dict[str, int] = build_alias_index(BOOKS)
MAX_ALIAS_LENGTH = max(len(alias) for alias in ALIASES)

_BY_ID = {book.id: book for book in BOOKS}


def get_book(book_id: int) -> Book:
    try:
        return _BY_ID[book_id]
    except KeyError:
        raise ValueError(f"Unknown book id {book_id}") from None


def find_book(name: str) -> Book | None:
    """Look up a book by its canonical name or any alias, case-insensitively."""
    book_id = ALIASES.get(normalize(name))
    return _BY_ID[book_id] if book_id is not None else None
