"""Reference resolution: free text such as ``1 Tim 3:16-18`` to an address."""

from __future__ import annotations

import logging
import re

from bible_search import books
from bible_search.models import ReferenceAddress

logger = logging.getLogger(__name__)

# chapter [ (":" | "." | " ") verse [ "-" verse_end ] ], optional trailing ":"/"."
_NUMERALS_RE = re.compile(
    r"^(\d{1,3})(?:\s*[:.\s]\s*(\d{1,3})(?:\s*-\s*(\d{1,3}))?)?\s*[:.]?$"
)


class ReferenceResolver:
    """Resolves normalized query text against a book-alias table.

    The longest alias that is a prefix of the query wins. Whatever follows
    the alias must be empty (book only) or chapter/verse numerals; anything
    else means the query is not a reference.
    """

    def __init__(
        self,
        aliases: dict[str, int] | None = None,
        book_names: dict[int, str] | None = None,
    ) -> None:
        self._aliases = aliases if aliases is not None else books.ALIASES
        self._book_names = (
            book_names
            if book_names is not None
            else {b.id: b.name for b in books.BOOKS}
        )
        self._max_alias = max((len(a) for a in self._aliases), default=0)

    def book_id(self, name: str) -> int | None:
        """Book id for an exact (normalized) alias, or ``None``."""
        return self._aliases.get(books.normalize(name))

    def match_book(self, text: str) -> tuple[int, str] | None:
        """Return ``(book_id, remainder)`` for the longest alias prefix."""
        for n in range(min(len(text), self._max_alias), 0, -1):
            book_id = self._aliases.get(text[:n])
            if book_id is not None:
                return book_id, text[n:]
        return None

    def resolve(self, query: str) -> ReferenceAddress | None:
        text = books.normalize(query)
        if not text:
            return None

        matched = self.match_book(text)
        if matched is None:
            return None
        book_id, remainder = matched

        rest = remainder.strip()
        # "gen.1.1" / "gen 1" / "gen1"
        if rest.startswith("."):
            rest = rest[1:].lstrip()
        elif remainder and not remainder[0].isspace() and not remainder[0].isdigit():
            return None

        chapter = verse_start = verse_end = None
        if rest:
            m = _NUMERALS_RE.match(rest)
            if m is None:
                logger.debug("Not a reference: %r (remainder %r)", query, rest)
                return None
            chapter = int(m.group(1))
            if m.group(2) is not None:
                verse_start = int(m.group(2))
                verse_end = int(m.group(3)) if m.group(3) is not None else verse_start

        return ReferenceAddress(
            book=book_id,
            book_name=self._book_names[book_id],
            chapter=chapter,
            verse_start=verse_start,
            verse_end=verse_end,
        )
