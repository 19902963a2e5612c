"""Immutable, id-ordered verse collection with range lookups."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from bible_search.compiler import CompilationError
from bible_search.models import ReferenceAddress, Verse


def address_bounds(address: ReferenceAddress) -> tuple[int, int]:
    """Inclusive verse-id bounds covered by a (possibly partial) address.

    Because ids encode book, chapter and verse positionally, every address
    maps to one contiguous id interval.
    """
    base = address.book * 1_000_000
    if address.chapter is None:
        return base, base + 999_999
    base += address.chapter * 1_000
    if address.verse_start is None:
        return base, base + 999
    end = address.verse_end if address.verse_end is not None else address.verse_start
    return base + address.verse_start, base + end


class VerseStore:
    def __init__(self, verses: Iterable[Verse]) -> None:
        ordered = tuple(sorted(verses, key=lambda v: v.id))
        ids = tuple(v.id for v in ordered)
        if len(set(ids)) != len(ids):
            raise CompilationError("Duplicate verse identifiers in compiled corpus")
        self._verses = ordered
        self._ids = ids
        self._by_id = MappingProxyType({v.id: v for v in ordered})
        self._chapters = tuple(sorted({(v.book, v.chapter) for v in ordered}))

    def __len__(self) -> int:
        return len(self._verses)

    def __iter__(self) -> Iterator[Verse]:
        return iter(self._verses)

    def __contains__(self, vid: object) -> bool:
        return vid in self._by_id

    def get(self, vid: int) -> Verse | None:
        return self._by_id.get(vid)

    def between(self, first: int, last: int) -> tuple[Verse, ...]:
        """Verses with ``first <= id <= last`` in ascending id order."""
        if last < first:
            return ()
        lo = bisect_left(self._ids, first)
        hi = bisect_right(self._ids, last)
        return self._verses[lo:hi]

    def lookup(self, address: ReferenceAddress) -> tuple[Verse, ...]:
        return self.between(*address_bounds(address))

    def books(self) -> list[int]:
        return sorted({b for b, _ in self._chapters})

    def chapters(self, book: int | None = None) -> list[tuple[int, int]]:
        """Distinct ``(book, chapter)`` pairs in reading order."""
        if book is None:
            return list(self._chapters)
        return [(b, c) for b, c in self._chapters if b == book]
