"""Query resolution: reference lookup first, full-text search as fallback."""

from __future__ import annotations

import logging
import os

from bible_search.models import SearchMatch, Verse
from bible_search.reference import ReferenceResolver
from bible_search.search_index import SearchIndex, sanitize_query
from bible_search.store import VerseStore

logger = logging.getLogger(__name__)

# Max number of matches returned for a single query
SEARCH_RESULT_LIMIT = int(os.environ.get("SEARCH_RESULT_LIMIT", 15))

# Snippets longer than this are cut at a word boundary
SNIPPET_LENGTH = 200


def snippet(text: str, length: int = SNIPPET_LENGTH) -> str:
    if len(text) <= length:
        return text
    cut = text[:length].rsplit(" ", 1)[0]
    return cut.rstrip(",;:") + "…"


def verse_label(book_name: str, verse: Verse) -> str:
    return f"{book_name} {verse.chapter}:{verse.verse}"


def verse_path(book_name: str, verse: Verse) -> str:
    return f"/{book_name}/{verse.chapter}#v{verse.verse}"


class QueryResolver:
    """Turns a raw query string into an ordered, capped list of matches."""

    def __init__(
        self,
        store: VerseStore,
        index: SearchIndex,
        references: ReferenceResolver,
        book_names: dict[int, str],
        limit: int = SEARCH_RESULT_LIMIT,
    ) -> None:
        self._store = store
        self._index = index
        self._references = references
        self._book_names = book_names
        self.limit = limit

    def _match(self, verse: Verse, **extra) -> SearchMatch:
        name = self._book_names[verse.book]
        return SearchMatch(
            verse_id=verse.id,
            label=verse_label(name, verse),
            path=verse_path(name, verse),
            text=snippet(verse.plain),
            **extra,
        )

    def by_reference(self, query: str, limit: int) -> list[SearchMatch]:
        address = self._references.resolve(query)
        if address is None:
            return []
        verses = self._store.lookup(address)
        logger.debug("Reference %s matched %d verse(s)", address.label, len(verses))
        return [self._match(v) for v in verses[:limit]]

    def by_text(self, query: str, limit: int) -> list[SearchMatch]:
        sanitized = sanitize_query(query)
        if not sanitized:
            return []
        matches = []
        for hit in self._index.search(sanitized, limit):
            verse = self._store.get(hit.verse_id)
            if verse is None:
                # Index and store are built from the same verse set
                raise RuntimeError(f"Index returned unknown verse id {hit.verse_id}")
            matches.append(self._match(verse, highlight=hit.highlight, rank=hit.rank))
        return matches

    def resolve(self, query: str, limit: int | None = None) -> list[SearchMatch]:
        limit = self.limit if limit is None else min(limit, self.limit)
        if not query or not query.strip() or limit <= 0:
            return []

        matches = self.by_reference(query, limit)
        if matches:
            return matches
        return self.by_text(query, limit)
