"""Compiled corpus and query facade.

``ScriptureEngine`` is built once, before any query is served: words are
compiled into verses, the verses are indexed, and from then on every method
is a read against immutable state that can be shared across threads.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from bible_search import books as book_table
from bible_search.compiler import compile_verses
from bible_search.corpus import load_words
from bible_search.models import (
    Book,
    BookDetail,
    ChapterLinks,
    Passage,
    PassageVerse,
    ReferenceAddress,
    SearchMatch,
    Verse,
    Word,
)
from bible_search.query import SEARCH_RESULT_LIMIT, QueryResolver
from bible_search.reference import ReferenceResolver
from bible_search.search_index import SearchIndex
from bible_search.sitemap import (
    SITE_URL,
    book_links,
    chapter_links,
    render_sitemap_xml,
    sitemap_paths,
)
from bible_search.store import VerseStore

logger = logging.getLogger(__name__)

# Word corpus file loaded at startup (CSV or JSON lines)
CORPUS_PATH = os.environ.get("CORPUS_PATH")

# Threads used to compile books in parallel
COMPILE_WORKERS = int(os.environ.get("COMPILE_WORKERS", 1))


class ScriptureEngine:
    def __init__(
        self,
        verses: Iterable[Verse],
        books: tuple[Book, ...] = book_table.BOOKS,
        limit: int = SEARCH_RESULT_LIMIT,
    ) -> None:
        self._books = {b.id: b for b in books}
        self._book_names = {b.id: b.name for b in books}
        self.store = VerseStore(verses)
        self.index = SearchIndex.build(self.store)
        self.references = ReferenceResolver(
            book_table.build_alias_index(books), self._book_names
        )
        self.queries = QueryResolver(
            self.store, self.index, self.references, self._book_names, limit
        )
        # Derived once; the verse set never changes
        self._sitemap = tuple(sitemap_paths(self.store, self._book_names))
        logger.info(
            "Engine ready: %d verses in %d books",
            len(self.store),
            len(self.store.books()),
        )

    @classmethod
    def from_words(
        cls, words: Iterable[Word], workers: int = 1, **kwargs
    ) -> ScriptureEngine:
        return cls(compile_verses(words, workers=workers), **kwargs)

    @classmethod
    def load(
        cls, path: str | Path | None = None, workers: int = COMPILE_WORKERS, **kwargs
    ) -> ScriptureEngine:
        """Compile the corpus file at ``path`` (default ``$CORPUS_PATH``)."""
        path = path or CORPUS_PATH
        if not path:
            raise RuntimeError(
                "No word corpus configured. Set CORPUS_PATH to a .csv or .jsonl file."
            )
        logger.info("Compiling word corpus %s ...", path)
        return cls.from_words(load_words(path), workers=workers, **kwargs)

    # --- Books ---

    def list_books(self) -> list[Book]:
        """Books present in the compiled corpus, in canonical order."""
        return [self._books[b] for b in self.store.books()]

    def find_book(self, name: str) -> Book | None:
        book_id = self.references.book_id(name)
        if book_id is None or book_id not in self._books:
            return None
        return self._books[book_id]

    def get_book(self, name: str) -> BookDetail | None:
        book = self.find_book(name)
        if book is None:
            return None
        chapters = [c for _, c in self.store.chapters(book.id)]
        if not chapters:
            return None
        previous, following = book_links(self.store, self._book_names, book.id)
        return BookDetail(book=book, chapters=chapters, previous=previous, next=following)

    # --- Reading ---

    def resolve_reference(self, text: str) -> ReferenceAddress | None:
        return self.references.resolve(text)

    def get_verses(self, address: ReferenceAddress) -> list[Verse]:
        return list(self.store.lookup(address))

    def get_passage(self, reference: str, annotated: bool = False) -> Passage | None:
        """Look up a reference such as ``John 3:16``; ``None`` if nothing matches."""
        address = self.references.resolve(reference)
        if address is None:
            return None
        verses = self.get_verses(address)
        if not verses:
            return None

        # Report the range that was actually found
        if address.verse_start is not None:
            address = address.model_copy(
                update={
                    "verse_start": verses[0].verse,
                    "verse_end": verses[-1].verse,
                }
            )

        links = None
        if address.chapter is not None:
            links = self.navigation(address.book, address.chapter)
        return Passage(
            book=self._books[address.book],
            reference=address,
            label=address.label,
            annotated=annotated,
            verses=[
                PassageVerse(
                    id=v.id,
                    chapter=v.chapter,
                    verse=v.verse,
                    text=v.annotated if annotated else v.plain,
                )
                for v in verses
            ],
            links=links,
        )

    def navigation(self, book: int, chapter: int) -> ChapterLinks | None:
        return chapter_links(self.store, self._book_names, book, chapter)

    # --- Search ---

    def search(self, query: str, limit: int | None = None) -> list[SearchMatch]:
        return self.queries.resolve(query, limit)

    # --- Sitemap ---

    def sitemap(self) -> list[str]:
        return list(self._sitemap)

    def sitemap_xml(self, base_url: str = SITE_URL) -> str:
        return render_sitemap_xml(self.sitemap(), base_url)
