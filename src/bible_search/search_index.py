"""Full-text verse index backed by SQLite FTS5.

The index lives in an in-memory database: a ``verses`` content table keyed
by verse id and an external-content FTS5 table over the plain text. It is
filled once and then switched to query-only mode.
"""

from __future__ import annotations

import logging
import re
import sqlite3
import threading
from collections.abc import Iterable
from typing import NamedTuple

from bible_search.models import Verse

logger = logging.getLogger(__name__)

HIGHLIGHT_OPEN = "<em>"
HIGHLIGHT_CLOSE = "</em>"

_SCHEMA = """
CREATE TABLE verses (
    id INTEGER PRIMARY KEY NOT NULL,
    book INTEGER NOT NULL,
    chapter INTEGER NOT NULL,
    verse INTEGER NOT NULL,
    words TEXT NOT NULL
);

CREATE VIRTUAL TABLE verses_fts USING fts5(
    book UNINDEXED,
    chapter UNINDEXED,
    verse UNINDEXED,
    words,
    content='verses',
    content_rowid='id',
    tokenize='unicode61'
);
"""

# Quoted phrase, or a run of non-space characters.
_TERM_RE = re.compile(r'"([^"]*)"|(\S+)')
_WORD_CHAR_RE = re.compile(r"\w")
# sqlite3 truncates statements at NUL; control characters never index
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


class IndexHit(NamedTuple):
    verse_id: int
    rank: float
    highlight: str


def sanitize_query(raw: str, prefix: bool = True) -> str:
    """Turn free user input into a well-formed FTS5 query.

    Control characters are treated as whitespace. Quoted substrings stay
    phrases; every other whitespace-separated term becomes its own quoted
    string so FTS5 operators and column filters in user input are matched
    literally. Embedded double quotes are escaped by doubling. Terms without
    any word character are dropped. With ``prefix``, a trailing bare term is
    matched as a prefix (``"begott" *``) so partially typed input finds
    verses; phrases are always exact. Returns ``""`` when nothing searchable
    is left.
    """
    terms = []
    last_bare = False
    for phrase, bare in _TERM_RE.findall(_CONTROL_RE.sub(" ", raw).strip()):
        term = phrase if phrase else bare
        if not _WORD_CHAR_RE.search(term):
            continue
        terms.append('"' + term.replace('"', '""') + '"')
        last_bare = not phrase
    if prefix and last_bare:
        terms[-1] += " *"
    return " ".join(terms)


class SearchIndex:
    """Read-only full-text index over compiled verse text."""

    def __init__(self, conn: sqlite3.Connection, size: int) -> None:
        self._conn = conn
        self._size = size
        # One connection shared by every reader thread
        self._lock = threading.Lock()

    @classmethod
    def build(cls, verses: Iterable[Verse]) -> SearchIndex:
        conn = sqlite3.connect(":memory:", check_same_thread=False)
        try:
            conn.executescript(_SCHEMA)
        except sqlite3.OperationalError as e:
            conn.close()
            raise RuntimeError(
                f"SQLite FTS5 is not available in this Python build: {e}"
            ) from e

        with conn:
            conn.executemany(
                "INSERT INTO verses (id, book, chapter, verse, words) "
                "VALUES (?, ?, ?, ?, ?)",
                ((v.id, v.book, v.chapter, v.verse, v.plain) for v in verses),
            )
            conn.execute(
                "INSERT INTO verses_fts (rowid, book, chapter, verse, words) "
                "SELECT id, book, chapter, verse, words FROM verses ORDER BY id"
            )
        size = conn.execute("SELECT count(*) FROM verses").fetchone()[0]
        conn.execute("PRAGMA query_only = ON")
        logger.info("Built full-text index over %d verses", size)
        return cls(conn, size)

    def __len__(self) -> int:
        return self._size

    def search(self, query: str, limit: int) -> list[IndexHit]:
        """Run an already-sanitized query; best matches first.

        Ties in relevance are broken by ascending verse id.
        """
        if not query or limit <= 0:
            return []

        with self._lock:
            rows = self._conn.execute(
                """
                SELECT rowid,
                       rank,
                       highlight(verses_fts, 3, ?, ?)
                FROM verses_fts
                WHERE verses_fts MATCH ?
                ORDER BY rank, rowid
                LIMIT ?
                """,
                (HIGHLIGHT_OPEN, HIGHLIGHT_CLOSE, query, limit),
            ).fetchall()
        logger.debug("Index query %r returned %d hit(s)", query, len(rows))
        return [IndexHit(int(r[0]), float(r[1]), r[2]) for r in rows]

    def close(self) -> None:
        self._conn.close()
