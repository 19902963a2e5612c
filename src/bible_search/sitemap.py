"""Sitemap and chapter navigation, derived from the compiled verse set."""

from __future__ import annotations

import os
from urllib.parse import quote
from xml.sax.saxutils import escape

from bible_search.models import ChapterLinks, Link
from bible_search.store import VerseStore

ABOUT_PATH = "/about"

SITE_URL = os.environ.get("SITE_URL", "https://example.org")


def book_path(name: str) -> str:
    return f"/{name}"


def chapter_path(name: str, chapter: int) -> str:
    return f"/{name}/{chapter}"


def sitemap_paths(store: VerseStore, book_names: dict[int, str]) -> list[str]:
    """``/about``, then each book followed by its chapters, in reading order."""
    paths = [ABOUT_PATH]
    current_book = None
    for book, chapter in store.chapters():
        name = book_names[book]
        if book != current_book:
            paths.append(book_path(name))
            current_book = book
        paths.append(chapter_path(name, chapter))
    return paths


def render_sitemap_xml(paths: list[str], base_url: str = SITE_URL) -> str:
    base = base_url.rstrip("/")
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for path in paths:
        loc = escape(base + quote(path))
        lines.append(f"    <url>\n        <loc>{loc}</loc>\n    </url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def _chapter_link(book_names: dict[int, str], book: int, chapter: int) -> Link:
    name = book_names[book]
    return Link(label=f"{name} {chapter}", url=chapter_path(name, chapter))


def chapter_links(
    store: VerseStore, book_names: dict[int, str], book: int, chapter: int
) -> ChapterLinks | None:
    """Previous/next chapter links, crossing book boundaries.

    Returns ``None`` when the chapter is not in the verse set.
    """
    chapters = store.chapters()
    try:
        i = chapters.index((book, chapter))
    except ValueError:
        return None

    name = book_names[book]
    previous = _chapter_link(book_names, *chapters[i - 1]) if i > 0 else None
    following = (
        _chapter_link(book_names, *chapters[i + 1]) if i + 1 < len(chapters) else None
    )
    return ChapterLinks(
        book=Link(label=name, url=book_path(name)),
        current=_chapter_link(book_names, book, chapter),
        previous=previous,
        next=following,
    )


def book_links(
    store: VerseStore, book_names: dict[int, str], book: int
) -> tuple[Link | None, Link | None]:
    """Links to the previous and next books present in the verse set."""
    present = store.books()
    if book not in present:
        return None, None
    i = present.index(book)

    def link(b: int) -> Link:
        return Link(label=book_names[b], url=book_path(book_names[b]))

    previous = link(present[i - 1]) if i > 0 else None
    following = link(present[i + 1]) if i + 1 < len(present) else None
    return previous, following
