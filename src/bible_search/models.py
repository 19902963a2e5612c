from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Testament(str, Enum):
    old = "old"
    new = "new"


class Book(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1, le=66)
    name: str
    chapter_count: int
    testament: Testament
    aliases: tuple[str, ...] = ()


class Word(BaseModel):
    """A single word of the corpus, as supplied by the word-level source."""

    model_config = ConfigDict(frozen=True)

    book: int = Field(ge=1)
    chapter: int = Field(ge=1)
    verse: int = Field(ge=1)
    position: int = Field(ge=0)
    text: str = Field(min_length=1)
    punctuation: str | None = None
    italic: bool = False
    open_paren: bool = False
    close_paren: bool = False


class Verse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    book: int
    chapter: int
    verse: int
    plain: str
    annotated: str


class ReferenceAddress(BaseModel):
    """A resolved (possibly partial) scripture address."""

    model_config = ConfigDict(frozen=True)

    book: int
    book_name: str
    chapter: int | None = None
    verse_start: int | None = None
    verse_end: int | None = None

    @property
    def label(self) -> str:
        if self.chapter is None:
            return self.book_name
        if self.verse_start is None:
            return f"{self.book_name} {self.chapter}"
        if self.verse_end is None or self.verse_end == self.verse_start:
            return f"{self.book_name} {self.chapter}:{self.verse_start}"
        return f"{self.book_name} {self.chapter}:{self.verse_start}-{self.verse_end}"

    @property
    def path(self) -> str:
        if self.chapter is None:
            return f"/{self.book_name}"
        if self.verse_start is None:
            return f"/{self.book_name}/{self.chapter}"
        if self.verse_end is None or self.verse_end == self.verse_start:
            return f"/{self.book_name}/{self.chapter}#v{self.verse_start}"
        return f"/{self.book_name}/{self.chapter}/{self.verse_start}-{self.verse_end}"

    def __str__(self) -> str:
        return self.label


class Link(BaseModel):
    label: str
    url: str


class SearchMatch(BaseModel):
    verse_id: int
    label: str
    path: str
    text: str
    highlight: str | None = None  # full-text hits only
    rank: float | None = None


class ChapterLinks(BaseModel):
    book: Link
    current: Link
    previous: Link | None = None
    next: Link | None = None


class PassageVerse(BaseModel):
    """One verse of a passage in the rendering the reader asked for."""

    id: int
    chapter: int
    verse: int
    text: str


class Passage(BaseModel):
    book: Book
    reference: ReferenceAddress
    label: str
    annotated: bool = False
    verses: list[PassageVerse]
    links: ChapterLinks | None = None


class BookDetail(BaseModel):
    book: Book
    chapters: list[int]
    previous: Link | None = None
    next: Link | None = None
