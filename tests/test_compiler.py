"""Tests for verse compilation and rendering."""

from pathlib import Path

import pytest

from bible_search.compiler import (
    EMPHASIS_CLOSE,
    EMPHASIS_OPEN,
    CompilationError,
    compile_verse,
    compile_verses,
    split_verse_id,
    verse_id,
)
from bible_search.corpus import load_words
from bible_search.models import Word

SAMPLE = Path(__file__).parent / "data" / "sample_words.csv"


@pytest.fixture(scope="module")
def words():
    return load_words(SAMPLE)


@pytest.fixture(scope="module")
def verses(words):
    return compile_verses(words)


def by_id(verses):
    return {v.id: v for v in verses}


class TestVerseId:
    def test_encoding(self):
        assert verse_id(1, 1, 1) == 1_001_001
        assert verse_id(19, 119, 105) == 19_119_105
        assert verse_id(66, 22, 21) == 66_022_021

    def test_split(self):
        assert split_verse_id(54_002_005) == (54, 2, 5)

    def test_chapter_too_large(self):
        with pytest.raises(CompilationError, match="Chapter 1000"):
            verse_id(1, 1000, 1)

    def test_verse_too_large(self):
        with pytest.raises(CompilationError):
            verse_id(1, 1, 1000)

    def test_book_out_of_range(self):
        with pytest.raises(CompilationError, match="Book id 67"):
            verse_id(67, 1, 1)

    def test_ids_follow_reading_order(self, verses):
        ids = [v.id for v in verses]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)
        keys = [(v.book, v.chapter, v.verse) for v in verses]
        assert keys == sorted(keys)
        for v in verses:
            assert v.id == v.book * 1_000_000 + v.chapter * 1_000 + v.verse


class TestRendering:
    def test_plain_text(self, verses):
        v = by_id(verses)[1_001_001]
        assert v.plain == "In the beginning God created the heaven and the earth."

    def test_annotated_italics(self, verses):
        v = by_id(verses)[19_119_105]
        assert v.plain == (
            "NUN. Thy word is a lamp unto my feet, and a light unto my path."
        )
        assert v.annotated == (
            "NUN. Thy word <em>is</em> a lamp unto my feet, "
            "and a light unto my path."
        )

    def test_parentheses(self, verses):
        v = by_id(verses)[43_001_014]
        assert "(and we beheld his glory," in v.plain
        assert "of the Father,) full of grace and truth." in v.plain
        assert v.annotated == v.plain

    def test_no_emphasis_in_plain(self, verses):
        for v in verses:
            assert EMPHASIS_OPEN not in v.plain
            assert EMPHASIS_CLOSE not in v.plain

    def test_one_emphasis_pair_per_italic_word(self, words, verses):
        italic_counts: dict[int, int] = {}
        for w in words:
            vid = verse_id(w.book, w.chapter, w.verse)
            italic_counts[vid] = italic_counts.get(vid, 0) + int(w.italic)
        for v in verses:
            assert v.annotated.count(EMPHASIS_OPEN) == italic_counts[v.id]
            assert v.annotated.count(EMPHASIS_CLOSE) == italic_counts[v.id]

    def test_renderings_differ_only_by_emphasis(self, verses):
        for v in verses:
            stripped = v.annotated.replace(EMPHASIS_OPEN, "").replace(
                EMPHASIS_CLOSE, ""
            )
            assert stripped == v.plain

    def test_wrapping_order(self):
        word = Word(
            book=1,
            chapter=1,
            verse=1,
            position=1,
            text="was",
            punctuation=",",
            italic=True,
            open_paren=True,
            close_paren=True,
        )
        v = compile_verse([word])
        assert v.annotated == "(<em>was</em>,)"
        assert v.plain == "(was,)"

    def test_position_order_not_input_order(self):
        def w(pos, text):
            return Word(book=1, chapter=1, verse=1, position=pos, text=text)

        v = compile_verse([w(3, "three"), w(1, "one"), w(2, "two")])
        assert v.plain == "one two three"


class TestCompilation:
    def test_every_partition_compiled(self, words, verses):
        partitions = {(w.book, w.chapter, w.verse) for w in words}
        assert len(verses) == len(partitions) == 17

    def test_deterministic(self, words, verses):
        again = compile_verses(load_words(SAMPLE))
        assert [(v.id, v.plain, v.annotated) for v in again] == [
            (v.id, v.plain, v.annotated) for v in verses
        ]

    def test_parallel_matches_serial(self, words, verses):
        parallel = compile_verses(words, workers=4)
        assert parallel == verses

    def test_input_order_irrelevant(self, words, verses):
        assert compile_verses(list(reversed(words))) == verses

    def test_empty_verse_fails(self):
        with pytest.raises(CompilationError, match="no words"):
            compile_verse([])

    def test_empty_corpus_fails(self):
        with pytest.raises(CompilationError, match="empty"):
            compile_verses([])

    def test_duplicate_positions_fail(self):
        words = [
            Word(book=1, chapter=1, verse=1, position=1, text="In"),
            Word(book=1, chapter=1, verse=1, position=1, text="the"),
        ]
        with pytest.raises(CompilationError, match="Duplicate word positions"):
            compile_verses(words)

    def test_out_of_range_chapter_fails(self):
        words = [Word(book=1, chapter=1000, verse=1, position=1, text="In")]
        with pytest.raises(CompilationError):
            compile_verses(words)

    def test_unknown_book_fails(self):
        words = [Word(book=67, chapter=1, verse=1, position=1, text="In")]
        with pytest.raises(CompilationError):
            compile_verses(words)
