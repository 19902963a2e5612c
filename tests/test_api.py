"""Tests for the FastAPI HTTP layer."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from bible_search.api import create_app
from bible_search.engine import ScriptureEngine

SAMPLE = Path(__file__).parent / "data" / "sample_words.csv"


@pytest.fixture(scope="module")
def client():
    """Shared test client; the corpus compiles once per module."""
    return TestClient(create_app(ScriptureEngine.load(SAMPLE)))


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# --- Books ---


class TestBooks:
    def test_list_books(self, client):
        resp = client.get("/api/books")
        assert resp.status_code == 200
        books = resp.json()
        assert len(books) == 6
        assert books[0]["name"] == "Genesis"
        assert books[0]["chapter_count"] == 50
        assert books[0]["testament"] == "old"
        assert books[-1]["testament"] == "new"

    def test_get_book(self, client):
        resp = client.get("/api/books/1 Timothy")
        assert resp.status_code == 200
        data = resp.json()
        assert data["book"]["id"] == 54
        assert data["chapters"] == [2, 3]
        assert data["previous"] == {"label": "John", "url": "/John"}

    def test_get_book_by_alias(self, client):
        resp = client.get("/api/books/ps")
        assert resp.status_code == 200
        assert resp.json()["chapters"] == [23, 119]

    def test_unknown_book(self, client):
        resp = client.get("/api/books/Hezekiah")
        assert resp.status_code == 404


# --- Reference ---


class TestReference:
    def test_single_verse(self, client):
        resp = client.get("/api/reference/John 3:16")
        assert resp.status_code == 200
        data = resp.json()
        assert data["label"] == "John 3:16"
        assert len(data["verses"]) == 1
        verse = data["verses"][0]
        assert verse["id"] == 43_003_016
        assert verse["text"].startswith("For God so loved the world")

    def test_dotted_reference(self, client):
        resp = client.get("/api/reference/psalms.119.105")
        assert resp.status_code == 200
        assert resp.json()["label"] == "Psalms 119:105"

    def test_annotated(self, client):
        resp = client.get(
            "/api/reference/1 Tim 2:5", params={"annotated": True}
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["annotated"] is True
        assert "<em>there</em> <em>is</em>" in data["verses"][0]["text"]

    def test_plain_by_default(self, client):
        data = client.get("/api/reference/1 Tim 2:5").json()
        assert data["annotated"] is False
        assert data["verses"][0]["text"].startswith("For there is one God")
        assert set(data["verses"][0]) == {"id", "chapter", "verse", "text"}

    def test_navigation(self, client):
        data = client.get("/api/reference/John 14").json()
        assert data["links"]["previous"]["url"] == "/John/3"
        assert data["links"]["next"]["url"] == "/1 Timothy/2"

    def test_invalid_reference(self, client):
        resp = client.get("/api/reference/Hezekiah 4:1")
        assert resp.status_code == 404
        assert resp.json()["detail"] == (
            "'Hezekiah 4:1' is not a valid Bible reference."
        )

    def test_missing_verse(self, client):
        resp = client.get("/api/reference/John 3:99")
        assert resp.status_code == 404


# --- Search ---


class TestSearch:
    def test_reference_query(self, client):
        resp = client.get("/api/search", params={"q": "jhn.1.1"})
        assert resp.status_code == 200
        matches = resp.json()["matches"]
        assert [m["verse_id"] for m in matches] == [43_001_001]
        assert matches[0]["path"] == "/John/1#v1"

    def test_text_query(self, client):
        resp = client.get("/api/search", params={"q": "grace"})
        assert resp.status_code == 200
        matches = resp.json()["matches"]
        assert {m["verse_id"] for m in matches} == {43_001_014, 66_022_021}
        for m in matches:
            assert "<em>grace</em>" in m["highlight"]

    def test_limit(self, client):
        resp = client.get("/api/search", params={"q": "the", "limit": 2})
        assert len(resp.json()["matches"]) == 2

    def test_bad_input_is_not_an_error(self, client):
        for q in ['"unbalanced', "NEAR(a b)", "^*", ""]:
            resp = client.get("/api/search", params={"q": q})
            assert resp.status_code == 200
            assert isinstance(resp.json()["matches"], list)

    def test_control_characters(self, client):
        resp = client.get("/api/search", params={"q": "grace\x00"})
        assert resp.status_code == 200
        ids = {m["verse_id"] for m in resp.json()["matches"]}
        assert ids == {43_001_014, 66_022_021}

        resp = client.get("/api/search", params={"q": "\x00"})
        assert resp.status_code == 200
        assert resp.json()["matches"] == []

    def test_partial_word(self, client):
        resp = client.get("/api/search", params={"q": "begott"})
        ids = {m["verse_id"] for m in resp.json()["matches"]}
        assert ids == {43_001_014, 43_003_016}


# --- Sitemap ---


class TestSitemap:
    def test_sitemap(self, client):
        resp = client.get("/api/sitemap")
        assert resp.status_code == 200
        paths = resp.json()
        assert paths[0] == "/about"
        assert "/1 Timothy/3" in paths
        assert len(paths) == 18

    def test_sitemap_xml(self, client):
        resp = client.get("/sitemap.xml")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/xml")
        assert "/1%20Timothy/3</loc>" in resp.text


# --- Auth ---


class TestApiKey:
    def test_key_required(self, client, monkeypatch):
        monkeypatch.setattr("bible_search.api.API_KEY", "secret")
        assert client.get("/api/books").status_code == 401
        assert client.get("/api/books", headers={"x-api-key": "nope"}).status_code == 401
        resp = client.get("/api/books", headers={"x-api-key": "secret"})
        assert resp.status_code == 200

    def test_health_is_open(self, client, monkeypatch):
        monkeypatch.setattr("bible_search.api.API_KEY", "secret")
        assert client.get("/health").status_code == 200
