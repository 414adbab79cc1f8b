"""Tests for the Tatoeba page fetcher (network calls are faked)."""

import io
import json
import urllib.error
import urllib.parse
import urllib.request

import pytest

from conftest import make_pair, make_record
from spanish_type import tatoeba
from spanish_type.tatoeba import (
    FetchOptions,
    TatoebaError,
    build_search_url,
    fetch_sentences,
    max_pages_for,
    request_page,
)


class FakeResponse:
    def __init__(self, payload):
        self._body = json.dumps(payload).encode("utf-8")

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_pages(monkeypatch):
    """Serve canned result pages; records every (page, page_size) request."""
    pages = {}
    calls = []

    def _request_page(page, page_size, source_lang, target_lang):
        calls.append((page, page_size))
        return pages.get(page, [])

    monkeypatch.setattr(tatoeba, "request_page", _request_page)
    return pages, calls


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr(tatoeba.time, "sleep", lambda seconds: calls.append(seconds))
    return calls


def unusable(record_id):
    return make_record(record_id, f"Orphan {record_id}", "eng")


class TestSearchUrl:
    def test_query_parameters(self):
        url = build_search_url(3, 50, "eng", "spa")
        parsed = urllib.parse.urlparse(url)
        query = dict(urllib.parse.parse_qsl(parsed.query))
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == tatoeba.SEARCH_URL
        assert query["from"] == "eng"
        assert query["to"] == "spa"
        assert query["trans_to"] == "spa"
        assert query["page"] == "3"
        assert query["per_page"] == "50"
        assert query["orphans"] == "no"
        assert query["unapproved"] == "no"
        assert query["trans_link"] == "direct"
        assert query["sort"] == "random"


class TestRequestPage:
    def test_returns_results(self, monkeypatch, hello_record):
        seen = {}

        def fake_urlopen(req, timeout):
            seen["url"] = req.full_url
            seen["accept"] = req.get_header("Accept")
            return FakeResponse({"paging": {}, "results": [hello_record]})

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        assert request_page(1, 10, "eng", "spa") == [hello_record]
        assert seen["accept"] == "application/json"
        assert "per_page=10" in seen["url"]

    def test_missing_results(self, monkeypatch):
        monkeypatch.setattr(urllib.request, "urlopen", lambda req, timeout: FakeResponse({}))
        assert request_page(1, 10, "eng", "spa") == []

    def test_http_error(self, monkeypatch):
        def fake_urlopen(req, timeout):
            raise urllib.error.HTTPError(
                req.full_url, 503, "Service Unavailable", None, io.BytesIO(b"try later")
            )

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        with pytest.raises(TatoebaError) as excinfo:
            request_page(1, 10, "eng", "spa")
        assert excinfo.value.status == 503
        assert excinfo.value.body == "try later"
        assert "503" in str(excinfo.value)


class TestMaxPages:
    def test_explicit(self):
        assert max_pages_for(200, 100, 3) == 3

    def test_computed(self):
        assert max_pages_for(200, 100) == 12
        assert max_pages_for(250, 100) == 18
        assert max_pages_for(1, 1) == 6


class TestFetchSentences:
    def test_collects_until_limit(self, fake_pages, sleeps):
        pages, calls = fake_pages
        pages[1] = [make_pair(i, f"Hello {i}", 100 + i, f"Hola {i}") for i in range(3)]

        rows = fetch_sentences(FetchOptions(limit=2, delay=0))
        assert [row.tatoeba_id for row in rows] == [100, 101]
        assert calls == [(1, 2)]

    def test_page_size_capped(self, fake_pages, sleeps):
        _, calls = fake_pages
        fetch_sentences(FetchOptions(limit=250, delay=0))
        assert calls == [(1, 100)]

    def test_duplicates_last_seen_wins(self, fake_pages, sleeps, capsys):
        pages, calls = fake_pages
        pages[1] = [make_pair(1, "Hello", 10, "Hola")]
        pages[2] = [make_pair(1, "Hello", 10, "Buenos días")]

        rows = fetch_sentences(FetchOptions(limit=2, delay=0))
        assert len(rows) == 1
        assert rows[0].spanish == "Buenos días"
        assert [page for page, _ in calls] == [1, 2, 3]
        assert "Warning: Only collected 1" in capsys.readouterr().out

    def test_stops_on_empty_page(self, fake_pages, sleeps):
        pages, calls = fake_pages
        pages[1] = [make_pair(1, "Hello", 10, "Hola")]

        rows = fetch_sentences(FetchOptions(limit=50, delay=0))
        assert len(rows) == 1
        assert len(calls) == 2

    def test_respects_page_cap(self, fake_pages, sleeps, capsys):
        pages, calls = fake_pages
        for page in range(1, 20):
            pages[page] = [unusable(page)]

        rows = fetch_sentences(FetchOptions(limit=5, max_pages=3, delay=0))
        assert rows == []
        assert len(calls) == 3
        assert "after 3 pages" in capsys.readouterr().out

    def test_skips_unusable_records(self, fake_pages, sleeps):
        pages, _ = fake_pages
        pages[1] = [
            "not a record",
            make_record(
                None, "Hello", "eng",
                directTranslations=[{"sentence": {"text": "Hola", "lang": "spa"}}],
            ),
            make_pair(2, "Bye", 20, "Adiós"),
        ]
        rows = fetch_sentences(FetchOptions(limit=5, delay=0))
        assert [row.tatoeba_id for row in rows] == [20]

    def test_verbose_progress(self, fake_pages, sleeps, capsys):
        pages, _ = fake_pages
        pages[1] = [make_pair(1, "Hello", 10, "Hola")]

        fetch_sentences(FetchOptions(limit=1, delay=0, verbose=True))
        out = capsys.readouterr().out
        assert "Page 1/6 -> 1 results" in out
        assert "Variants:" in out

    def test_sleeps_only_between_pages(self, fake_pages, sleeps):
        pages, calls = fake_pages
        for page in range(1, 4):
            pages[page] = [unusable(page)]

        fetch_sentences(FetchOptions(limit=5, max_pages=3, delay=0.4))
        assert len(calls) == 3
        assert sleeps == [0.4, 0.4]

    def test_no_sleep_when_limit_reached(self, fake_pages, sleeps):
        pages, _ = fake_pages
        pages[1] = [make_pair(1, "Hello", 10, "Hola")]

        fetch_sentences(FetchOptions(limit=1, delay=0.4))
        assert sleeps == []

    def test_http_error_propagates(self, monkeypatch, sleeps):
        def failing_page(page, page_size, source_lang, target_lang):
            raise TatoebaError(500, "boom")

        monkeypatch.setattr(tatoeba, "request_page", failing_page)
        with pytest.raises(TatoebaError):
            fetch_sentences(FetchOptions(limit=5, delay=0))
