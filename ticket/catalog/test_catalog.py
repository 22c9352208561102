"""
Tests for the TMDB client and the fuzzy catalog matcher
"""
from datetime import date

import pytest
import requests

from ticket.catalog import CatalogMatcher, TmdbCatalogClient
from ticket.errors import CatalogError
from ticket.models import CatalogCandidate


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self.json_error:
            raise self.json_error
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'timeout': timeout})
        if self.error:
            raise self.error
        return self.response


class FakeCatalogClient:
    """Returns canned results per query string."""

    def __init__(self, results=None, error=None):
        self.results = results or {}
        self.error = error
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.results.get(query, [])


def fixed_today():
    return date(2024, 6, 1)


DUNE = CatalogCandidate(title="Dune: Part Two", release_date="2024-02-27", popularity=300.0)


# TmdbCatalogClient

def test_search_sends_expected_request():
    session = FakeSession(FakeResponse({'results': [
        {'id': 693134, 'title': 'Dune: Part Two', 'release_date': '2024-02-27', 'popularity': 300.0},
    ]}))
    client = TmdbCatalogClient("key", base_url="https://catalog.test/3/", timeout=5, session=session)

    candidates = client.search("Dune Part Two")

    assert [c.title for c in candidates] == ["Dune: Part Two"]
    call = session.calls[0]
    assert call['url'] == "https://catalog.test/3/search/movie"
    assert call['params']['query'] == "Dune Part Two"
    assert call['params']['include_adult'] == 'false'
    assert call['timeout'] == 5


def test_search_without_key_raises():
    with pytest.raises(CatalogError):
        TmdbCatalogClient(None, session=FakeSession()).search("Wonka")


@pytest.mark.parametrize("session", [
    FakeSession(error=requests.ConnectionError("offline")),
    FakeSession(FakeResponse(status_code=503)),
    FakeSession(FakeResponse(json_error=ValueError("not json"))),
    FakeSession(FakeResponse({'status_message': 'Invalid API key'})),
])
def test_search_failures_become_catalog_errors(session):
    with pytest.raises(CatalogError):
        TmdbCatalogClient("key", session=session).search("Wonka")


# CatalogMatcher

def test_exact_title_matches():
    client = FakeCatalogClient({"Dune Part Two": [DUNE]})
    matcher = CatalogMatcher(client, today=fixed_today)
    assert matcher.find_best_match("Dune Part Two").title == "Dune: Part Two"


def test_dissimilar_titles_stay_below_floor():
    client = FakeCatalogClient({
        "Wonka": [CatalogCandidate(title="The Godfather", release_date="1972-03-14", popularity=5.0)],
        "wonka": [CatalogCandidate(title="The Godfather", release_date="1972-03-14", popularity=5.0)],
    })
    matcher = CatalogMatcher(client, today=fixed_today)
    assert matcher.find_best_match("Wonka") is None


def test_similarity_is_monotonic():
    matcher = CatalogMatcher(FakeCatalogClient(), today=fixed_today)
    closer = CatalogCandidate(title="Inside Out 2", release_date="2010-01-01")
    farther = CatalogCandidate(title="Inside Man", release_date="2010-01-01")
    assert matcher.score_candidate("Inside Out 2", closer) >= matcher.score_candidate("Inside Out 2", farther)


def test_recency_and_popularity_bonuses():
    matcher = CatalogMatcher(FakeCatalogClient(), today=fixed_today)
    plain = CatalogCandidate(title="Wonka", release_date="2010-01-01", popularity=1.0)
    boosted = CatalogCandidate(title="Wonka", release_date="2024-12-15", popularity=50.0)
    assert matcher.score_candidate("Wonka", plain) == pytest.approx(1.0)
    assert matcher.score_candidate("Wonka", boosted) == pytest.approx(1.2)


def test_best_scoring_candidate_wins():
    client = FakeCatalogClient({"Dune Part Two": [
        CatalogCandidate(title="Dune", release_date="2021-09-15", popularity=80.0),
        DUNE,
    ]})
    matcher = CatalogMatcher(client, today=fixed_today)
    assert matcher.find_best_match("Dune Part Two").title == "Dune: Part Two"


def test_variation_used_when_raw_query_finds_nothing():
    client = FakeCatalogClient({"dune part two": [DUNE]})
    matcher = CatalogMatcher(client, today=fixed_today)

    assert matcher.find_best_match("DUNE - PART TWO").title == "Dune: Part Two"
    assert client.queries[:2] == ["DUNE - PART TWO", "dune part two"]


def test_catalog_errors_are_not_fatal():
    matcher = CatalogMatcher(FakeCatalogClient(error=CatalogError("down")), today=fixed_today)
    assert matcher.find_best_match("Wonka") is None


def test_blank_query_skips_search():
    client = FakeCatalogClient()
    assert CatalogMatcher(client).find_best_match("  ") is None
    assert client.queries == []


def test_generate_variations():
    matcher = CatalogMatcher(FakeCatalogClient())
    assert matcher.generate_variations("Dune: Part Two") == [
        "dune part two", "Dune", "Part Two", "dune: part two",
    ]
