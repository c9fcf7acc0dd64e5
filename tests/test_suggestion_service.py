import pytest
from algoliasearch.http.exceptions import AlgoliaException
from algoliasearch.search.client import SearchClientSync

from transformbot.config import Settings
from transformbot.services.suggestion_service import SuggestionLookup, build_search_client


HITS = [
    {"objectID": "t-2", "title": "Remove SKU field", "code": "function f(r){ delete r.sku; return r; }",
     "_highlightResult": {"title": {"value": "Remove <em>SKU</em> field"}}},
    {"objectID": "t-1", "title": "Add discount attribute", "code": "function g(r){ return r; }"},
]


class SdkHit:
    """Mimics the SDK's Hit model, which exposes to_dict()."""

    def __init__(self, payload):
        self.payload = payload

    def to_dict(self):
        return dict(self.payload)


@pytest.mark.parametrize("query", ["", " ", "a", "  a  ", "\t"])
def test_short_queries_skip_the_index(make_search_client, query):
    client = make_search_client(hits=HITS)

    assert SuggestionLookup(client, "prod_transformations_en").search(query) == []
    assert client.calls == []


def test_hits_are_returned_in_index_order(make_search_client):
    client = make_search_client(hits=HITS)

    results = SuggestionLookup(client, "prod_transformations_en").search("sk")

    assert client.calls == [("prod_transformations_en", {"query": "sk"})]
    assert [r.id for r in results] == ["t-2", "t-1"]
    assert results[0].title == "Remove SKU field"
    assert results[0].code.startswith("function f")
    # Fields the lookup does not model are kept.
    assert results[0].model_extra["_highlightResult"]["title"]["value"] == "Remove <em>SKU</em> field"


def test_page_size_is_sent_only_when_configured(make_search_client):
    client = make_search_client(hits=HITS)

    SuggestionLookup(client, "prod_transformations_en", hits_per_page=3).search("remove sku")

    assert client.calls == [("prod_transformations_en", {"query": "remove sku", "hitsPerPage": 3})]


def test_sdk_hit_models_are_read(make_search_client):
    client = make_search_client(hits=[SdkHit(hit) for hit in HITS])

    results = SuggestionLookup(client, "prod_transformations_en").search("remove")

    assert [r.id for r in results] == ["t-2", "t-1"]


def test_unreadable_hit_is_skipped_and_order_kept(make_search_client):
    hits = [HITS[0], {"title": "no object id"}, HITS[1]]
    client = make_search_client(hits=hits)

    results = SuggestionLookup(client, "prod_transformations_en").search("remove")

    assert [r.id for r in results] == ["t-2", "t-1"]


@pytest.mark.parametrize("error", [
    AlgoliaException("Unreachable hosts"),
    ConnectionError("index unreachable"),
    ValueError("Unexpected search response payload"),
])
def test_failures_degrade_to_empty_list(make_search_client, error):
    client = make_search_client(error=error)

    assert SuggestionLookup(client, "prod_transformations_en").search("remove sku") == []
    assert len(client.calls) == 1


def test_missing_search_client_returns_nothing():
    assert SuggestionLookup(None, "prod_transformations_en").search("remove sku") == []


def test_build_search_client_needs_credentials():
    assert build_search_client(Settings()) is None
    assert build_search_client(Settings(search_app_id="APPID")) is None


def test_build_search_client_uses_sdk():
    client = build_search_client(Settings(search_app_id="APPID", search_api_key="search-key"))

    assert isinstance(client, SearchClientSync)
