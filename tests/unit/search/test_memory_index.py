"""Tests for the in-memory document index.

These verify that the evaluator follows Elasticsearch semantics for the
query subset the catalog emits.
"""

from __future__ import annotations

import json

import pytest

from catalog_search.search.backends.base import BackendStatus
from catalog_search.search.backends.memory import InMemoryIndex, field_values, score, sort_hits

pytestmark = pytest.mark.anyio


DOCS = {
    "packages": [
        {"_id": "p1", "organization": "akka", "repository": "akka-http", "keywords": ["http"], "github": {"stars": 5}},
        {"_id": "p2", "organization": "akka", "repository": "akka", "keywords": ["actors"], "github": {"stars": 9}},
        {"_id": "p3", "organization": "circe", "repository": "circe", "keywords": ["json", "http"]},
    ],
    "releases": [
        {"reference": {"organization": "akka", "repository": "akka-http"}, "maven": {"version": "1"}},
        {"reference": {"organization": "akka", "repository": "akka"}, "maven": {"version": "2"}},
    ],
}


class TestFieldValues:
    def test_dotted_path(self):
        assert field_values({"github": {"stars": 3}}, "github.stars") == [3]

    def test_flattens_lists(self):
        assert field_values({"keywords": ["a", "b"]}, "keywords") == ["a", "b"]

    def test_missing_path(self):
        assert field_values({"github": None}, "github.stars") == []


class TestScore:
    def test_term_matches_list_member(self):
        assert score({"term": {"keywords": "http"}}, {"keywords": ["json", "http"]}) == 1.0

    def test_term_is_exact(self):
        assert score({"term": {"keywords": "htt"}}, {"keywords": ["http"]}) is None

    def test_bool_should_needs_one_match(self):
        query = {"bool": {"should": [{"term": {"a": 1}}, {"term": {"b": 2}}]}}
        assert score(query, {"a": 1, "b": 2}) == 2.0
        assert score(query, {"a": 1}) == 1.0
        assert score(query, {"c": 3}) is None

    def test_bool_must_needs_all(self):
        query = {"bool": {"must": [{"term": {"a": 1}}, {"term": {"b": 2}}]}}
        assert score(query, {"a": 1, "b": 2}) is not None
        assert score(query, {"a": 1, "b": 3}) is None

    def test_nested_matches_within_one_object(self):
        query = {
            "nested": {
                "path": "deps",
                "query": {"bool": {"must": [{"term": {"deps.org": "a"}}, {"term": {"deps.repo": "y"}}]}},
            }
        }
        doc = {"deps": [{"org": "a", "repo": "x"}, {"org": "b", "repo": "y"}]}
        assert score(query, doc) is None
        doc["deps"].append({"org": "a", "repo": "y"})
        assert score(query, doc) is not None

    def test_query_string_unescapes_slash(self):
        assert score({"query_string": {"query": r"akka\/akka-http"}}, {"name": "see akka/akka-http"}) == 1.0

    def test_unsupported_query(self):
        with pytest.raises(ValueError, match="Unsupported query type"):
            score({"fuzzy": {"a": "b"}}, {})


class TestSortHits:
    def hits(self, *sources):
        return [{"_id": str(i), "_score": 1.0, "_source": s} for i, s in enumerate(sources)]

    def test_missing_value_default(self):
        hits = self.hits({"n": 1}, {}, {"n": 3})
        ordered = sort_hits(hits, [{"n": {"order": "desc", "missing": 0}}])
        assert [h["_source"].get("n") for h in ordered] == [3, 1, None]

    def test_missing_sorts_last_without_default(self):
        hits = self.hits({}, {"n": 1}, {"n": 3})
        ordered = sort_hits(hits, [{"n": {"order": "asc"}}])
        assert [h["_source"].get("n") for h in ordered] == [1, 3, None]

    def test_avg_mode(self):
        hits = self.hits({"n": [1, 9]}, {"n": [6]})
        ordered = sort_hits(hits, [{"n": {"order": "desc", "mode": "avg"}}])
        assert [h["_source"]["n"] for h in ordered] == [[6], [1, 9]]

    def test_secondary_clause_breaks_ties(self):
        hits = self.hits({"n": 1, "k": "b"}, {"n": 1, "k": "a"}, {"n": 2, "k": "c"})
        ordered = sort_hits(hits, [{"n": {"order": "desc"}}, {"k": {"order": "asc"}}])
        assert [h["_source"]["k"] for h in ordered] == ["c", "a", "b"]


class TestInMemoryIndex:
    async def test_search_paging_and_total(self):
        index = InMemoryIndex(DOCS)
        response = await index.search("packages", {"query": {"match_all": {}}, "from": 1, "size": 1})
        assert response.total == 3
        assert len(response.hits) == 1

    async def test_hits_carry_ids_and_sources(self):
        index = InMemoryIndex(DOCS)
        response = await index.search("packages", {"query": {"term": {"repository": "akka-http"}}})
        assert response.hits[0]["_id"] == "p1"
        assert "_id" not in response.hits[0]["_source"]

    async def test_terms_aggregation(self):
        index = InMemoryIndex(DOCS)
        response = await index.search(
            "packages",
            {"size": 0, "aggs": {"kw": {"terms": {"field": "keywords", "size": 2}}}},
        )
        assert response.hits == []
        assert response.buckets("kw") == [
            {"key": "http", "doc_count": 2},
            {"key": "actors", "doc_count": 1},
        ]

    async def test_unknown_collection_is_empty(self):
        index = InMemoryIndex(DOCS)
        response = await index.search("nothing", {})
        assert response.total == 0

    async def test_results_are_copies(self):
        index = InMemoryIndex(DOCS)
        response = await index.search("packages", {"query": {"term": {"repository": "akka"}}})
        response.hits[0]["_source"]["repository"] = "changed"
        again = await index.search("packages", {"query": {"term": {"repository": "akka"}}})
        assert again.total == 1

    async def test_health(self):
        index = InMemoryIndex()
        assert await index.health_check() is True
        assert index.status == BackendStatus.AVAILABLE

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(DOCS))
        index = InMemoryIndex.from_json_file(path)
        assert index.add("packages", {"organization": "x", "repository": "y"}) == "3"
