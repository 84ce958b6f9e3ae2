"""In-process document index.

Evaluates the subset of the Elasticsearch request DSL that the catalog
queries emit, against documents held in memory. Used by the test-suite and
by the CLI's offline mode, so its semantics follow Elasticsearch where the
two overlap:

- ``match_all``, ``term``, ``bool`` (must/should/filter/must_not),
  ``nested`` and a simplified ``query_string``
- field sorts with ``order``, ``missing`` and ``mode``, plus ``_score``
- ``from``/``size`` paging
- ``terms`` aggregations with ``size`` and ``order``
"""

import copy
import itertools
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ...constants import PROJECTS_COLLECTION, RELEASES_COLLECTION
from .base import BackendStatus, DocumentIndex, IndexResponse

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 10

QUERY_STRING_OPERATORS = {"AND", "OR", "NOT"}

Document = Tuple[str, Dict[str, Any]]


def field_values(obj: Any, path: str) -> List[Any]:
    """Collect every leaf value at a dotted path, flattening lists on the way.

    Examples:
        >>> field_values({"github": {"stars": 3}}, "github.stars")
        [3]
        >>> field_values({"maven": [{"version": "1"}, {"version": "2"}]}, "maven.version")
        ['1', '2']
    """
    current = [obj]
    for part in path.split("."):
        step = []
        for item in current:
            if isinstance(item, dict) and part in item:
                value = item[part]
                if isinstance(value, list):
                    step.extend(value)
                else:
                    step.append(value)
        current = step
    return [value for value in current if value is not None]


def _graft(doc: Dict[str, Any], parts: List[str], sub: Any) -> Dict[str, Any]:
    grafted = dict(doc)
    if len(parts) == 1:
        grafted[parts[0]] = sub
    else:
        inner = doc.get(parts[0])
        grafted[parts[0]] = _graft(inner if isinstance(inner, dict) else {}, parts[1:], sub)
    return grafted


def _strings(obj: Any) -> Iterable[str]:
    if isinstance(obj, str):
        yield obj
    elif isinstance(obj, dict):
        for value in obj.values():
            yield from _strings(value)
    elif isinstance(obj, list):
        for value in obj:
            yield from _strings(value)


def _query_string_tokens(query: str) -> List[str]:
    unescaped = re.sub(r"\\(.)", r"\1", query)
    return [token.lower() for token in unescaped.split() if token not in QUERY_STRING_OPERATORS]


def score(query: Dict[str, Any], doc: Dict[str, Any]) -> Optional[float]:
    """Score a document against a query, or return None when it does not match.

    Raises:
        ValueError: For query types this index does not evaluate
    """
    if len(query) != 1:
        raise ValueError(f"Query must have exactly one clause type: {query}")
    kind, spec = next(iter(query.items()))

    if kind == "match_all":
        return 1.0

    if kind == "term":
        field, expected = next(iter(spec.items()))
        if isinstance(expected, dict):
            expected = expected.get("value")
        return 1.0 if expected in field_values(doc, field) else None

    if kind == "query_string":
        tokens = _query_string_tokens(spec.get("query", ""))
        haystack = [text.lower() for text in _strings(doc)]
        matched = sum(1 for token in tokens if any(token in text for text in haystack))
        return float(matched) if matched else None

    if kind == "nested":
        parts = spec["path"].split(".")
        scores = [score(spec["query"], _graft(doc, parts, sub)) for sub in field_values(doc, spec["path"])]
        scores = [s for s in scores if s is not None]
        return max(scores) if scores else None

    if kind == "bool":
        return _score_bool(spec, doc)

    raise ValueError(f"Unsupported query type: {kind}")


def _clauses(spec: Dict[str, Any], occur: str) -> List[Dict[str, Any]]:
    clauses = spec.get(occur, [])
    return [clauses] if isinstance(clauses, dict) else list(clauses)


def _score_bool(spec: Dict[str, Any], doc: Dict[str, Any]) -> Optional[float]:
    total = 0.0

    for clause in _clauses(spec, "must"):
        s = score(clause, doc)
        if s is None:
            return None
        total += s

    for clause in _clauses(spec, "filter"):
        if score(clause, doc) is None:
            return None

    for clause in _clauses(spec, "must_not"):
        if score(clause, doc) is not None:
            return None

    should = _clauses(spec, "should")
    should_scores = [s for s in (score(clause, doc) for clause in should) if s is not None]
    only_should = should and not _clauses(spec, "must") and not _clauses(spec, "filter")
    if only_should and not should_scores:
        return None
    total += sum(should_scores)

    if not any(spec.get(occur) for occur in ("must", "filter", "must_not", "should")):
        return 1.0
    return total


def _sort_spec(clause: Union[str, Dict[str, Any]]) -> Tuple[str, Dict[str, Any]]:
    if isinstance(clause, str):
        return clause, {"order": "desc" if clause == "_score" else "asc"}
    field, spec = next(iter(clause.items()))
    if isinstance(spec, str):
        spec = {"order": spec}
    return field, spec


def _sort_value(values: List[Any], mode: Optional[str], descending: bool) -> Any:
    numeric = all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values)
    if mode == "avg" and numeric:
        return sum(values) / len(values)
    if mode == "sum" and numeric:
        return sum(values)
    if mode == "min":
        return min(values)
    if mode == "max":
        return max(values)
    return max(values) if descending else min(values)


def sort_hits(hits: List[Dict[str, Any]], clauses: List[Union[str, Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Sort hits by the given clauses, first clause most significant.

    Documents missing a field sort last unless the clause supplies ``missing``.
    """
    ordered = list(hits)
    for clause in reversed(clauses):
        field, spec = _sort_spec(clause)
        descending = spec.get("order", "asc") == "desc"

        if field == "_score":
            ordered.sort(key=lambda hit: hit["_score"], reverse=descending)
            continue

        present, missing = [], []
        for hit in ordered:
            values = field_values(hit["_source"], field)
            if not values and "missing" in spec:
                values = [spec["missing"]]
            if values:
                present.append((_sort_value(values, spec.get("mode"), descending), hit))
            else:
                missing.append(hit)
        present.sort(key=lambda pair: pair[0], reverse=descending)
        ordered = [hit for _, hit in present] + missing
    return ordered


def _terms_buckets(docs: List[Dict[str, Any]], spec: Dict[str, Any]) -> List[Dict[str, Any]]:
    counts: Dict[Any, int] = {}
    for doc in docs:
        for value in set(field_values(doc, spec["field"])):
            counts[value] = counts.get(value, 0) + 1

    order = spec.get("order", [{"_count": "desc"}, {"_key": "asc"}])
    if isinstance(order, dict):
        order = [order]
    items = list(counts.items())
    for clause in reversed(order):
        key, direction = next(iter(clause.items()))
        index = 1 if key == "_count" else 0
        items.sort(key=lambda item: item[index], reverse=direction == "desc")

    size = spec.get("size", DEFAULT_SIZE)
    return [{"key": key, "doc_count": count} for key, count in items[:size]]


class InMemoryIndex(DocumentIndex):
    """Document index backed by Python dictionaries."""

    def __init__(self, documents: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        super().__init__("memory")
        self._collections: Dict[str, List[Document]] = {
            PROJECTS_COLLECTION: [],
            RELEASES_COLLECTION: [],
        }
        self._ids = itertools.count(1)
        for collection, sources in (documents or {}).items():
            for source in sources:
                self.add(collection, source)
        self._update_status(BackendStatus.AVAILABLE)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryIndex":
        """Load documents from a JSON file shaped like ``{"packages": [...], "releases": [...]}``."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        index = cls(data)
        logger.info(
            f"Loaded {sum(len(docs) for docs in index._collections.values())} documents from {path}"
        )
        return index

    def add(self, collection: str, source: Dict[str, Any], doc_id: Optional[str] = None) -> str:
        """Add a document, returning its identifier.

        A ``_id`` key in ``source`` is used as the identifier and removed
        from the stored document.
        """
        source = dict(source)
        doc_id = doc_id or source.pop("_id", None) or str(next(self._ids))
        self._collections.setdefault(collection, []).append((str(doc_id), source))
        return str(doc_id)

    async def search(self, collection: str, body: Dict[str, Any]) -> IndexResponse:
        query = body.get("query", {"match_all": {}})
        documents = self._collections.get(collection, [])

        hits = []
        for doc_id, source in documents:
            s = score(query, source)
            if s is not None:
                hits.append({"_id": doc_id, "_score": s, "_source": source})

        sort = body.get("sort") or [{"_score": {"order": "desc"}}]
        if isinstance(sort, (str, dict)):
            sort = [sort]
        hits = sort_hits(hits, sort)

        aggregations = {}
        for name, agg in (body.get("aggs") or {}).items():
            if "terms" not in agg:
                raise ValueError(f"Unsupported aggregation: {agg}")
            aggregations[name] = {"buckets": _terms_buckets([hit["_source"] for hit in hits], agg["terms"])}

        offset = body.get("from", 0)
        size = body.get("size", DEFAULT_SIZE)
        page = hits[offset : offset + size]

        logger.debug(f"memory search on {collection}: {len(hits)} hits, returning {len(page)}")
        return IndexResponse(
            total=len(hits),
            hits=copy.deepcopy(page),
            aggregations=aggregations,
            took_ms=0.0,
        )

    async def health_check(self) -> bool:
        return True
