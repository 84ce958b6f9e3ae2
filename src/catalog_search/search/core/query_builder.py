"""Query DSL builders for the catalog indices.

Every builder returns a plain Elasticsearch query dict so backends can send
it as-is and tests can assert on its shape.
"""

from typing import Any, Dict, Optional

from ...domain.references import ArtifactCoordinate, PackageReference

# Fields matched exactly against the raw text query, in clause order.
TEXT_TERM_FIELDS = [
    "keywords",
    "github.description",
    "repository",
    "organization",
    "github.readme",
]


def escape_query_string(query: str) -> str:
    r"""Escape ``/`` for query_string queries.

    Only ``/`` is escaped; it starts a regular expression in the query_string
    grammar. Every other operator (AND, OR, wildcards, quotes, ...) is left
    alone so users keep the full query syntax.

    Examples:
        >>> escape_query_string("akka/akka-http")
        'akka\\/akka-http'
        >>> escape_query_string("http AND client")
        'http AND client'
    """
    return query.replace("/", "\\/")


def term_query(field: str, value: Any) -> Dict[str, Any]:
    return {"term": {field: value}}


def build_text_query(raw: str) -> Dict[str, Any]:
    """Build the disjunctive free-text query used by package search.

    A document is a hit when any clause matches. The exact term clauses let a
    keyword or an organization name win outright, while the trailing
    query_string clause supplies ranked relevance over prose. Documents that
    satisfy more clauses score higher.

    Args:
        raw: Free-text query as typed by the user

    Returns:
        A ``bool.should`` query dict
    """
    should = [term_query(field, raw) for field in TEXT_TERM_FIELDS]
    should.append({"query_string": {"query": escape_query_string(raw)}})
    return {"bool": {"should": should}}


def build_reference_query(reference: PackageReference, path: Optional[str] = None) -> Dict[str, Any]:
    """Match documents whose organization AND repository equal the reference.

    Args:
        reference: Package to match
        path: Nested object holding the reference, or None for top-level fields
    """
    prefix = f"{path}." if path else ""
    query: Dict[str, Any] = {
        "bool": {
            "must": [
                term_query(f"{prefix}organization", reference.organization),
                term_query(f"{prefix}repository", reference.repository),
            ]
        }
    }
    if path:
        return {"nested": {"path": path, "query": query}}
    return query


def build_artifact_query(coordinate: ArtifactCoordinate) -> Dict[str, Any]:
    """Match the release published under exactly this maven coordinate."""
    return {
        "nested": {
            "path": "maven",
            "query": {
                "bool": {
                    "must": [
                        term_query("maven.groupId", coordinate.group_id),
                        term_query("maven.artifactId", coordinate.artifact_id),
                        term_query("maven.version", coordinate.version),
                    ]
                }
            },
        }
    }


def match_all_query() -> Dict[str, Any]:
    return {"match_all": {}}
