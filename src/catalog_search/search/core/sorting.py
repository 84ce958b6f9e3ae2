"""Sort strategies for package search."""

from typing import Any, Dict, List, Optional

# Applied after the primary sort so equal scores come back in a stable order.
TIE_BREAK_SORT: List[Dict[str, Any]] = [
    {"organization": {"order": "asc"}},
    {"repository": {"order": "asc"}},
]

SCORE_SORT: Dict[str, Any] = {"_score": {"order": "desc"}}


def _popularity_sort(field: str) -> Dict[str, Any]:
    # Missing counts sort as zero; multi-valued fields use their average.
    return {field: {"order": "desc", "missing": 0, "mode": "avg"}}


def _recency_sort(field: str) -> Dict[str, Any]:
    return {field: {"order": "desc"}}


SORT_STRATEGIES: Dict[str, Dict[str, Any]] = {
    "stars": _popularity_sort("github.stars"),
    "forks": _popularity_sort("github.forks"),
    "relevant": SCORE_SORT,
    "created": _recency_sort("created"),
    "updated": _recency_sort("updated"),
}


def resolve_sort(key: Optional[str]) -> Dict[str, Any]:
    """Map a caller sort key to a sort clause.

    Unknown or missing keys fall back to relevance. Never raises.
    """
    if key is None:
        return SCORE_SORT
    return SORT_STRATEGIES.get(key, SCORE_SORT)


def sort_with_tie_break(key: Optional[str]) -> List[Dict[str, Any]]:
    """Primary sort for ``key`` followed by the stable tie-break clauses."""
    return [resolve_sort(key), *TIE_BREAK_SORT]
