"""Catalog query service.

The single entry point callers use to search packages, correlate packages
with their releases, read the "what's new" feeds and compute facets. Every
operation is a stateless read: it builds a request, sends it to the
DocumentIndex once (project detail: twice, concurrently) and shapes the
response. Packages leave through ``hide_id`` on every path.
"""

import asyncio
import logging
from typing import AbstractSet, Any, Callable, Dict, List, Optional, TypeVar

from ..constants import (
    DEFAULT_DEPENDENCY_EXCLUSIONS,
    FACET_BUCKET_SIZE,
    FACET_FIELDS,
    LATEST_FEED_SIZE,
    PROJECTS_COLLECTION,
    RELEASE_HISTORY_CAP,
    RELEASES_COLLECTION,
    RESULTS_PER_PAGE,
)
from ..domain.package_info import Package
from ..domain.references import ArtifactCoordinate, PackageReference
from ..domain.release_info import Release, ReleaseSelection
from ..models.responses import FacetCount, PageResult, Pagination, ProjectDetail
from ..search.backends.base import DocumentIndex, IndexResponse
from ..search.core.pagination import resolve_page, total_pages
from ..search.core.query_builder import (
    build_artifact_query,
    build_reference_query,
    build_text_query,
    match_all_query,
)
from ..search.core.sorting import sort_with_tie_break
from ..search.exceptions import InvalidFacetError, MalformedResult
from .release_selection import ReleaseSelector, default_release

logger = logging.getLogger(__name__)

T = TypeVar("T")


def hide_id(package: Package) -> Package:
    """Strip the storage identifier before a package leaves the service."""
    return package.hide_id()


def sort_facet(counts: List[FacetCount]) -> List[FacetCount]:
    """Order facet counts by count descending, then term ascending."""
    return sorted(counts, key=lambda facet: (-facet.count, facet.term))


class CatalogSearchService:
    """Query operations over the package and release collections."""

    def __init__(
        self,
        index: DocumentIndex,
        excluded_dependencies: AbstractSet[str] = DEFAULT_DEPENDENCY_EXCLUSIONS,
        release_selector: ReleaseSelector = default_release,
        results_per_page: int = RESULTS_PER_PAGE,
    ):
        """Initialize the service.

        Args:
            index: Document index to query
            excluded_dependencies: Identifiers removed from the dependencies facet
            release_selector: Picks the release shown on a project detail page
            results_per_page: Page size for package search
        """
        self.index = index
        self.excluded_dependencies = frozenset(excluded_dependencies)
        self.release_selector = release_selector
        self.results_per_page = results_per_page

    async def _execute(self, collection: str, body: Dict[str, Any]) -> IndexResponse:
        logger.debug(f"Querying {collection}: {body}")
        return await self.index.search(collection, body)

    @staticmethod
    def _decode(response: IndexResponse, decoder: Callable[[Dict[str, Any]], T], collection: str) -> List[T]:
        try:
            return [decoder(hit) for hit in response.hits]
        except MalformedResult as e:
            e.collection = collection
            raise

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def find(self, query: str, page: Optional[int] = 1, sort: Optional[str] = None) -> PageResult:
        """Full-text package search.

        Args:
            query: Free-text query
            page: Requested page, clamped to 1 when missing or below 1
            sort: One of stars, forks, relevant, created, updated; relevance otherwise

        Returns:
            PageResult with at most ``results_per_page`` packages
        """
        return await self._paged_query(build_text_query(query), page, sort)

    async def _paged_query(self, query: Dict[str, Any], page: Optional[int], sort: Optional[str]) -> PageResult:
        window = resolve_page(page, self.results_per_page)
        body = {
            "query": query,
            "from": window.offset,
            "size": window.limit,
            "sort": sort_with_tie_break(sort),
        }
        response = await self._execute(PROJECTS_COLLECTION, body)
        packages = self._decode(response, Package.from_hit, PROJECTS_COLLECTION)

        return PageResult(
            pagination=Pagination(
                current=window.page,
                total_pages=total_pages(response.total, self.results_per_page),
                total=response.total,
            ),
            items=[hide_id(p) for p in packages],
        )

    # ------------------------------------------------------------------
    # Release correlation
    # ------------------------------------------------------------------

    async def releases(self, reference: PackageReference) -> List[Release]:
        """All releases of a package, up to RELEASE_HISTORY_CAP."""
        body = {
            "query": build_reference_query(reference, path="reference"),
            "size": RELEASE_HISTORY_CAP,
        }
        response = await self._execute(RELEASES_COLLECTION, body)
        if response.total > RELEASE_HISTORY_CAP:
            logger.warning(
                f"{reference} has {response.total} releases, only {RELEASE_HISTORY_CAP} were fetched"
            )
        return self._decode(response, Release.from_hit, RELEASES_COLLECTION)

    async def resolve_artifact(self, coordinate: ArtifactCoordinate) -> Optional[Release]:
        """The release published under ``coordinate``, or None."""
        body = {"query": build_artifact_query(coordinate), "size": 1}
        response = await self._execute(RELEASES_COLLECTION, body)
        releases = self._decode(response, Release.from_hit, RELEASES_COLLECTION)
        return releases[0] if releases else None

    async def resolve_project(self, reference: PackageReference) -> Optional[Package]:
        """The package identified by ``reference``, or None."""
        body = {"query": build_reference_query(reference), "size": 1}
        response = await self._execute(PROJECTS_COLLECTION, body)
        packages = self._decode(response, Package.from_hit, PROJECTS_COLLECTION)
        return hide_id(packages[0]) if packages else None

    async def project_detail(
        self,
        reference: PackageReference,
        selection: Optional[ReleaseSelection] = None,
    ) -> Optional[ProjectDetail]:
        """A package together with its release count and chosen release.

        The package and its releases are fetched concurrently. Returns None
        when the package does not exist, whatever releases were found.
        """
        package, releases = await asyncio.gather(
            self.resolve_project(reference),
            self.releases(reference),
        )
        if package is None:
            return None

        options = self.release_selector(package, selection or ReleaseSelection(), releases)
        return ProjectDetail(package=package, release_count=len(releases), release_options=options)

    # ------------------------------------------------------------------
    # Latest feeds
    # ------------------------------------------------------------------

    async def latest_packages(self) -> List[Package]:
        packages = await self._latest(PROJECTS_COLLECTION, "created", LATEST_FEED_SIZE, Package.from_hit)
        return [hide_id(p) for p in packages]

    async def latest_releases(self) -> List[Release]:
        return await self._latest(RELEASES_COLLECTION, "released", LATEST_FEED_SIZE, Release.from_hit)

    async def _latest(
        self,
        collection: str,
        by: str,
        n: int,
        decoder: Callable[[Dict[str, Any]], T],
    ) -> List[T]:
        body = {
            "query": match_all_query(),
            "sort": [{by: {"order": "desc"}}],
            "size": n,
        }
        response = await self._execute(collection, body)
        return self._decode(response, decoder, collection)

    # ------------------------------------------------------------------
    # Facets
    # ------------------------------------------------------------------

    async def keywords(self) -> List[FacetCount]:
        return await self.aggregate("keywords")

    async def targets(self) -> List[FacetCount]:
        return await self.aggregate("targets")

    async def dependencies(self) -> List[FacetCount]:
        """Dependency usage without the ubiquitous testing and logging libraries."""
        return await self.aggregate("dependencies")

    async def facet(self, field: str) -> List[FacetCount]:
        """Facet by name.

        Raises:
            InvalidFacetError: If ``field`` is not keywords, targets or dependencies
        """
        if field == "keywords":
            return await self.keywords()
        if field == "targets":
            return await self.targets()
        if field == "dependencies":
            return await self.dependencies()
        raise InvalidFacetError(field, FACET_FIELDS)

    async def aggregate(self, field: str) -> List[FacetCount]:
        """Count packages per value of ``field`` across the whole catalog.

        The excluded identifiers are removed from the ``dependencies`` field
        only, whichever entry point asked for it.

        Returns:
            Up to FACET_BUCKET_SIZE counts, sorted by count descending
        """
        aggregation_name = f"{field}_count"
        body = {
            "size": 0,
            "aggs": {
                aggregation_name: {
                    "terms": {
                        "field": field,
                        "size": FACET_BUCKET_SIZE,
                        "order": [{"_count": "desc"}, {"_key": "asc"}],
                    }
                }
            },
        }
        response = await self._execute(PROJECTS_COLLECTION, body)
        counts = [
            FacetCount(term=str(bucket["key"]), count=bucket["doc_count"])
            for bucket in response.buckets(aggregation_name)
        ]
        if field == "dependencies":
            counts = [facet for facet in counts if facet.term not in self.excluded_dependencies]
        return sort_facet(counts)
