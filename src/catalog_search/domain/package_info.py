"""Package domain object decoded from the packages collection.

A Package is a read-only projection of one index document. The storage
identifier travels along only until the service strips it; it is never part
of what callers see.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..search.exceptions import MalformedResult
from .references import PackageReference


def _string_list(hit: Dict[str, Any], source: Dict[str, Any], name: str) -> List[str]:
    # A single-valued array comes back from the index as a bare string.
    value = source.get(name)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return list(value)
    raise MalformedResult(
        entity="package",
        cause=f"field {name!r} in document {hit.get('_id')!r} is {type(value).__name__}, expected a list",
    )


@dataclass(frozen=True)
class GithubInfo:
    """Metadata sourced from the code-hosting platform."""

    description: Optional[str] = None
    readme: Optional[str] = None
    stars: Optional[int] = None
    forks: Optional[int] = None

    @classmethod
    def from_source(cls, source: Dict[str, Any]) -> "GithubInfo":
        return cls(
            description=source.get("description"),
            readme=source.get("readme"),
            stars=source.get("stars"),
            forks=source.get("forks"),
        )


@dataclass(frozen=True)
class Package:
    """A cataloged software library.

    Attributes:
        organization: Owner on the code-hosting platform
        repository: Repository name
        keywords: Free-form tags
        targets: Build targets the package is published for
        dependencies: "organization/repository" references of dependencies
        github: Popularity and prose metadata, if the package was crawled
        created: ISO 8601 creation timestamp
        updated: ISO 8601 last-update timestamp
        internal_id: Storage identifier, stripped before leaving the service
    """

    organization: str
    repository: str
    keywords: List[str] = field(default_factory=list)
    targets: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    github: Optional[GithubInfo] = None
    created: Optional[str] = None
    updated: Optional[str] = None
    internal_id: Optional[str] = None

    @property
    def reference(self) -> PackageReference:
        return PackageReference(self.organization, self.repository)

    def hide_id(self) -> "Package":
        """Return a copy without the storage identifier."""
        return replace(self, internal_id=None)

    @classmethod
    def from_hit(cls, hit: Dict[str, Any]) -> "Package":
        """Decode an index hit into a Package.

        Raises:
            MalformedResult: If the document lacks organization or repository, or a
                list field holds something other than a string or a list
        """
        source = hit.get("_source") or {}
        try:
            organization = source["organization"]
            repository = source["repository"]
        except KeyError as e:
            raise MalformedResult(
                entity="package",
                cause=f"missing field {e.args[0]!r} in document {hit.get('_id')!r}",
            ) from e

        github = source.get("github")
        return cls(
            organization=organization,
            repository=repository,
            keywords=_string_list(hit, source, "keywords"),
            targets=_string_list(hit, source, "targets"),
            dependencies=_string_list(hit, source, "dependencies"),
            github=GithubInfo.from_source(github) if isinstance(github, dict) else None,
            created=source.get("created"),
            updated=source.get("updated"),
            internal_id=hit.get("_id"),
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.organization,
                self.repository,
                tuple(self.keywords),
                tuple(self.targets),
                tuple(self.dependencies),
                self.github,
                self.created,
                self.updated,
                self.internal_id,
            )
        )
