"""Release domain objects decoded from the releases collection."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..search.exceptions import MalformedResult
from .references import ArtifactCoordinate, PackageReference


@dataclass(frozen=True)
class Release:
    """One published version of a package.

    Attributes:
        maven: Coordinate of the published artifact
        reference: Package this release belongs to
        released: ISO 8601 release timestamp, if known
        target: Build target the artifact was published for
        name: Artifact display name
    """

    maven: ArtifactCoordinate
    reference: PackageReference
    released: Optional[str] = None
    target: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_hit(cls, hit: Dict[str, Any]) -> "Release":
        """Decode an index hit into a Release.

        Raises:
            MalformedResult: If the maven coordinate or package reference is incomplete
        """
        source = hit.get("_source") or {}
        try:
            maven = source["maven"]
            reference = source["reference"]
            coordinate = ArtifactCoordinate(
                group_id=maven["groupId"],
                artifact_id=maven["artifactId"],
                version=maven["version"],
            )
            package_ref = PackageReference(
                organization=reference["organization"],
                repository=reference["repository"],
            )
        except (KeyError, TypeError) as e:
            raise MalformedResult(
                entity="release",
                cause=f"cannot decode document {hit.get('_id')!r}: {e!r}",
            ) from e

        return cls(
            maven=coordinate,
            reference=package_ref,
            released=source.get("released"),
            target=source.get("target"),
            name=source.get("name") or coordinate.artifact_id,
        )


@dataclass(frozen=True)
class ReleaseSelection:
    """Criteria a caller supplies to pick which release to present."""

    target: Optional[str] = None
    artifact: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True)
class ReleaseOptions:
    """The chosen release plus the alternatives a detail page can offer."""

    release: Release
    artifacts: List[str] = field(default_factory=list)
    versions: List[str] = field(default_factory=list)
    targets: List[str] = field(default_factory=list)

    def __hash__(self) -> int:
        return hash((self.release, tuple(self.artifacts), tuple(self.versions), tuple(self.targets)))
