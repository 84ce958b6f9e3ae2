"""Natural keys used to correlate packages and releases.

These are the identity types shared by every query: a package is known by
its (organization, repository) pair and a published artifact by its maven
coordinate. Neither carries behavior beyond formatting.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageReference:
    """Identifies a package by its hosting organization and repository.

    Attributes:
        organization: Owner on the code-hosting platform (e.g., "akka")
        repository: Repository name (e.g., "akka-http")
    """

    organization: str
    repository: str

    def __str__(self) -> str:
        return f"{self.organization}/{self.repository}"


@dataclass(frozen=True)
class ArtifactCoordinate:
    """Identifies one published artifact version.

    Attributes:
        group_id: Maven group (e.g., "com.typesafe.akka")
        artifact_id: Maven artifact (e.g., "akka-http_2.12")
        version: Version string as published (e.g., "10.0.5")
    """

    group_id: str
    artifact_id: str
    version: str

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"
