"""Test configuration for pytest.

Shared fixtures build a small catalog in an InMemoryIndex so service tests
exercise real query construction and evaluation without a cluster.
"""

import pytest

from catalog_search.constants import PROJECTS_COLLECTION, RELEASES_COLLECTION
from catalog_search.search.backends.memory import InMemoryIndex
from catalog_search.services.catalog_service import CatalogSearchService


@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_package(organization, repository, **overrides):
    package = {
        "organization": organization,
        "repository": repository,
        "keywords": [],
        "targets": ["scala_2.12"],
        "dependencies": [],
        "github": {"description": f"{repository} library", "stars": 0, "forks": 0},
        "created": "2017-01-01T00:00:00Z",
        "updated": "2017-01-01T00:00:00Z",
    }
    package.update(overrides)
    return package


def make_release(organization, repository, artifact_id, version, released, target="scala_2.12"):
    return {
        "maven": {"groupId": f"org.{organization}", "artifactId": artifact_id, "version": version},
        "reference": {"organization": organization, "repository": repository},
        "released": released,
        "target": target,
        "name": artifact_id,
    }


SAMPLE_PACKAGES = [
    make_package(
        "akka",
        "akka-http",
        keywords=["http", "akka", "client"],
        dependencies=["akka/akka", "scalatest/scalatest", "typesafehub/scala-logging"],
        github={"description": "The Streaming-first HTTP server/client", "readme": "akka http client", "stars": 900, "forks": 400},
        created="2017-03-01T00:00:00Z",
        updated="2017-05-01T00:00:00Z",
    ),
    make_package(
        "softwaremill",
        "sttp",
        keywords=["http", "client"],
        dependencies=["akka/akka", "scalatest/scalatest"],
        github={"description": "The Scala HTTP client you always wanted", "stars": 1200, "forks": 150},
        created="2017-06-01T00:00:00Z",
        updated="2017-06-15T00:00:00Z",
    ),
    make_package(
        "typelevel",
        "cats",
        keywords=["functional", "fp"],
        targets=["scala_2.12", "scala-js_0.6"],
        dependencies=["scalatest/scalatest", "typelevel/machinist"],
        github={"description": "Lightweight, modular, and extensible library for functional programming", "stars": 3000},
        created="2016-01-01T00:00:00Z",
        updated="2017-07-01T00:00:00Z",
    ),
    make_package(
        "circe",
        "circe",
        keywords=["json"],
        dependencies=["typelevel/cats", "scalatest/scalatest"],
        github=None,
        created="2016-06-01T00:00:00Z",
        updated="2017-02-01T00:00:00Z",
    ),
]

SAMPLE_RELEASES = [
    make_release("akka", "akka-http", "akka-http_2.12", "10.0.5", "2017-03-16T00:00:00Z"),
    make_release("akka", "akka-http", "akka-http_2.12", "10.0.9", "2017-07-10T00:00:00Z"),
    make_release("akka", "akka-http", "akka-http-core_2.11", "10.0.9", "2017-07-10T00:00:00Z", target="scala_2.11"),
    # Same organization, different repository
    make_release("akka", "akka", "akka-actor_2.12", "2.5.3", "2017-06-20T00:00:00Z"),
    # Same repository name, different organization
    make_release("other", "akka-http", "akka-http_2.12", "0.1.0", "2017-08-01T00:00:00Z"),
    make_release("typelevel", "cats", "cats-core_2.12", "0.9.0", "2017-01-05T00:00:00Z"),
]


@pytest.fixture
def memory_index():
    return InMemoryIndex({PROJECTS_COLLECTION: SAMPLE_PACKAGES, RELEASES_COLLECTION: SAMPLE_RELEASES})


@pytest.fixture
def service(memory_index):
    return CatalogSearchService(memory_index)
