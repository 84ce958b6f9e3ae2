"""Constants used throughout the catalog search layer."""

# ============================================================================
# Collections
# ============================================================================
# Logical collection names. Backends map them onto physical indices
# (see IndexConfig.index_for).

PROJECTS_COLLECTION = "packages"
RELEASES_COLLECTION = "releases"

# ============================================================================
# Result caps
# ============================================================================

# Page size shared by every paginated query.
RESULTS_PER_PAGE = 10

# Number of buckets requested for a terms facet.
FACET_BUCKET_SIZE = 50

# Upper bound on the release history fetched for one package.
# Anything beyond it is dropped and logged as a warning.
RELEASE_HISTORY_CAP = 1000

# Size of the "what's new" feeds.
LATEST_FEED_SIZE = 12

# ============================================================================
# Facets
# ============================================================================

FACET_FIELDS = ("keywords", "targets", "dependencies")

# Testing, logging and build tooling that shows up as a dependency of nearly
# every package. Removed from the dependencies facet only.
# A separate view could compare testing frameworks against each other.
DEFAULT_DEPENDENCY_EXCLUSIONS = frozenset(
    {
        "akka/akka-slf4j",
        "akka/akka-testkit",
        "etorreborre/specs2",
        "etorreborre/specs2-core",
        "etorreborre/specs2-junit",
        "etorreborre/specs2-mock",
        "etorreborre/specs2-scalacheck",
        "lihaoyi/utest",
        "paulbutcher/scalamock-scalatest-support",
        "playframework/play-specs2",
        "playframework/play-test",
        "rickynils/scalacheck",
        "scala/scala-library",
        "scalatest/scalatest",
        "scalaz/scalaz-scalacheck-binding",
        "scopt/scopt",
        "scoverage/scalac-scoverage-plugin",
        "scoverage/scalac-scoverage-runtime",
        "spray/spray-testkit",
        "typesafehub/scala-logging",
        "typesafehub/scala-logging-slf4j",
    }
)
