#!/usr/bin/env python3
"""Command-line entry point for catalog queries.

Environment variables control the index connection (see IndexConfig):

- CATALOG_SEARCH_ES_URL: Elasticsearch URL (default: http://localhost:9200)
- CATALOG_SEARCH_INDEX_PREFIX: Prefix of the physical indices (default: catalog)
- LOG_LEVEL: Logging level (default: 'WARNING')

Usage:
    catalog-search find "http client" --page 2 --sort stars
    catalog-search project akka akka-http --target 2.12
    catalog-search facet dependencies --fixtures catalog.json
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, List, Optional

from dotenv import load_dotenv
from pydantic import TypeAdapter

from .config.base import ConfigurationError
from .config.index import IndexConfig
from .constants import FACET_FIELDS
from .domain.references import ArtifactCoordinate, PackageReference
from .domain.release_info import ReleaseSelection
from .search.backends.base import DocumentIndex
from .search.backends.memory import InMemoryIndex
from .search.core.sorting import SORT_STRATEGIES
from .search.exceptions import SearchException
from .services.catalog_service import CatalogSearchService

logger = logging.getLogger(__name__)

# Serializes pydantic models, the domain dataclasses and plain lists of them.
RESULT_ADAPTER = TypeAdapter(Any)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-search",
        description="Query the software-library catalog index",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--fixtures",
        metavar="FILE",
        help='Query an in-memory index loaded from a JSON file of {"packages": [...], "releases": [...]}',
    )
    sub = parser.add_subparsers(dest="command", required=True)

    find = sub.add_parser("find", help="Full-text package search")
    find.add_argument("query")
    find.add_argument("--page", type=int, default=1)
    find.add_argument("--sort", help=f"One of {', '.join(SORT_STRATEGIES)} (default: relevance)")

    releases = sub.add_parser("releases", help="All releases of a package")
    releases.add_argument("organization")
    releases.add_argument("repository")

    artifact = sub.add_parser("artifact", help="Release published under a maven coordinate")
    artifact.add_argument("group_id")
    artifact.add_argument("artifact_id")
    artifact.add_argument("version")

    project = sub.add_parser("project", help="Package detail with its chosen release")
    project.add_argument("organization")
    project.add_argument("repository")
    project.add_argument("--target")
    project.add_argument("--artifact")
    project.add_argument("--version")

    latest = sub.add_parser("latest", help="Most recent packages or releases")
    latest.add_argument("kind", choices=["packages", "releases"])

    facet = sub.add_parser("facet", help="Value counts of a package field")
    facet.add_argument("field", choices=FACET_FIELDS)

    return parser


def build_index(fixtures: Optional[str]) -> DocumentIndex:
    if fixtures:
        return InMemoryIndex.from_json_file(fixtures)

    from .search.backends.elasticsearch import ElasticsearchIndex

    return ElasticsearchIndex(IndexConfig.from_environment())


async def run_command(service: CatalogSearchService, args: argparse.Namespace) -> Any:
    if args.command == "find":
        return await service.find(args.query, args.page, args.sort)
    if args.command == "releases":
        return await service.releases(PackageReference(args.organization, args.repository))
    if args.command == "artifact":
        return await service.resolve_artifact(ArtifactCoordinate(args.group_id, args.artifact_id, args.version))
    if args.command == "project":
        selection = ReleaseSelection(target=args.target, artifact=args.artifact, version=args.version)
        return await service.project_detail(PackageReference(args.organization, args.repository), selection)
    if args.command == "latest":
        if args.kind == "packages":
            return await service.latest_packages()
        return await service.latest_releases()
    return await service.facet(args.field)


async def _main(args: argparse.Namespace) -> int:
    index = build_index(args.fixtures)
    service = CatalogSearchService(index)
    try:
        result = await run_command(service, args)
    except SearchException as e:
        print(json.dumps(e.to_response(), indent=2))
        return 1
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    finally:
        await index.close()

    print(json.dumps(RESULT_ADAPTER.dump_python(result, mode="json"), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the catalog-search command."""
    # Load .env from the working directory; shell environment wins
    load_dotenv()

    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    args = build_parser().parse_args(argv)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
