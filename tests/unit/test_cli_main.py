"""Tests for the catalog-search command line."""

import json

import pytest

from catalog_search.main import build_parser, main

CATALOG = {
    "packages": [
        {
            "_id": "p1",
            "organization": "akka",
            "repository": "akka-http",
            "keywords": ["http"],
            "targets": ["scala_2.12"],
            "dependencies": ["akka/akka", "scalatest/scalatest"],
            "github": {"description": "HTTP server and client", "stars": 900},
            "created": "2017-03-01T00:00:00Z",
        },
        {
            "_id": "p2",
            "organization": "typelevel",
            "repository": "cats",
            "keywords": ["fp"],
            "targets": ["scala_2.12"],
            "dependencies": ["scalatest/scalatest"],
            "created": "2016-01-01T00:00:00Z",
        },
    ],
    "releases": [
        {
            "maven": {"groupId": "com.typesafe.akka", "artifactId": "akka-http_2.12", "version": "10.0.9"},
            "reference": {"organization": "akka", "repository": "akka-http"},
            "released": "2017-07-10T00:00:00Z",
            "target": "scala_2.12",
        },
    ],
}


@pytest.fixture
def fixtures_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(CATALOG))
    return str(path)


def run(capsys, *argv):
    code = main(list(argv))
    out = capsys.readouterr().out
    return code, json.loads(out) if out.strip() else None


class TestParser:
    def test_find_defaults(self):
        args = build_parser().parse_args(["find", "http"])
        assert args.page == 1
        assert args.sort is None
        assert args.fixtures is None

    def test_unknown_facet_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["facet", "stars"])


class TestCommands:
    def test_find(self, capsys, fixtures_file):
        code, result = run(capsys, "--fixtures", fixtures_file, "find", "http")

        assert code == 0
        assert result["pagination"] == {"current": 1, "total_pages": 1, "total": 1}
        assert result["items"][0]["repository"] == "akka-http"
        assert result["items"][0]["internal_id"] is None

    def test_project(self, capsys, fixtures_file):
        code, result = run(capsys, "--fixtures", fixtures_file, "project", "akka", "akka-http")

        assert code == 0
        assert result["release_count"] == 1
        assert result["release_options"]["release"]["maven"]["version"] == "10.0.9"

    def test_missing_project_prints_null(self, capsys, fixtures_file):
        code, result = run(capsys, "--fixtures", fixtures_file, "project", "nobody", "nothing")

        assert code == 0
        assert result is None

    def test_artifact(self, capsys, fixtures_file):
        code, result = run(
            capsys, "--fixtures", fixtures_file, "artifact", "com.typesafe.akka", "akka-http_2.12", "10.0.9"
        )

        assert code == 0
        assert result["reference"] == {"organization": "akka", "repository": "akka-http"}

    def test_latest_packages(self, capsys, fixtures_file):
        code, result = run(capsys, "--fixtures", fixtures_file, "latest", "packages")

        assert code == 0
        assert [p["repository"] for p in result] == ["akka-http", "cats"]

    def test_dependencies_facet(self, capsys, fixtures_file):
        code, result = run(capsys, "--fixtures", fixtures_file, "facet", "dependencies")

        assert code == 0
        assert result == [{"term": "akka/akka", "count": 1}]

    def test_malformed_document(self, capsys, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"packages": [{"organization": "akka"}], "releases": []}))

        code, result = run(capsys, "--fixtures", str(path), "latest", "packages")

        assert code == 1
        assert result["success"] is False
        assert result["error"] == "Malformed package document"
        assert result["details"]["collection"] == "packages"

    def test_invalid_index_configuration(self, capsys, monkeypatch):
        monkeypatch.setenv("CATALOG_SEARCH_ES_URL", "not-a-url")

        code = main(["find", "http"])

        assert code == 2
        assert "Configuration error" in capsys.readouterr().err
