"""Tests for the lexicon CLI."""

import json

import pytest
from typer.testing import CliRunner

import interfaces.cli as cli
from composition_root import bootstrap_lexicon
from domain.errors import UpstreamError

runner = CliRunner()

MLS = "http://0.0.0.0:3333/ontology/0807/mls/v2#"


@pytest.fixture
def wired(monkeypatch, mock_backend, settings):
    """Route the CLI to the mocked resource API."""
    monkeypatch.setattr(cli, "bootstrap_lexicon", lambda s: bootstrap_lexicon(settings, backend=mock_backend))
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    return mock_backend


class TestCommands:

    def test_resource(self, wired):
        result = runner.invoke(cli.app, ["resource", "http://rdfh.ch/0807/lemma-smith"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["label"] == "Smith, John"
        assert [p["label"] for p in data["properties"]] == ["Family name", "Lemma type"]

    def test_lemma_not_editable_without_login(self, wired):
        result = runner.invoke(cli.app, ["lemma", "http://rdfh.ch/0807/lemma-smith"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["editable"] is False

    def test_lemma_editable_after_login(self, wired):
        result = runner.invoke(
            cli.app,
            ["--email", "a@example.org", "--password", "secret", "lemma", "http://rdfh.ch/0807/lemma-smith"],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["editable"] is True
        wired.login.assert_awaited_once_with("email", "a@example.org", "secret")

    def test_resinfo_local_name(self, wired):
        result = runner.invoke(cli.app, ["resinfo", "Lemma"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["properties"][MLS + "hasLemmaText"]["cardinality"] == "exactly-one"

    def test_lemmata(self, wired):
        result = runner.invoke(cli.app, ["lemmata", "--start", "S"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total"] == 1
        assert data["rows"] == [["http://rdfh.ch/0807/lemma-smith", "Smith, John", None, None, None]]

    def test_search_with_lexicon(self, wired):
        result = runner.invoke(cli.app, ["search", "Smith", "--lexicon", "http://rdfh.ch/0807/hls"])

        assert result.exit_code == 0
        query = wired.search.await_args.args[0]
        assert "<http://rdfh.ch/0807/hls>" in query

    def test_node_and_list(self, wired):
        node = runner.invoke(cli.app, ["node", "n1"])
        tree = runner.invoke(cli.app, ["list", "root"])

        assert json.loads(node.stdout)["label"] == "Poet"
        assert json.loads(tree.stdout)["info"]["name"] == "lemmaTypes"


class TestErrors:

    def test_upstream_error_exits_nonzero(self, wired):
        wired.get_resource.side_effect = UpstreamError("Resource not found", status_code=404)

        result = runner.invoke(cli.app, ["resource", "http://rdfh.ch/0807/missing"])

        assert result.exit_code == 1

    def test_failed_login_exits_nonzero(self, wired):
        wired.login.side_effect = UpstreamError("rejected", status_code=401, payload="Invalid credentials")

        result = runner.invoke(cli.app, ["--email", "a@example.org", "--password", "x", "resource", "r"])

        assert result.exit_code == 1
        wired.get_resource.assert_not_awaited()
