"""Unit tests for the query template resolver."""

import pytest

from domain.errors import QueryTemplateError
from application.services.query_templates import (
    QueryTemplateResolver,
    sparql_iri,
    sparql_literal,
    sparql_regex_literal,
)

ONTOLOGY = "http://0.0.0.0:3333"


@pytest.fixture
def resolver():
    return QueryTemplateResolver()


class TestFilters:

    def test_literal_escapes_quotes_and_newlines(self):
        assert sparql_literal('say "hi"\n') == 'say \\"hi\\"\\n'
        assert sparql_literal("a\\b") == "a\\\\b"

    def test_regex_literal_escapes_metacharacters(self):
        assert sparql_regex_literal("a.b") == "a\\\\.b"

    def test_iri_rejects_breakout(self):
        with pytest.raises(ValueError):
            sparql_iri("http://x> } DROP ALL { <y")
        with pytest.raises(ValueError):
            sparql_iri("")
        assert sparql_iri("http://rdfh.ch/0807/lex") == "http://rdfh.ch/0807/lex"


class TestQueryTemplateResolver:

    def test_names(self, resolver):
        assert resolver.names() == ["lemmata_query", "lemmata_search", "lexica", "lexica_from_lemma"]

    def test_lemmata_query(self, resolver):
        query = resolver.resolve("lemmata_query", {"ontology": ONTOLOGY, "start": "B", "page": "2"})

        assert "PREFIX mls: <http://0.0.0.0:3333/ontology/0807/mls/v2#>" in query
        assert 'FILTER regex(?text, "^B", "i")' in query
        assert "OFFSET 2" in query

    def test_page_defaults_to_zero(self, resolver):
        query = resolver("lexica", {"ontology": ONTOLOGY})

        assert "OFFSET 0" in query

    def test_optional_lexicon_restriction(self, resolver):
        plain = resolver.resolve("lemmata_search", {"ontology": ONTOLOGY, "searchterm": "Smith"})
        restricted = resolver.resolve(
            "lemmata_search",
            {"ontology": ONTOLOGY, "searchterm": "Smith", "lexicon_iri": "http://rdfh.ch/0807/lex"},
        )

        assert "isInLexicon" not in plain
        assert "mls:isInLexicon <http://rdfh.ch/0807/lex>" in restricted

    def test_search_term_cannot_break_out(self, resolver):
        query = resolver.resolve("lemmata_search", {"ontology": ONTOLOGY, "searchterm": 'x") }'})

        assert '"x\\")' not in query
        assert 'regex(?text, "x\\"\\\\)' in query

    def test_unknown_template(self, resolver):
        with pytest.raises(QueryTemplateError):
            resolver.resolve("nope", {"ontology": ONTOLOGY})

    def test_missing_parameter(self, resolver):
        with pytest.raises(QueryTemplateError):
            resolver.resolve("lexica_from_lemma", {"ontology": ONTOLOGY})

    def test_malformed_iri_parameter(self, resolver):
        with pytest.raises(QueryTemplateError):
            resolver.resolve("lexica_from_lemma", {"ontology": ONTOLOGY, "lemma_iri": "bad iri"})

    def test_custom_templates(self):
        resolver = QueryTemplateResolver({"hello": "SELECT {{ name | literal }}"})

        assert resolver.resolve("hello", {"name": "x"}) == "SELECT x"
