"""
Gravsearch query templates.

Maps a symbolic query name plus a parameter mapping to a query string for the
extended search endpoint. Templates are rendered with jinja2; string
parameters pass through the ``literal`` / ``regex_literal`` filters and IRIs
through the ``iri`` filter, so user input cannot break out of the query.

Every template expects an ``ontology`` parameter: the tenant's ontology
prefix, injected by the caller.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateNotFound, UndefinedError

from domain.errors import QueryTemplateError

logger = logging.getLogger(__name__)


_PREFIXES = """\
PREFIX knora-api: <http://api.knora.org/ontology/knora-api/v2#>
PREFIX mls: <{{ ontology | iri }}/ontology/0807/mls/v2#>
"""

_LEMMA_CONSTRUCT = """\
CONSTRUCT {
    ?lemma knora-api:isMainResource true .
    ?lemma mls:hasLemmaText ?text .
    ?lemma mls:hasStartDate ?start .
    ?lemma mls:hasEndDate ?end .
}
"""

GRAVSEARCH_TEMPLATES: Dict[str, str] = {
    # Lemmata whose text starts with a given character (alphabetical index)
    "lemmata_query": _PREFIXES + _LEMMA_CONSTRUCT + """\
WHERE {
    ?lemma a mls:Lemma .
    ?lemma mls:hasLemmaText ?text .
    FILTER regex(?text, "^{{ start | regex_literal }}", "i")
    OPTIONAL { ?lemma mls:hasStartDate ?start . }
    OPTIONAL { ?lemma mls:hasEndDate ?end . }
}
ORDER BY ASC(?text)
OFFSET {{ page | default(0) | int }}
""",
    # Free-text search in lemmata, optionally restricted to one lexicon
    "lemmata_search": _PREFIXES + _LEMMA_CONSTRUCT + """\
WHERE {
    ?lemma a mls:Lemma .
    ?lemma mls:hasLemmaText ?text .
{% if lexicon_iri is defined %}
    ?article a mls:Article .
    ?article mls:hasALemma ?lemma .
    ?article mls:isInLexicon <{{ lexicon_iri | iri }}> .
{% endif %}
    FILTER regex(?text, "{{ searchterm | regex_literal }}", "i")
    OPTIONAL { ?lemma mls:hasStartDate ?start . }
    OPTIONAL { ?lemma mls:hasEndDate ?end . }
}
ORDER BY ASC(?text)
OFFSET {{ page | default(0) | int }}
""",
    "lexica": _PREFIXES + """\
CONSTRUCT {
    ?lexicon knora-api:isMainResource true .
    ?lexicon mls:hasShortname ?shortname .
    ?lexicon mls:hasCitationForm ?citation .
    ?lexicon mls:hasYear ?year .
}
WHERE {
    ?lexicon a mls:Lexicon .
    ?lexicon mls:hasShortname ?shortname .
    OPTIONAL { ?lexicon mls:hasCitationForm ?citation . }
    OPTIONAL { ?lexicon mls:hasYear ?year . }
}
ORDER BY ASC(?shortname)
OFFSET {{ page | default(0) | int }}
""",
    # Articles (and through them, lexica) that describe a lemma
    "lexica_from_lemma": _PREFIXES + """\
CONSTRUCT {
    ?article knora-api:isMainResource true .
    ?article mls:hasALemma ?lemma .
    ?article mls:isInLexicon ?lexicon .
}
WHERE {
    BIND(<{{ lemma_iri | iri }}> AS ?lemma)
    ?article a mls:Article .
    ?article mls:hasALemma ?lemma .
    ?article mls:isInLexicon ?lexicon .
}
OFFSET {{ page | default(0) | int }}
""",
}

_IRI_FORBIDDEN = re.compile(r'[\s<>"{}|\\^`]')


def sparql_literal(value: Any) -> str:
    """Escape a value for use inside a double-quoted SPARQL string literal."""
    text = str(value)
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def sparql_regex_literal(value: Any) -> str:
    """Escape a value as a literal regular expression inside a SPARQL string."""
    return sparql_literal(re.escape(str(value)))


def sparql_iri(value: Any) -> str:
    """Validate a value for use between angle brackets."""
    text = str(value)
    if not text or _IRI_FORBIDDEN.search(text):
        raise ValueError(f"Not a valid IRI: {text!r}")
    return text


class QueryTemplateResolver:
    """Renders named query templates. Stateless apart from the compiled templates."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None):
        self._env = Environment(
            loader=DictLoader(dict(templates or GRAVSEARCH_TEMPLATES)),
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["literal"] = sparql_literal
        self._env.filters["regex_literal"] = sparql_regex_literal
        self._env.filters["iri"] = sparql_iri

    def names(self) -> List[str]:
        return sorted(self._env.list_templates())

    def resolve(self, name: str, params: Mapping[str, Any]) -> str:
        """
        Render the query template with the given name.

        Raises:
            QueryTemplateError: If the template does not exist, a parameter it
                needs is missing, or an IRI parameter is malformed
        """
        try:
            template = self._env.get_template(name)
        except TemplateNotFound as e:
            raise QueryTemplateError(f"Unknown query template: {name}") from e

        try:
            query = template.render(**params)
        except UndefinedError as e:
            raise QueryTemplateError(f"Missing parameter for query {name}: {e}") from e
        except ValueError as e:
            raise QueryTemplateError(f"Invalid parameter for query {name}: {e}") from e

        logger.debug(f"Resolved query {name} with params {sorted(params)}")
        return query

    __call__ = resolve
