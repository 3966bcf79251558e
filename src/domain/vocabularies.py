"""Namespace constants of the resource API and the MLS lexicon ontology."""

KNORA_API = "http://api.knora.org/ontology/knora-api/v2#"
RDFS = "http://www.w3.org/2000/01/rdf-schema#"
OWL = "http://www.w3.org/2002/07/owl#"
SALSAH_GUI = "http://api.knora.org/ontology/salsah-gui/v2#"
SCHEMA_ORG = "http://schema.org/"

# Properties from these two vocabularies are structural, never domain properties
RESERVED_NAMESPACES = (
    "http://api.knora.org/ontology/knora-api/v2",
    "http://www.w3.org/2000/01/rdf-schema",
)

INCOMING_LINK_PROPERTY = KNORA_API + "hasIncomingLinkValue"

# Project 0807 is the MLS lexicon; the prefix is the tenant's ontology host
MLS_ONTOLOGY_PATH = "/ontology/0807/mls/v2#"


def namespace_of(iri: str) -> str:
    """Return the part of an IRI before its ``#`` fragment separator."""
    return iri.split("#", 1)[0]


def is_reserved(iri: str) -> bool:
    """Check if an IRI belongs to one of the reserved base vocabularies."""
    return namespace_of(iri) in RESERVED_NAMESPACES


def local_name(iri: str) -> str:
    """Return the fragment (or last path segment) of an IRI."""
    if "#" in iri:
        return iri.rsplit("#", 1)[1]
    return iri.rstrip("/").rsplit("/", 1)[-1]
