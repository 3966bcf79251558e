"""Shared fixtures: sample resources, ontologies and a mocked resource API."""

from unittest.mock import AsyncMock

import pytest

from config.settings import Settings
from domain.backend import ResourceBackend
from domain.list_models import ListInfo, ListNode, ListTree
from domain.ontology_models import (
    Cardinality,
    ClassDefinition,
    ClassRestriction,
    Ontology,
    PropertyDefinition,
)
from domain.resource_models import ListNodeValue, RawResource, TextValue
from domain.vocabularies import KNORA_API, RDFS

MLS = "http://0.0.0.0:3333/ontology/0807/mls/v2#"
MLS_ONTOLOGY = "http://0.0.0.0:3333/ontology/0807/mls/v2"
LEMMA_IRI = "http://rdfh.ch/0807/lemma-smith"


@pytest.fixture
def settings():
    return Settings(
        protocol="http",
        servername="localhost",
        port=3333,
        ontology_prefix="http://0.0.0.0:3333",
    )


@pytest.fixture
def lemma_resource():
    """A lemma with a text property and a vocabulary-node property."""
    return RawResource(
        id=LEMMA_IRI,
        label="Smith, John",
        permission="M",
        ark_url="http://ark.dasch.swiss/ark:/72163/1/0807/smith",
        resource_class=MLS + "Lemma",
        properties={
            MLS + "hasFamilyName": [
                TextValue(id="v1", permission="V", comment=None,
                          property_label="Family name", text="Smith"),
            ],
            MLS + "hasLemmaType": [
                ListNodeValue(id="v2", permission="M", property_label="Lemma type",
                              node_iri="n1", node_label="Poet"),
            ],
        },
    )


@pytest.fixture
def mls_ontology():
    """The MLS ontology with a Lemma class."""
    return Ontology(
        id=MLS_ONTOLOGY,
        label="MLS",
        classes={
            MLS + "Lemma": ClassDefinition(
                id=MLS + "Lemma",
                label="Lemma",
                comment="A biographical entry",
                properties_list=[
                    ClassRestriction(property_iri=MLS + "hasLemmaText", cardinality=Cardinality.ONE),
                    ClassRestriction(property_iri=MLS + "hasVariants", cardinality=Cardinality.ZERO_OR_MANY),
                    ClassRestriction(property_iri=MLS + "hasLemmaType", cardinality=Cardinality.ZERO_OR_ONE),
                    ClassRestriction(property_iri=MLS + "hasLexiconValue", cardinality=Cardinality.ONE_OR_MANY),
                    ClassRestriction(property_iri=KNORA_API + "hasIncomingLinkValue",
                                     cardinality=Cardinality.ZERO_OR_MANY, is_inherited=True),
                    ClassRestriction(property_iri=RDFS + "label", cardinality=Cardinality.ONE,
                                     is_inherited=True),
                ],
            ),
            MLS + "Broken": ClassDefinition(
                id=MLS + "Broken",
                properties_list=[
                    ClassRestriction(property_iri=MLS + "hasNothing", cardinality=Cardinality.ONE),
                ],
            ),
        },
        properties={
            MLS + "hasLemmaText": PropertyDefinition(
                id=MLS + "hasLemmaText", label="Lemma text",
                subject_type=MLS + "Lemma", object_type=KNORA_API + "TextValue",
                gui_element="http://api.knora.org/ontology/salsah-gui/v2#SimpleText",
                gui_attributes=["size=80"], is_editable=True, is_resource_property=True,
            ),
            MLS + "hasVariants": PropertyDefinition(
                id=MLS + "hasVariants", label="Variants", is_editable=True,
            ),
            MLS + "hasLemmaType": PropertyDefinition(
                id=MLS + "hasLemmaType", label="Lemma type",
                object_type=KNORA_API + "ListValue", is_editable=True,
            ),
            MLS + "hasLexiconValue": PropertyDefinition(
                id=MLS + "hasLexiconValue", label="Lexicon",
                object_type=KNORA_API + "LinkValue", is_editable=True,
                is_link_value_property=True,
            ),
        },
    )


@pytest.fixture
def lemma_type_list():
    poet = ListNode(id="n1", label="Poet", position=0, root_node="root")
    painter = ListNode(id="n2", label="Painter", position=1, root_node="root")
    return ListTree(
        info=ListInfo(id="root", name="lemmaTypes", labels={"de": "Lemmatypen"}),
        children=[poet, painter],
    )


@pytest.fixture
def mock_backend(mls_ontology, lemma_resource, lemma_type_list):
    """Mock resource API answering with the sample data."""
    backend = AsyncMock(spec=ResourceBackend)
    backend.get_resource.return_value = lemma_resource
    backend.get_ontology.return_value = mls_ontology
    backend.search.return_value = [lemma_resource]
    backend.search_count.return_value = 1
    backend.login.return_value = "token-123"
    backend.logout.return_value = "Logout OK"
    backend.get_list_node.side_effect = lambda iri: lemma_type_list.find(iri) or ListNode(id=iri)
    backend.get_list.return_value = lemma_type_list
    return backend
