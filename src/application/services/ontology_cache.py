"""
Ontology cache.

Fetches ontology descriptions once per ontology IRI and derives class
descriptors (cardinalities, editability, link semantics) from them.
Concurrent lookups of the same ontology share a single upstream fetch.
"""

import logging
from typing import Dict, Optional, Tuple

from domain.backend import ResourceBackend
from domain.errors import SchemaResolutionError, UpstreamError
from domain.ontology_models import (
    ClassDescriptor,
    Ontology,
    PropertyDescriptor,
    classify_cardinality,
)
from domain.vocabularies import is_reserved, namespace_of
from infrastructure.read_through_cache import ReadThroughCache

logger = logging.getLogger(__name__)


def describe_class(ontology: Ontology, class_iri: str) -> ClassDescriptor:
    """
    Build the descriptor of a class from a fetched ontology.

    Properties of the reserved base vocabularies are left out.

    Raises:
        SchemaResolutionError: If the class, or a property it restricts, is
            not defined in the ontology.
    """
    class_def = ontology.classes.get(class_iri)
    if class_def is None:
        raise SchemaResolutionError(
            f"Class {class_iri} is not defined in ontology {ontology.id}"
        )

    descriptor = ClassDescriptor(
        id=class_def.id,
        label=class_def.label or "",
        comment=class_def.comment or "",
    )

    for restriction in class_def.properties_list:
        property_iri = restriction.property_iri
        if is_reserved(property_iri):
            continue

        prop_def = ontology.properties.get(property_iri)
        if prop_def is None:
            raise SchemaResolutionError(
                f"Property {property_iri} of class {class_iri} "
                f"is not defined in ontology {ontology.id}"
            )

        descriptor.properties[property_iri] = PropertyDescriptor(
            label=prop_def.label,
            comment=prop_def.comment,
            cardinality=classify_cardinality(restriction.cardinality),
            gui_element=prop_def.gui_element,
            gui_attributes=list(prop_def.gui_attributes),
            subject_type=prop_def.subject_type,
            object_type=prop_def.object_type,
            is_editable=prop_def.is_editable,
            is_link_property=prop_def.is_link_property,
            is_link_value_property=prop_def.is_link_value_property,
        )

    return descriptor


class OntologyCache:
    """Memoizes ontologies per IRI and the class descriptors derived from them."""

    def __init__(self, backend: ResourceBackend):
        self._backend = backend
        self._ontologies: ReadThroughCache[str, Ontology] = ReadThroughCache(
            "ontology", backend.get_ontology
        )
        self._descriptors: Dict[Tuple[str, str], ClassDescriptor] = {}

    async def get_ontology(self, ontology_iri: str) -> Ontology:
        """
        Return the ontology with the given IRI, fetching it on first use.

        Raises:
            UpstreamError: If the resource API cannot deliver the ontology.
        """
        return await self._ontologies.get(ontology_iri)

    async def get_class_descriptor(self, ontology_iri: str, class_iri: str) -> ClassDescriptor:
        """
        Return the descriptor of a resource class.

        Args:
            ontology_iri: IRI of the ontology defining the class
            class_iri: IRI of the resource class

        Returns:
            ClassDescriptor with the class's domain properties

        Raises:
            SchemaResolutionError: If the ontology cannot be fetched or does not
                describe the class or one of its properties
        """
        key = (ontology_iri, class_iri)
        cached = self._descriptors.get(key)
        if cached is not None:
            return cached

        try:
            ontology = await self.get_ontology(ontology_iri)
        except UpstreamError as e:
            raise SchemaResolutionError(
                f"Ontology {ontology_iri} could not be fetched: {e}"
            ) from e

        descriptor = describe_class(ontology, class_iri)
        self._descriptors[key] = descriptor
        logger.debug(
            f"Described class {class_iri}: {len(descriptor.properties)} domain properties"
        )
        return descriptor

    async def get_property_label(self, property_iri: str) -> Optional[str]:
        """
        Return the label of a property as defined by the ontology that owns it.

        Properties of the reserved base vocabularies are not looked up.
        Returns None when the owning ontology does not define the property.

        Raises:
            UpstreamError: If the owning ontology cannot be fetched.
        """
        if is_reserved(property_iri):
            return None
        ontology = await self.get_ontology(namespace_of(property_iri))
        prop_def = ontology.properties.get(property_iri)
        return prop_def.label if prop_def is not None else None

    def is_cached(self, ontology_iri: str) -> bool:
        return ontology_iri in self._ontologies
