"""Lexicon Service.

Entry point for pages browsing and editing the lexicon. Fetches resources
through the resource API, completes what the payload leaves out (property
labels from the ontology cache, list node labels from the list node cache)
and hands the result to the projection functions.

Usage:
    service = LexiconService(backend, settings, ontology_cache, list_cache,
                             templates, session)
    lemma = await service.get_lemma(iri)
    rows = await service.search("lemmata_query", {"start": "A"}, fields)
"""

import dataclasses
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from config.settings import Settings
from domain.backend import ResourceBackend
from domain.list_models import ListNode, ListTree
from domain.ontology_models import ClassDescriptor, Ontology
from domain.projection_models import LemmaView, ResourceView
from domain.resource_models import AnyValue, ListNodeValue, RawResource
from domain.vocabularies import is_reserved
from application.services.list_node_cache import ListNodeCache
from application.services.ontology_cache import OntologyCache
from application.services.query_templates import QueryTemplateResolver
from application.services.resource_projection import (
    project_lemma,
    project_resource,
    project_search_rows,
)
from application.services.session_service import SessionService

logger = logging.getLogger(__name__)


class LexiconService:
    """Resource, ontology, list and search access with projection to page records."""

    def __init__(
        self,
        backend: ResourceBackend,
        settings: Settings,
        ontology_cache: OntologyCache,
        list_cache: ListNodeCache,
        templates: QueryTemplateResolver,
        session: SessionService,
        resolve_labels: bool = True,
    ):
        """
        Initialize the lexicon service.

        Args:
            backend: Resource API
            settings: Connection settings (provides the ontology prefix)
            ontology_cache: Cache used for class descriptors and property labels
            list_cache: Cache used for list nodes and list node labels
            templates: Query template resolver
            session: Session service of this client
            resolve_labels: Fill missing property and node labels before projecting
        """
        self.backend = backend
        self.settings = settings
        self.ontology_cache = ontology_cache
        self.list_cache = list_cache
        self.templates = templates
        self.session = session
        self.resolve_labels = resolve_labels

    @property
    def mls_ontology(self) -> str:
        return self.settings.mls_ontology

    def mls(self, local_name: str) -> str:
        """Return the full IRI of an MLS ontology entity (e.g., "Lemma")."""
        return self.mls_ontology + local_name

    # ========================================
    # Resources
    # ========================================

    async def fetch_resource(self, iri: str) -> RawResource:
        """Fetch a resource and complete its labels."""
        resource = await self.backend.get_resource(iri)
        if self.resolve_labels:
            resource = await self._complete_labels(resource)
        return resource

    async def get_resource(self, iri: str) -> ResourceView:
        """Fetch a resource and project all its properties generically."""
        return project_resource(await self.fetch_resource(iri))

    async def get_lemma(self, iri: str) -> LemmaView:
        """Fetch a resource of known schema and project it to a flat map."""
        return project_lemma(await self.fetch_resource(iri))

    async def _complete_labels(self, resource: RawResource) -> RawResource:
        properties: Dict[str, List[AnyValue]] = {}
        for property_iri, values in resource.properties.items():
            if not values:
                properties[property_iri] = values
                continue

            label: Optional[str] = None
            if any(v.property_label is None for v in values) and not is_reserved(property_iri):
                label = await self.ontology_cache.get_property_label(property_iri)

            completed: List[AnyValue] = []
            for value in values:
                if label is not None and value.property_label is None:
                    value = dataclasses.replace(value, property_label=label)
                if isinstance(value, ListNodeValue) and value.node_label is None and value.node_iri:
                    node_label = await self.list_cache.get_node_label(value.node_iri)
                    value = dataclasses.replace(value, node_label=node_label)
                completed.append(value)
            properties[property_iri] = completed

        return dataclasses.replace(resource, properties=properties)

    # ========================================
    # Ontology
    # ========================================

    async def get_ontology(self, ontology_iri: str) -> Ontology:
        return await self.ontology_cache.get_ontology(ontology_iri)

    async def get_resinfo(self, ontology_iri: str, class_iri: str) -> ClassDescriptor:
        """Return the descriptor of a resource class (see OntologyCache)."""
        return await self.ontology_cache.get_class_descriptor(ontology_iri, class_iri)

    # ========================================
    # Search
    # ========================================

    def _query(self, query_name: str, params: Mapping[str, Any]) -> str:
        # The caller's mapping is left untouched
        resolved_params = dict(params)
        resolved_params["ontology"] = self.settings.ontology_prefix
        return self.templates.resolve(query_name, resolved_params)

    async def search_resources(self, query_name: str, params: Mapping[str, Any]) -> List[RawResource]:
        """Run a named query and return the raw resources."""
        return await self.backend.search(self._query(query_name, params))

    async def search(
        self,
        query_name: str,
        params: Mapping[str, Any],
        fields: Sequence[str],
    ) -> List[List[Optional[str]]]:
        """Run a named query and project the hits into rows for the given fields."""
        resources = await self.search_resources(query_name, params)
        return project_search_rows(resources, fields)

    async def search_count(self, query_name: str, params: Mapping[str, Any]) -> int:
        """Return the number of hits of a named query."""
        return await self.backend.search_count(self._query(query_name, params))

    # ========================================
    # Lists
    # ========================================

    async def get_list_node(self, node_iri: str) -> ListNode:
        return await self.list_cache.get_list_node(node_iri)

    async def get_list(self, list_iri: str) -> ListTree:
        return await self.list_cache.get_list(list_iri)
