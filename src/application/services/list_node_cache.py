"""Read-through caches for controlled-vocabulary nodes and whole lists."""

import logging

from domain.backend import ResourceBackend
from domain.list_models import ListNode, ListTree
from infrastructure.read_through_cache import ReadThroughCache

logger = logging.getLogger(__name__)


class ListNodeCache:
    """Memoizes list nodes and list trees per IRI, deduplicating in-flight fetches."""

    def __init__(self, backend: ResourceBackend):
        self._nodes: ReadThroughCache[str, ListNode] = ReadThroughCache(
            "list-node", backend.get_list_node
        )
        self._lists: ReadThroughCache[str, ListTree] = ReadThroughCache(
            "list", backend.get_list
        )

    async def get_list_node(self, node_iri: str) -> ListNode:
        """Return a single list node."""
        return await self._nodes.get(node_iri)

    async def get_list(self, list_iri: str) -> ListTree:
        """Return a complete list with all its nodes."""
        return await self._lists.get(list_iri)

    async def get_node_label(self, node_iri: str) -> str:
        """Return the label of a node, falling back to its IRI."""
        node = await self.get_list_node(node_iri)
        return node.label if node.label is not None else node_iri
