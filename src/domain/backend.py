from abc import ABC, abstractmethod
from typing import List

from domain.list_models import ListNode, ListTree
from domain.ontology_models import Ontology
from domain.resource_models import RawResource


class ResourceBackend(ABC):
    """
    Capability interface of the graph resource API.

    Implementations raise UpstreamError for any failure the API reports or
    any transport problem; they never return partial results silently.
    """

    @abstractmethod
    async def get_resource(self, iri: str) -> RawResource:
        """Fetch a single resource with all its values."""
        pass

    @abstractmethod
    async def get_ontology(self, iri: str) -> Ontology:
        """Fetch the description of one ontology (classes and properties)."""
        pass

    @abstractmethod
    async def search(self, query: str) -> List[RawResource]:
        """Run a query and return the matching resources."""
        pass

    @abstractmethod
    async def search_count(self, query: str) -> int:
        """Run a query and return the number of matching resources."""
        pass

    @abstractmethod
    async def login(self, identity_kind: str, identity: str, secret: str) -> str:
        """Authenticate and return the session token."""
        pass

    @abstractmethod
    async def logout(self) -> str:
        """End the session and return the server's status message."""
        pass

    @abstractmethod
    async def get_list_node(self, iri: str) -> ListNode:
        """Fetch a single list node (without its children)."""
        pass

    @abstractmethod
    async def get_list(self, iri: str) -> ListTree:
        """Fetch a complete list with all its nodes."""
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        pass
