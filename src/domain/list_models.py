"""
Domain models for controlled vocabularies (hierarchical lists).

A list is a tree of nodes below a root; list-typed property values point at
one of its nodes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class ListNode:
    """A node of a controlled vocabulary."""
    id: str
    label: Optional[str] = None
    name: Optional[str] = None
    position: Optional[int] = None
    root_node: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)  # language -> label
    comments: List[str] = field(default_factory=list)
    children: List["ListNode"] = field(default_factory=list)

    def label_for(self, language: Optional[str] = None) -> Optional[str]:
        """Return the label in the given language, or the default label."""
        if language and language in self.labels:
            return self.labels[language]
        return self.label

    def walk(self) -> Iterator["ListNode"]:
        """Yield this node and all its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "name": self.name,
            "position": self.position,
            "root_node": self.root_node,
            "labels": dict(self.labels),
            "comments": list(self.comments),
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class ListInfo:
    id: str
    project_iri: Optional[str] = None
    name: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)
    comments: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_iri": self.project_iri,
            "name": self.name,
            "labels": dict(self.labels),
            "comments": dict(self.comments),
        }


@dataclass
class ListTree:
    """A complete list: its metadata and its top-level nodes."""
    info: ListInfo
    children: List[ListNode] = field(default_factory=list)

    def walk(self) -> Iterator[ListNode]:
        for child in self.children:
            yield from child.walk()

    def find(self, node_iri: str) -> Optional[ListNode]:
        """Return the node with the given IRI, or None."""
        for node in self.walk():
            if node.id == node_iri:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "info": self.info.to_dict(),
            "children": [child.to_dict() for child in self.children],
        }
