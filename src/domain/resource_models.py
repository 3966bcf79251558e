"""
Domain models for raw resources as delivered by the resource API.

A resource carries a label, the current user's permission and an ordered
mapping from property IRI to its values. Values are a closed set of variants,
one per value kind, each carrying its kind-specific payload:

- TextValue: plain text
- ListNodeValue: a node of a controlled vocabulary (hierarchical list)
- LinkValue: a reference to another resource
- OtherValue: any other upstream value type, kept as its string rendering
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Union


class ValueKind(str, Enum):
    """Value kinds the projection layer distinguishes."""
    TEXT = "text"
    VOCABULARY_NODE = "vocabulary-node"
    LINK = "link"
    OTHER = "other"


class Permission(str, Enum):
    """Permission codes of the current user on a resource or value."""
    RESTRICTED_VIEW = "RV"
    VIEW = "V"
    MODIFY = "M"
    DELETE = "D"
    CHANGE_RIGHTS = "CR"

    @classmethod
    def grants_edit(cls, code: Optional[str]) -> bool:
        """Check if a permission code allows editing (M, D or CR)."""
        return code in EDIT_PERMISSIONS


EDIT_PERMISSIONS = frozenset({
    Permission.MODIFY.value,
    Permission.DELETE.value,
    Permission.CHANGE_RIGHTS.value,
})


@dataclass(frozen=True)
class ResourceValue:
    """Fields shared by every value variant."""
    id: str
    permission: str = ""
    comment: Optional[str] = None
    property_label: Optional[str] = None

    kind: ClassVar[ValueKind] = ValueKind.OTHER

    def as_string(self) -> str:
        """Return the generic string rendering of the value."""
        raise NotImplementedError


@dataclass(frozen=True)
class TextValue(ResourceValue):
    text: str = ""

    kind: ClassVar[ValueKind] = ValueKind.TEXT

    def as_string(self) -> str:
        return self.text


@dataclass(frozen=True)
class ListNodeValue(ResourceValue):
    """Value pointing at a controlled-vocabulary node.

    The node label is not part of the resource payload; it is filled in from
    the list node cache and falls back to the node IRI while unknown.
    """
    node_iri: str = ""
    node_label: Optional[str] = None

    kind: ClassVar[ValueKind] = ValueKind.VOCABULARY_NODE

    def as_string(self) -> str:
        return self.node_label if self.node_label is not None else self.node_iri


@dataclass(frozen=True)
class LinkValue(ResourceValue):
    linked_resource_iri: str = ""
    linked_resource_label: Optional[str] = None

    kind: ClassVar[ValueKind] = ValueKind.LINK

    def as_string(self) -> str:
        if self.linked_resource_label is not None:
            return self.linked_resource_label
        return self.linked_resource_iri


@dataclass(frozen=True)
class OtherValue(ResourceValue):
    value_type: str = ""
    text: str = ""

    kind: ClassVar[ValueKind] = ValueKind.OTHER

    def as_string(self) -> str:
        return self.text


AnyValue = Union[TextValue, ListNodeValue, LinkValue, OtherValue]


@dataclass
class RawResource:
    """
    A resource record fetched from the backing store.

    Properties keep the order in which the payload listed them; each value
    list keeps the upstream value order.
    """
    id: str
    label: str = ""
    permission: str = ""
    ark_url: Optional[str] = None
    resource_class: Optional[str] = None
    properties: Dict[str, List[AnyValue]] = field(default_factory=dict)

    def get_values(self, property_iri: str) -> List[AnyValue]:
        """Return the values of a property (empty if the property is absent)."""
        return self.properties.get(property_iri, [])

    def first_value(self, property_iri: str) -> Optional[AnyValue]:
        values = self.get_values(property_iri)
        return values[0] if values else None

    def property_iris(self) -> List[str]:
        """Return the IRIs of all properties that carry at least one value."""
        return [iri for iri, values in self.properties.items() if values]
