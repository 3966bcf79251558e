"""
Projected, UI-facing record shapes.

PropertyRecord and ListPropertyRecord keep one entry per source value in
parallel lists; LemmaView's FlatProperty collapses a property into its label
and string values for pages that address a fixed set of properties.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PropertyRecord:
    """A property of a resource with its values, index-aligned 1:1."""
    property_iri: str
    label: str
    values: List[str]
    ids: List[str]
    comments: List[Optional[str]]
    permissions: List[str]

    def __post_init__(self):
        lengths = {len(lst) for lst in self._parallel_lists()}
        if len(lengths) > 1:
            raise ValueError(
                f"Misaligned value lists for {self.property_iri}: "
                f"{[len(lst) for lst in self._parallel_lists()]}"
            )

    def _parallel_lists(self) -> List[list]:
        return [self.values, self.ids, self.comments, self.permissions]

    def __len__(self) -> int:
        return len(self.values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "property_iri": self.property_iri,
            "label": self.label,
            "values": list(self.values),
            "ids": list(self.ids),
            "comments": list(self.comments),
            "permissions": list(self.permissions),
        }


@dataclass
class ListPropertyRecord(PropertyRecord):
    """A property whose values are controlled-vocabulary nodes."""
    node_iris: List[str] = field(default_factory=list)

    def _parallel_lists(self) -> List[list]:
        return super()._parallel_lists() + [self.node_iris]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["node_iris"] = list(self.node_iris)
        return data


@dataclass
class FlatProperty:
    label: str
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "values": list(self.values)}


@dataclass
class ResourceView:
    """Generic projection of a resource (arbitrary property set)."""
    id: str
    label: str
    permission: str
    ark_url: Optional[str] = None
    properties: List[PropertyRecord] = field(default_factory=list)

    def get_property(self, property_iri: str) -> Optional[PropertyRecord]:
        for record in self.properties:
            if record.property_iri == property_iri:
                return record
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "permission": self.permission,
            "ark_url": self.ark_url,
            "properties": [record.to_dict() for record in self.properties],
        }


@dataclass
class LemmaView:
    """Flat projection of a resource whose schema the caller knows."""
    id: str
    label: str
    permission: str
    ark_url: Optional[str] = None
    properties: Dict[str, FlatProperty] = field(default_factory=dict)

    def first(self, property_iri: str) -> Optional[str]:
        """Return the first value of a property, or None if absent."""
        prop = self.properties.get(property_iri)
        if prop is None or not prop.values:
            return None
        return prop.values[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "permission": self.permission,
            "ark_url": self.ark_url,
            "properties": {iri: prop.to_dict() for iri, prop in self.properties.items()},
        }
