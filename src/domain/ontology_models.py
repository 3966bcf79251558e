"""Ontology domain models.

Two groups of models live here:

- the parsed upstream ontology (Ontology, ClassDefinition, ClassRestriction,
  PropertyDefinition), as delivered by the resource API
- the derived, human-readable class description (ClassDescriptor,
  PropertyDescriptor) the editing UI consumes
"""

from enum import Enum, IntEnum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Cardinality(IntEnum):
    """Upstream cardinality of a property on a resource class."""
    ONE = 0
    ZERO_OR_ONE = 1
    ZERO_OR_MANY = 2
    ONE_OR_MANY = 3


class CardinalityClass(str, Enum):
    """Human-readable cardinality classification."""
    EXACTLY_ONE = "exactly-one"
    ZERO_OR_ONE = "zero-or-one"
    ZERO_OR_MANY = "zero-or-many"
    ONE_OR_MANY = "one-or-many"

    @property
    def symbol(self) -> str:
        """Short form shown next to form fields ("1", "0-1", "0-n", "1-n")."""
        return _CARDINALITY_SYMBOLS[self]

    @property
    def allows_many(self) -> bool:
        return self in (CardinalityClass.ZERO_OR_MANY, CardinalityClass.ONE_OR_MANY)

    @property
    def is_required(self) -> bool:
        return self in (CardinalityClass.EXACTLY_ONE, CardinalityClass.ONE_OR_MANY)


_CARDINALITY_SYMBOLS = {
    CardinalityClass.EXACTLY_ONE: "1",
    CardinalityClass.ZERO_OR_ONE: "0-1",
    CardinalityClass.ZERO_OR_MANY: "0-n",
    CardinalityClass.ONE_OR_MANY: "1-n",
}

_CARDINALITY_CLASSES = {
    Cardinality.ONE: CardinalityClass.EXACTLY_ONE,
    Cardinality.ZERO_OR_ONE: CardinalityClass.ZERO_OR_ONE,
    Cardinality.ZERO_OR_MANY: CardinalityClass.ZERO_OR_MANY,
    Cardinality.ONE_OR_MANY: CardinalityClass.ONE_OR_MANY,
}


def classify_cardinality(cardinality: Cardinality) -> CardinalityClass:
    """Map an upstream cardinality to its classification."""
    return _CARDINALITY_CLASSES[Cardinality(cardinality)]


# ========================================
# Upstream ontology
# ========================================

class PropertyDefinition(BaseModel):
    """A property as defined in an ontology's property dictionary."""
    id: str = Field(..., description="Property IRI")
    label: Optional[str] = Field(None, description="Property label")
    comment: Optional[str] = Field(None, description="Property comment")
    subject_type: Optional[str] = Field(None, description="IRI of the subject class")
    object_type: Optional[str] = Field(None, description="IRI of the value type or target class")
    gui_element: Optional[str] = Field(None, description="GUI element hint")
    gui_attributes: List[str] = Field(default_factory=list, description="GUI element attributes")
    is_editable: bool = Field(False, description="Whether values of this property can be edited")
    is_link_property: bool = Field(False, description="Whether this property points at another resource")
    is_link_value_property: bool = Field(False, description="Whether this is the reified link value property")
    is_resource_property: bool = Field(False, description="Whether this property applies to resources")


class ClassRestriction(BaseModel):
    """A cardinality restriction of a class on one property."""
    property_iri: str
    cardinality: Cardinality
    gui_order: Optional[int] = None
    is_inherited: bool = False


class ClassDefinition(BaseModel):
    id: str = Field(..., description="Class IRI")
    label: Optional[str] = None
    comment: Optional[str] = None
    properties_list: List[ClassRestriction] = Field(default_factory=list)


class Ontology(BaseModel):
    """An ontology with its class and property dictionaries, keyed by IRI."""
    id: str = Field(..., description="Ontology IRI")
    label: Optional[str] = None
    classes: Dict[str, ClassDefinition] = Field(default_factory=dict)
    properties: Dict[str, PropertyDefinition] = Field(default_factory=dict)


# ========================================
# Derived descriptors
# ========================================

class PropertyDescriptor(BaseModel):
    """Schema metadata of one property of a resource class."""
    label: Optional[str] = None
    comment: Optional[str] = None
    cardinality: CardinalityClass
    gui_element: Optional[str] = None
    gui_attributes: List[str] = Field(default_factory=list)
    subject_type: Optional[str] = None
    object_type: Optional[str] = None
    is_editable: bool = False
    is_link_property: bool = False
    is_link_value_property: bool = False


class ClassDescriptor(BaseModel):
    """Schema metadata of a resource class, domain properties only."""
    id: str
    label: str = ""
    comment: str = ""
    properties: Dict[str, PropertyDescriptor] = Field(default_factory=dict)

    def editable_properties(self) -> Dict[str, PropertyDescriptor]:
        return {iri: p for iri, p in self.properties.items() if p.is_editable}
