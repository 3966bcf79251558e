"""
Parsers for resource API payloads.

The v2 routes answer in compacted JSON-LD: keys and type names are compact
IRIs ("knora-api:TextValue") that expand through the document's @context.
The admin list route answers in plain JSON.
"""

import logging
from typing import Any, Dict, List, Optional

from domain.errors import UpstreamError
from domain.list_models import ListInfo, ListNode, ListTree
from domain.ontology_models import (
    Cardinality,
    ClassDefinition,
    ClassRestriction,
    Ontology,
    PropertyDefinition,
)
from domain.resource_models import (
    AnyValue,
    LinkValue,
    ListNodeValue,
    OtherValue,
    RawResource,
    TextValue,
)
from domain.vocabularies import KNORA_API, OWL, RDFS, SALSAH_GUI, SCHEMA_ORG

logger = logging.getLogger(__name__)

Context = Dict[str, Any]

_TEXT_VALUE = KNORA_API + "TextValue"
_LIST_VALUE = KNORA_API + "ListValue"
_LINK_VALUE = KNORA_API + "LinkValue"

# Literal keys tried in order when rendering a value of any other type
_VALUE_LITERAL_KEYS = (
    "valueAsString",
    "intValueAsInt",
    "decimalValueAsDecimal",
    "booleanValueAsBoolean",
    "uriValueAsUri",
    "colorValueAsColor",
    "geonameValueAsGeonameCode",
    "timeValueAsTimeStamp",
)


# ========================================
# JSON-LD helpers
# ========================================

def expand_iri(term: str, context: Context) -> str:
    """Expand a compact IRI ("prefix:local") using a JSON-LD context."""
    if not isinstance(term, str) or term.startswith("@") or "://" in term:
        return term
    if ":" in term:
        prefix, local = term.split(":", 1)
        namespace = context.get(prefix)
        if isinstance(namespace, str):
            return namespace + local
    return term


def expand_keys(node: Dict[str, Any], context: Context) -> Dict[str, Any]:
    """Return a copy of a JSON-LD node with all keys expanded."""
    return {expand_iri(key, context): value for key, value in node.items()}


def as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def literal(value: Any) -> Any:
    """Unwrap a JSON-LD literal ({"@value": ...}) to its plain value."""
    if isinstance(value, dict):
        return value.get("@value")
    return value


def ref(value: Any, context: Context) -> Optional[str]:
    """Return the expanded @id of a node reference, if any."""
    if isinstance(value, dict) and "@id" in value:
        return expand_iri(value["@id"], context)
    if isinstance(value, str):
        return expand_iri(value, context)
    return None


def _text(value: Any) -> Optional[str]:
    """Render a plain or language-tagged literal as text."""
    if isinstance(value, list):
        value = value[0] if value else None
    value = literal(value)
    return None if value is None else str(value)


def _graph(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the nodes of a document: its @graph, or the document itself."""
    if "@graph" in data:
        return [node for node in as_list(data["@graph"]) if isinstance(node, dict)]
    if "@id" in data:
        return [data]
    return []


# ========================================
# Resources
# ========================================

def _is_value_node(node: Any, context: Context) -> bool:
    if not isinstance(node, dict) or "@type" not in node:
        return False
    type_iri = expand_iri(node["@type"], context)
    return isinstance(type_iri, str) and type_iri.startswith(KNORA_API) and type_iri.endswith("Value")


def parse_value(node: Dict[str, Any], context: Context) -> AnyValue:
    """Parse one value node into its value variant."""
    data = expand_keys(node, context)
    type_iri = expand_iri(node["@type"], context)
    common = {
        "id": expand_iri(node.get("@id", ""), context),
        "permission": data.get(KNORA_API + "userHasPermission", ""),
        "comment": _text(data.get(KNORA_API + "valueHasComment")),
    }

    if type_iri == _TEXT_VALUE:
        text = (
            _text(data.get(KNORA_API + "valueAsString"))
            or _text(data.get(KNORA_API + "textValueAsXml"))
            or _text(data.get(KNORA_API + "textValueAsHtml"))
            or ""
        )
        return TextValue(text=text, **common)

    if type_iri == _LIST_VALUE:
        node_ref = data.get(KNORA_API + "listValueAsListNode")
        node_label = None
        if isinstance(node_ref, dict):
            node_label = _text(expand_keys(node_ref, context).get(RDFS + "label"))
        return ListNodeValue(
            node_iri=ref(node_ref, context) or "",
            node_label=node_label,
            **common,
        )

    if type_iri == _LINK_VALUE:
        target = None
        for key in ("linkValueHasTarget", "linkValueHasTargetIri",
                    "linkValueHasSource", "linkValueHasSourceIri"):
            target = data.get(KNORA_API + key)
            if target is not None:
                break
        target_label = None
        if isinstance(target, dict):
            target_label = _text(expand_keys(target, context).get(RDFS + "label"))
        return LinkValue(
            linked_resource_iri=ref(target, context) or "",
            linked_resource_label=target_label,
            **common,
        )

    text = ""
    for key in _VALUE_LITERAL_KEYS:
        if KNORA_API + key in data:
            text = _text(data[KNORA_API + key]) or ""
            break
    return OtherValue(value_type=type_iri, text=text, **common)


def parse_resource(node: Dict[str, Any], context: Context) -> RawResource:
    """Parse one resource node. Keys whose values are not value nodes are metadata."""
    data = expand_keys(node, context)
    resource = RawResource(
        id=expand_iri(node.get("@id", ""), context),
        label=_text(data.get(RDFS + "label")) or "",
        permission=data.get(KNORA_API + "userHasPermission", ""),
        ark_url=_text(data.get(KNORA_API + "arkUrl")),
        resource_class=ref(node.get("@type"), context),
    )

    for key, raw in data.items():
        if key.startswith("@"):
            continue
        nodes = as_list(raw)
        if not nodes or not all(_is_value_node(n, context) for n in nodes):
            continue
        resource.properties[key] = [parse_value(n, context) for n in nodes]

    return resource


def parse_resources(data: Dict[str, Any]) -> List[RawResource]:
    """Parse a single-resource or multi-resource (@graph) document."""
    context = data.get("@context", {})
    return [parse_resource(node, context) for node in _graph(data)]


def parse_count(data: Dict[str, Any]) -> int:
    context = data.get("@context", {})
    expanded = expand_keys(data, context)
    count = literal(expanded.get(SCHEMA_ORG + "numberOfItems"))
    if count is None:
        raise UpstreamError("Count response without numberOfItems", payload=data)
    return int(count)


# ========================================
# Ontologies
# ========================================

def _parse_restriction(node: Dict[str, Any], context: Context) -> Optional[ClassRestriction]:
    data = expand_keys(node, context)
    property_iri = ref(data.get(OWL + "onProperty"), context)
    if property_iri is None:
        return None

    if OWL + "cardinality" in data:
        cardinality = Cardinality.ONE
        bound = literal(data[OWL + "cardinality"])
    elif OWL + "maxCardinality" in data:
        cardinality = Cardinality.ZERO_OR_ONE
        bound = literal(data[OWL + "maxCardinality"])
    elif OWL + "minCardinality" in data:
        bound = literal(data[OWL + "minCardinality"])
        cardinality = Cardinality.ZERO_OR_MANY if int(bound) == 0 else Cardinality.ONE_OR_MANY
    else:
        raise UpstreamError(f"Restriction on {property_iri} has no cardinality", payload=node)

    if int(bound) not in (0, 1):
        raise UpstreamError(f"Unsupported cardinality {bound} on {property_iri}", payload=node)

    gui_order = literal(data.get(SALSAH_GUI + "guiOrder"))
    return ClassRestriction(
        property_iri=property_iri,
        cardinality=cardinality,
        gui_order=int(gui_order) if gui_order is not None else None,
        is_inherited=bool(literal(data.get(KNORA_API + "isInherited", False))),
    )


def _parse_class(node: Dict[str, Any], context: Context) -> ClassDefinition:
    data = expand_keys(node, context)
    restrictions = []
    for parent in as_list(data.get(RDFS + "subClassOf")):
        if not isinstance(parent, dict):
            continue
        if expand_iri(parent.get("@type", ""), context) != OWL + "Restriction":
            continue
        restriction = _parse_restriction(parent, context)
        if restriction is None:
            logger.warning(f"Skipping restriction without owl:onProperty on {node.get('@id')}")
            continue
        restrictions.append(restriction)
    return ClassDefinition(
        id=expand_iri(node["@id"], context),
        label=_text(data.get(RDFS + "label")),
        comment=_text(data.get(RDFS + "comment")),
        properties_list=restrictions,
    )


def _parse_property(node: Dict[str, Any], context: Context) -> PropertyDefinition:
    data = expand_keys(node, context)
    return PropertyDefinition(
        id=expand_iri(node["@id"], context),
        label=_text(data.get(RDFS + "label")),
        comment=_text(data.get(RDFS + "comment")),
        subject_type=ref(data.get(KNORA_API + "subjectType"), context),
        object_type=ref(data.get(KNORA_API + "objectType"), context),
        gui_element=ref(data.get(SALSAH_GUI + "guiElement"), context),
        gui_attributes=[str(literal(a)) for a in as_list(data.get(SALSAH_GUI + "guiAttribute"))],
        is_editable=bool(literal(data.get(KNORA_API + "isEditable", False))),
        is_link_property=bool(literal(data.get(KNORA_API + "isLinkProperty", False))),
        is_link_value_property=bool(literal(data.get(KNORA_API + "isLinkValueProperty", False))),
        is_resource_property=bool(literal(data.get(KNORA_API + "isResourceProperty", False))),
    )


_CLASS_TYPES = {OWL + "Class"}
_PROPERTY_TYPES = {OWL + "ObjectProperty", OWL + "DatatypeProperty", OWL + "AnnotationProperty"}


def parse_ontology(data: Dict[str, Any], ontology_iri: str) -> Ontology:
    """Parse an "allentities" ontology document."""
    context = data.get("@context", {})
    expanded = expand_keys(data, context)
    ontology = Ontology(
        id=expand_iri(data.get("@id", ontology_iri), context),
        label=_text(expanded.get(RDFS + "label")),
    )

    for node in as_list(data.get("@graph")):
        if not isinstance(node, dict) or "@id" not in node:
            continue
        types = {expand_iri(t, context) for t in as_list(node.get("@type"))}
        if types & _CLASS_TYPES:
            class_def = _parse_class(node, context)
            ontology.classes[class_def.id] = class_def
        elif types & _PROPERTY_TYPES:
            prop_def = _parse_property(node, context)
            ontology.properties[prop_def.id] = prop_def
        else:
            logger.debug(f"Skipping ontology entity {node['@id']} of type {types}")

    return ontology


# ========================================
# Lists
# ========================================

def parse_list_node_v2(data: Dict[str, Any]) -> ListNode:
    """Parse a node document of the v2 node route."""
    context = data.get("@context", {})
    expanded = expand_keys(data, context)
    position = literal(expanded.get(KNORA_API + "listNodePosition"))
    return ListNode(
        id=expand_iri(data.get("@id", ""), context),
        label=_text(expanded.get(RDFS + "label")),
        position=int(position) if position is not None else None,
        root_node=ref(expanded.get(KNORA_API + "hasRootNode"), context),
        comments=[str(literal(c)) for c in as_list(expanded.get(RDFS + "comment"))],
    )


def _string_literals(items: Any) -> Dict[str, str]:
    """Turn [{"value": ..., "language": ...}] into language -> value."""
    result: Dict[str, str] = {}
    for item in as_list(items):
        if isinstance(item, dict) and "value" in item:
            result[item.get("language") or ""] = item["value"]
    return result


def _parse_admin_node(data: Dict[str, Any]) -> ListNode:
    labels = _string_literals(data.get("labels"))
    return ListNode(
        id=data.get("id", ""),
        label=next(iter(labels.values()), None),
        name=data.get("name"),
        position=data.get("position"),
        root_node=data.get("hasRootNode"),
        labels=labels,
        comments=list(_string_literals(data.get("comments")).values()),
        children=[_parse_admin_node(child) for child in as_list(data.get("children"))],
    )


def parse_list_response(data: Dict[str, Any]) -> ListTree:
    """Parse a full list from the admin list route."""
    body = data.get("list", data)
    info = body.get("listinfo") or {}
    if not info.get("id"):
        raise UpstreamError("List response without listinfo", payload=data)
    return ListTree(
        info=ListInfo(
            id=info["id"],
            project_iri=info.get("projectIri"),
            name=info.get("name"),
            labels=_string_literals(info.get("labels")),
            comments=_string_literals(info.get("comments")),
        ),
        children=[_parse_admin_node(child) for child in as_list(body.get("children"))],
    )
