"""Resource projection.

Turns raw resources into the record shapes pages consume:

- project_generic: one PropertyRecord per property, per-value ids, comments
  and permissions kept index-aligned
- project_flat: property IRI -> label + string values, for pages that know
  the resource's schema
- project_search_rows: one row per search hit, columns in the order of the
  requested fields

All functions are pure. Properties without values are skipped everywhere.
Missing labels become '?'; unknown value kinds take the text path.
"""

import logging
from typing import Dict, List, Optional, Sequence

from domain.projection_models import (
    FlatProperty,
    LemmaView,
    ListPropertyRecord,
    PropertyRecord,
    ResourceView,
)
from domain.resource_models import (
    AnyValue,
    LinkValue,
    ListNodeValue,
    RawResource,
    TextValue,
    ValueKind,
)
from domain.vocabularies import INCOMING_LINK_PROPERTY

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "?"

# Pseudo-fields of search rows that resolve to resource metadata
FIELD_ID = "id"
FIELD_ARK_URL = "arkUrl"
FIELD_LABEL = "label"


def _property_label(values: Sequence[AnyValue]) -> str:
    return values[0].property_label or UNKNOWN_LABEL


def _text_of(value: AnyValue) -> str:
    if isinstance(value, TextValue):
        return value.text
    return value.as_string()


def _node_label_of(value: AnyValue) -> str:
    if isinstance(value, ListNodeValue):
        return value.node_label if value.node_label is not None else value.node_iri
    return value.as_string()


def _node_iri_of(value: AnyValue) -> str:
    return value.node_iri if isinstance(value, ListNodeValue) else ""


def _link_target_of(value: AnyValue) -> str:
    if isinstance(value, LinkValue):
        return value.linked_resource_iri
    return value.as_string()


def _project_property(property_iri: str, values: Sequence[AnyValue]) -> PropertyRecord:
    """Build the record of one property, dispatching on its first value's kind."""
    label = _property_label(values)
    ids = [v.id for v in values]
    comments = [v.comment for v in values]
    permissions = [v.permission for v in values]

    kind = values[0].kind
    if kind is ValueKind.VOCABULARY_NODE:
        return ListPropertyRecord(
            property_iri=property_iri,
            label=label,
            values=[_node_label_of(v) for v in values],
            ids=ids,
            comments=comments,
            permissions=permissions,
            node_iris=[_node_iri_of(v) for v in values],
        )
    if kind is ValueKind.LINK:
        rendered = [_link_target_of(v) for v in values]
    else:
        # TEXT, and OTHER as the fallback for value types we do not model
        rendered = [_text_of(v) for v in values]

    return PropertyRecord(
        property_iri=property_iri,
        label=label,
        values=rendered,
        ids=ids,
        comments=comments,
        permissions=permissions,
    )


def project_generic(resource: RawResource) -> List[PropertyRecord]:
    """Project every non-empty property of a resource into a PropertyRecord."""
    records: List[PropertyRecord] = []
    for property_iri, values in resource.properties.items():
        if not values:
            continue
        records.append(_project_property(property_iri, values))
    return records


def project_flat(resource: RawResource) -> Dict[str, FlatProperty]:
    """Project a resource into a property IRI -> FlatProperty mapping."""
    flat: Dict[str, FlatProperty] = {}
    for property_iri, values in resource.properties.items():
        if not values:
            continue
        flat[property_iri] = FlatProperty(
            label=_property_label(values),
            values=[v.as_string() for v in values],
        )
    return flat


def project_resource(resource: RawResource) -> ResourceView:
    return ResourceView(
        id=resource.id,
        label=resource.label,
        permission=resource.permission,
        ark_url=resource.ark_url,
        properties=project_generic(resource),
    )


def project_lemma(resource: RawResource) -> LemmaView:
    return LemmaView(
        id=resource.id,
        label=resource.label,
        permission=resource.permission,
        ark_url=resource.ark_url,
        properties=project_flat(resource),
    )


def project_search_rows(
    resources: Sequence[Optional[RawResource]],
    fields: Sequence[str],
) -> List[List[Optional[str]]]:
    """
    Project search hits into rows of strings.

    Args:
        resources: Search hits, in result order. None entries are tolerated.
        fields: Requested columns: "id", "arkUrl", "label" or property IRIs.

    Returns:
        One row per hit with len(fields) slots in the order of fields. A slot
        stays None when the hit has nothing for that field, so callers can tell
        "absent" from "present but empty".
    """
    positions: Dict[str, int] = {}
    for index, name in enumerate(fields):
        positions.setdefault(name, index)

    rows: List[List[Optional[str]]] = []
    for resource in resources:
        row: List[Optional[str]] = [None] * len(fields)
        if resource is None:
            rows.append(row)
            continue

        if FIELD_ARK_URL in positions:
            row[positions[FIELD_ARK_URL]] = resource.ark_url
        if FIELD_ID in positions:
            row[positions[FIELD_ID]] = resource.id
        if FIELD_LABEL in positions:
            row[positions[FIELD_LABEL]] = resource.label

        for property_iri, values in resource.properties.items():
            index = positions.get(property_iri)
            if index is None or not values:
                continue
            if property_iri == INCOMING_LINK_PROPERTY:
                row[index] = _link_target_of(values[0])
            else:
                row[index] = values[0].as_string()

        rows.append(row)

    logger.debug(f"Projected {len(rows)} search rows over {len(fields)} fields")
    return rows
