# Relationship endpoints: /{type}/{id}/relationships/{relationship}
#
# https://jsonapi.org/format/#fetching-relationships
# https://jsonapi.org/format/#crud-updating-relationships
#
# The linkage is read from the foreign keys:
# - to-many: all target rows whose foreign key equals the parent id
# - has-one: the first target row whose foreign key equals the parent id
# - belongs-to: the target row referenced by the foreign key of the parent
#
# Updates replace the linkage completely. The to-many update clears the foreign key
# of the current targets before setting it on the new targets, this happens in two
# statements. Identifiers of rows that don't exist are skipped.
#
# pylint: disable=redefined-builtin,invalid-name
import saja
from . import db
from .builder import build_identifier
from .errors import NotFoundError, RelationshipNotFoundError
from .jsonapi_formatting import jsonapi_format_response
from .links import relationship_links
from .registry import registry, ToMany, ToOneOwned
from .validation import get_relationship_data, validate_linkage


def resolve_association(resource_type, relationship_name):
    """
    :return: the association for the relationship name in the url
    :raise RelationshipNotFoundError: if the type has no such relationship
    """
    assoc = resource_type.find_association(relationship_name)
    if assoc is None:
        raise RelationshipNotFoundError(f"Relationship '{relationship_name}' not found on {resource_type.name}")
    return assoc


def get_parent(resource_type, id):
    """
    :return: the row with primary key `id`
    :raise NotFoundError: if it doesn't exist
    """
    parent = db.find_by_id(resource_type, id)
    if parent is None:
        raise NotFoundError(f"{resource_type.name} with id {id} not found")
    return parent


def get_linkage(resource_type, parent, assoc):
    """
    Fetch the resource identifier(s) of the rows associated to `parent`

    :return: list of identifiers for to-many associations, an identifier or None for to-one associations
    """
    target_type = registry.target_of(assoc)
    parent_id = getattr(parent, resource_type.primary_key)

    if isinstance(assoc, ToMany):
        rows = db.find_where(target_type, assoc.foreign_key, parent_id)
        return [build_identifier(target_type.name, getattr(row, target_type.primary_key)) for row in rows]

    if isinstance(assoc, ToOneOwned):
        row = db.find_first(target_type, assoc.foreign_key, parent_id)
    else:
        foreign_key_value = getattr(parent, assoc.foreign_key)
        row = None
        if foreign_key_value is not None:
            row = db.find_by_id(target_type, foreign_key_value)

    if row is None:
        return None
    return build_identifier(target_type.name, getattr(row, target_type.primary_key))


def linkage_ids(target_type, linkage):
    """
    :param linkage: list of resource identifier objects
    :return: the (coerced) ids in the linkage
    """
    return [db.coerce_id(target_type, identifier.get("id")) for identifier in linkage if identifier.get("id") is not None]


def set_linkage(resource_type, parent, assoc, linkage):
    """
    Replace the linkage of `parent`

    :param linkage: validated linkage from the request document
    """
    target_type = registry.target_of(assoc)
    parent_id = getattr(parent, resource_type.primary_key)

    if not assoc.owns_foreign_key:
        foreign_key = getattr(target_type.model, assoc.foreign_key)
        target_pk = getattr(target_type.model, target_type.primary_key)
        # remove the current associations
        db.update_where(target_type, {assoc.foreign_key: None}, foreign_key == parent_id)

        if isinstance(assoc, ToMany):
            ids = linkage_ids(target_type, linkage)
        else:
            ids = linkage_ids(target_type, [linkage]) if linkage else []

        if ids:
            count = db.update_where(target_type, {assoc.foreign_key: parent_id}, target_pk.in_(ids))
            if count < len(set(ids)):
                saja.log.debug(f"Skipped {len(set(ids)) - count} unknown {target_type.name} ids for {resource_type.name}.{assoc.alias}")
        return

    # belongs-to: the foreign key is on the parent
    value = None
    if linkage:
        value = db.coerce_id(target_type, linkage.get("id"))
    db.update(resource_type, parent, {assoc.foreign_key: value})


def apply_relationship_keys(resource_type, attributes, relationships):
    """
    Copy the belongs-to linkage in the "relationships" member of a create or update request to the foreign keys:
    {"userId": {"data": {"type": "User", "id": "1"}}} => attributes["userId"] = 1
    {"userId": {"data": null}} => attributes["userId"] = None

    The other relationships in the request document are ignored
    """
    for assoc in resource_type.classification.to_one_owning:
        relationship = relationships.get(assoc.foreign_key)
        if relationship is None:
            continue
        linkage = relationship.get("data") if isinstance(relationship, dict) else None
        if isinstance(linkage, dict):
            attributes[assoc.foreign_key] = db.coerce_id(registry.target_of(assoc), linkage.get("id"))
        else:
            attributes[assoc.foreign_key] = None
    return attributes


def relationship_document(resource_type, id, relationship_name, linkage, base_url):
    links = relationship_links(base_url, resource_type.name, id, relationship_name)
    return jsonapi_format_response(data=linkage, links=links)


def read_relationship(resource_type, id, relationship_name, base_url):
    """
    GET /{type}/{id}/relationships/{relationship}

    :return: relationship document, the primary data contains resource identifiers only
    """
    assoc = resolve_association(resource_type, relationship_name)
    parent = get_parent(resource_type, id)
    linkage = get_linkage(resource_type, parent, assoc)
    return relationship_document(resource_type, id, relationship_name, linkage, base_url)


def write_relationship(resource_type, id, relationship_name, payload, base_url):
    """
    PATCH /{type}/{id}/relationships/{relationship}

    :param payload: request document, {"data": [...]} for to-many, {"data": {...}} or {"data": null} for to-one
    :return: relationship document with the linkage after the update
    """
    linkage = get_relationship_data(payload)
    assoc = resolve_association(resource_type, relationship_name)
    parent = get_parent(resource_type, id)
    validate_linkage(assoc, linkage)
    set_linkage(resource_type, parent, assoc, linkage)
    linkage = get_linkage(resource_type, parent, assoc)
    return relationship_document(resource_type, id, relationship_name, linkage, base_url)
