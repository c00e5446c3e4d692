# builder.py: serialize sqla rows to JSON:API resource objects
#
# pylint: disable=too-many-arguments
"""
http://jsonapi.org/format/#document-resource-objects

A resource object MUST contain at least the following top-level members:
- id
- type

In addition, a resource object MAY contain any of these top-level members:
- attributes: an attributes object representing some of the resource’s data.
- relationships: a relationships object describing relationships
                 between the resource and other JSON API resources.

e.g.
{
    "id": "1",
    "type": "Post",
    "attributes": {
        "title": "First Post"
    },
    "relationships": {
        "userId": {
            "data": {"id": "1", "type": "User"},
            "links": {
                "self": "http://localhost:5000/api/posts/1/relationships/userId",
                "related": "http://localhost:5000/api/posts/1/userId"
            }
        }
    }
}
"""
from sqlalchemy import inspect as sqla_inspect
from .registry import registry
from .links import relationship_links

NOT_LOADED = object()


def build_identifier(type_name, id):
    """
    :return: resource identifier object, the id is always a string
    """
    return {"type": type_name, "id": str(id)}


def loaded_value(row, alias):
    """
    Return the related row(s) attached to `row` under `alias`, without triggering a lazy load
    :return: related row(s) or NOT_LOADED
    """
    state = sqla_inspect(row, raiseerr=False)
    if state is not None:
        if alias in state.unloaded:
            return NOT_LOADED
        return state.attrs[alias].loaded_value
    return getattr(row, alias, NOT_LOADED)


def build_attributes(row, resource_type):
    """
    :return: attributes object with all declared fields except the primary key and the association keys
    """
    return {name: getattr(row, name, None) for name in resource_type.attribute_names}


def build_resource_object(row, resource_type, simple=False, base_url=None, included=None):
    """
    Build the resource object for `row`

    :param row: sqla model instance or None
    :param resource_type: ResourceType of the row
    :param simple: if True, the "relationships" member is omitted
    :param base_url: api base url, relationship links are only added when it's set
    :param included: list accumulating the resource objects of the loaded
                     to-many and has-one related rows (compound documents)
    :return: resource object dict or None if `row` is None
    """
    if row is None:
        return None
    if included is None:
        included = []

    row_id = getattr(row, resource_type.primary_key)
    resource_object = build_identifier(resource_type.name, row_id)
    resource_object["attributes"] = build_attributes(row, resource_type)

    if simple:
        return resource_object

    relationships = {}
    classification = resource_type.classification

    for assoc in classification.to_many:
        target_type = registry.target_of(assoc)
        entities = loaded_value(row, assoc.alias)
        linkage = []
        if entities is not NOT_LOADED and entities:
            for entity in entities:
                linkage.append(build_identifier(target_type.name, getattr(entity, target_type.primary_key)))
                _include(entity, target_type, base_url, included)
        relationships[assoc.relationship_name] = _relationship_object(linkage, resource_type, row_id, assoc, base_url)

    for assoc in classification.to_one_owned:
        target_type = registry.target_of(assoc)
        entity = loaded_value(row, assoc.alias)
        linkage = None
        if entity is not NOT_LOADED and entity is not None:
            linkage = build_identifier(target_type.name, getattr(entity, target_type.primary_key))
            _include(entity, target_type, base_url, included)
        relationships[assoc.relationship_name] = _relationship_object(linkage, resource_type, row_id, assoc, base_url)

    for assoc in classification.to_one_owning:
        # the linkage comes from the foreign key column, the target row itself is never included
        foreign_key_value = getattr(row, assoc.foreign_key, None)
        linkage = None
        if foreign_key_value is not None:
            linkage = build_identifier(assoc.target, foreign_key_value)
        relationships[assoc.relationship_name] = _relationship_object(linkage, resource_type, row_id, assoc, base_url)

    resource_object["relationships"] = relationships
    return resource_object


def _relationship_object(linkage, resource_type, row_id, assoc, base_url):
    relationship = {"data": linkage}
    if base_url:
        relationship["links"] = relationship_links(base_url, resource_type.name, row_id, assoc.relationship_name)
    return relationship


def _include(entity, target_type, base_url, included):
    """
    Append the resource object of `entity` followed by its own included resources
    """
    nested = []
    resource_object = build_resource_object(entity, target_type, False, base_url, nested)
    included.append(resource_object)
    included.extend(nested)
