#  This file contains the jsonapi-related flask-restful "Resource" objects:
#  - SAJARestAPI for the exposed collections and instances
#  - SAJARestRelationshipAPI for the relationship linkage: /{type}/{id}/relationships/{relationship}
#  - SAJARestRelatedAPI for the related resources: /{type}/{id}/{relationship}
#
#  The exposed classes are created dynamically by SajaAPI.expose_object, which sets
#  the `resource_type` and `url_prefix` class attributes.
#  Exceptions raised here are rendered as errors documents by the http_method_decorator.
#
# pylint: disable=redefined-builtin,invalid-name
from http import HTTPStatus
from flask import request
import flask_restful
from . import db
from .builder import build_resource_object
from .errors import NotFoundError
from .jsonapi_formatting import jsonapi_format_response
from .links import get_base_url, resource_url, related_url
from .registry import registry, ToMany, ToOneOwned
from .relationships import apply_relationship_keys, get_parent, read_relationship, resolve_association, write_relationship
from .validation import get_resource_data, normalize_empty_strings, validate_attributes


class Resource(flask_restful.Resource):
    """
    Superclass for the exposed endpoints
    """

    # ResourceType of the exposed model
    resource_type = None
    # url prefix of the api, used to create the links
    url_prefix = ""

    def get_options(self):
        """
        :return: RequestOptions for the current request
        """
        return request.get_options(get_base_url(self.url_prefix))

    def not_found(self, id):
        return NotFoundError(f"{self.resource_type.name} with id {id} not found")


class SAJARestAPI(Resource):
    """
    Collection and instance endpoints:
    - GET /{type}, POST /{type}
    - GET /{type}/{id}, PATCH /{type}/{id}, DELETE /{type}/{id}
    """

    def get(self, id=None):
        """
        If no id is given: return all instances
        If an id is given, get an instance by id

        http://jsonapi.org/format/#document-top-level
        """
        options = self.get_options()
        if id is None:
            return self.get_list(options)
        return self.get_single(id, options)

    def get_single(self, id, options):
        resource_type = self.resource_type
        simple = options.simple
        row = db.find_by_id(resource_type, id, load=not simple)
        if row is None:
            raise self.not_found(id)

        included = []
        data = build_resource_object(row, resource_type, simple, None if simple else options.base_url, included)
        links = {"self": resource_url(options.base_url, resource_type.name, id)}
        return jsonapi_format_response(data, included, links, simple)

    def get_list(self, options):
        """
        Without filter and include arguments the rows are returned without relationships,
        otherwise the associations are loaded and the related resources are included
        """
        resource_type = self.resource_type
        collection_url = resource_url(options.base_url, resource_type.name)

        if not options.has_filter and not options.include:
            rows = db.find_all(resource_type)
            data = [build_resource_object(row, resource_type, simple=True) for row in rows]
            return jsonapi_format_response(data, links={"self": collection_url}, simple=options.simple)

        simple = options.simple
        rows = db.find_all(resource_type, options.filters, load=not simple)
        included = []
        data = [build_resource_object(row, resource_type, simple, None if simple else options.base_url, included) for row in rows]
        links = {"self": collection_url + options.query_string}
        return jsonapi_format_response(data, included, links, simple)

    def post(self, **kwargs):
        """
        http://jsonapi.org/format/#crud-creating

        Belongs-to linkage in the "relationships" member is saved in the foreign key
        :return: 201 Created, the created resource and the Location header
        """
        resource_type = self.resource_type
        options = self.get_options()
        attributes, relationships = get_resource_data(request.get_jsonapi_payload())
        apply_relationship_keys(resource_type, attributes, relationships)
        validate_attributes(resource_type, attributes, create=True)

        row = db.create(resource_type, attributes)
        row_id = getattr(row, resource_type.primary_key)
        row = db.find_by_id(resource_type, row_id, load=True)

        included = []
        data = build_resource_object(row, resource_type, False, options.base_url, included)
        location = resource_url(options.base_url, resource_type.name, row_id)
        document = jsonapi_format_response(data, included, {"self": location})
        return document, HTTPStatus.CREATED.value, {"Location": location}

    def patch(self, id=None):
        """
        https://jsonapi.org/format/#crud-updating
        Update the object with the specified id, blank attribute values are saved as null
        """
        resource_type = self.resource_type
        options = self.get_options()
        attributes, relationships = get_resource_data(request.get_jsonapi_payload())

        row = db.find_by_id(resource_type, id)
        if row is None:
            raise self.not_found(id)

        attributes = normalize_empty_strings(attributes)
        apply_relationship_keys(resource_type, attributes, relationships)
        validate_attributes(resource_type, attributes, create=False)
        db.update(resource_type, row, attributes)

        row = db.find_by_id(resource_type, id, load=True)
        if row is None:  # pragma: no cover
            raise self.not_found(id)

        included = []
        data = build_resource_object(row, resource_type, False, options.base_url, included)
        links = {"self": resource_url(options.base_url, resource_type.name, id)}
        return jsonapi_format_response(data, included, links)

    def delete(self, id=None):
        """
        http://jsonapi.org/format/1.1/#crud-deleting
        :return: 204 No Content
        """
        row = db.find_by_id(self.resource_type, id)
        if row is None:
            raise self.not_found(id)
        db.destroy(row)
        return None, HTTPStatus.NO_CONTENT.value


class SAJARestRelationshipAPI(Resource):
    """
    GET and PATCH /{type}/{id}/relationships/{relationship}
    """

    def get(self, id, relationship):
        options = self.get_options()
        return read_relationship(self.resource_type, id, relationship, options.base_url)

    def patch(self, id, relationship):
        options = self.get_options()
        return write_relationship(self.resource_type, id, relationship, request.get_jsonapi_payload(), options.base_url)


class SAJARestRelatedAPI(Resource):
    """
    GET /{type}/{id}/{relationship}: the related resource objects
    """

    def get(self, id, relationship):
        """
        :return: a list of resource objects for to-many relationships, a resource object or null otherwise
        """
        resource_type = self.resource_type
        options = self.get_options()
        simple = options.simple
        assoc = resolve_association(resource_type, relationship)
        parent = get_parent(resource_type, id)
        target_type = registry.target_of(assoc)
        parent_id = getattr(parent, resource_type.primary_key)
        base_url = None if simple else options.base_url
        load = not simple

        included = []
        if isinstance(assoc, ToMany):
            rows = db.find_where(target_type, assoc.foreign_key, parent_id, load=load)
            data = [build_resource_object(row, target_type, simple, base_url, included) for row in rows]
        else:
            if isinstance(assoc, ToOneOwned):
                row = db.find_first(target_type, assoc.foreign_key, parent_id, load=load)
            else:
                foreign_key_value = getattr(parent, assoc.foreign_key)
                row = None
                if foreign_key_value is not None:
                    row = db.find_by_id(target_type, foreign_key_value, load=load)
            data = build_resource_object(row, target_type, simple, base_url, included)

        links = {"self": related_url(options.base_url, resource_type.name, id, relationship)}
        return jsonapi_format_response(data, included, links, simple)
