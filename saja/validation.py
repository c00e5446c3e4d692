# Request validation
#
# The checks run before any database call, failures are raised as JsonapiError subclasses
# and rendered by the http_method_decorator:
# - content type of requests with a body
# - shape of the request document
# - attribute values: required attributes and date parsing
#
import datetime
import saja
from .errors import InvalidRequestError, MissingContentTypeError, UnsupportedMediaTypeError
from .errors import FieldError, ValidationError
from .registry import BOOLEAN, DATE, DATETIME

JSONAPI_CONTENT_TYPE = "application/vnd.api+json"
BODY_METHODS = ("POST", "PATCH")


def validate_content_type(method, content_type):
    """
    Requests with a body must have the "application/vnd.api+json" content type, without media type parameters

    :param method: HTTP method
    :param content_type: raw Content-Type header or None
    """
    if method.upper() not in BODY_METHODS:
        return
    if not content_type:
        raise MissingContentTypeError("Content-Type header is required for requests with a body")
    if content_type == JSONAPI_CONTENT_TYPE:
        return
    if content_type.startswith(JSONAPI_CONTENT_TYPE + ";") or content_type.startswith(JSONAPI_CONTENT_TYPE + " "):
        raise UnsupportedMediaTypeError("Content-Type header must be application/vnd.api+json without media type parameters")
    raise UnsupportedMediaTypeError(f"Content-Type must be {JSONAPI_CONTENT_TYPE}", source={"header": "Content-Type"})


def get_resource_data(payload):
    """
    Validate a create or update request document

    :param payload: request document
    :return: (attributes, relationships) of the primary data
    """
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise InvalidRequestError('Request body must contain a "data" object', "/data")
    attributes = data.get("attributes")
    if not isinstance(attributes, dict):
        raise InvalidRequestError('Request body must contain "data.attributes"', "/data/attributes")
    relationships = data.get("relationships")
    if not isinstance(relationships, dict):
        relationships = {}
    return dict(attributes), relationships


def get_relationship_data(payload):
    """
    Validate a relationship update request document, "data" may be null

    :return: the linkage in the "data" member
    """
    if not isinstance(payload, dict) or "data" not in payload:
        raise InvalidRequestError('Request body must contain a "data" member', "/data")
    return payload["data"]


def validate_linkage(assoc, linkage):
    """
    to-many linkage must be a list, to-one linkage an identifier object or null
    """
    if assoc.to_many:
        if not isinstance(linkage, list):
            raise InvalidRequestError("For to-many relationships, data must be an array", "/data")
        for identifier in linkage:
            if not isinstance(identifier, dict):
                raise InvalidRequestError("For to-many relationships, data must be an array of resource identifier objects", "/data")
    elif linkage is not None and not isinstance(linkage, dict):
        raise InvalidRequestError("For to-one relationships, data must be a resource identifier object or null", "/data")


def normalize_empty_strings(attributes):
    """
    Blank values are stored as null: integer columns don't accept ''
    """
    return {key: (None if val == "" else val) for key, val in attributes.items()}


def parse_datetime(value):
    # "Z" isn't accepted by fromisoformat on older interpreters
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.datetime.fromisoformat(value)


def parse_date(kind, value):
    """
    :param kind: DATE or DATETIME
    :param value: ISO 8601 string, a full datetime string is accepted for DATE columns
    :return: date or datetime
    :raise TypeError: if value isn't a string
    :raise ValueError: if value isn't ISO 8601
    """
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO 8601 string, got {type(value).__name__}")
    if kind == DATE:
        try:
            return datetime.date.fromisoformat(value)
        except ValueError:
            return parse_datetime(value).date()
    return parse_datetime(value)


def is_boolean(value):
    """
    Boolean columns accept true/false and the integers 0 and 1
    """
    return isinstance(value, bool) or (isinstance(value, int) and value in (0, 1))


def validate_attributes(resource_type, attributes, create=True):
    """
    Check the attributes before they're saved:
    - on create, all required attributes must be present and not null
    - on update, required attributes can't be set to null
    - date and datetime values must be ISO 8601 strings, they're converted in place
    - boolean values must be true, false, 0 or 1

    :raise ValidationError: with one FieldError per failed constraint
    :return: attributes
    """
    field_errors = []

    for field_name in sorted(resource_type.required):
        if create or field_name in attributes:
            if attributes.get(field_name) is None:
                field_errors.append(FieldError(field_name, f"{resource_type.name}.{field_name} cannot be null"))

    for field_name, value in attributes.items():
        kind = resource_type.columns.get(field_name)
        if value is None:
            continue
        if kind == BOOLEAN and not is_boolean(value):
            field_errors.append(FieldError(field_name, f"Invalid boolean value for {resource_type.name}.{field_name}"))
            continue
        if kind not in (DATE, DATETIME):
            continue
        try:
            attributes[field_name] = parse_date(kind, value)
        except (TypeError, ValueError) as exc:
            saja.log.debug(f"Invalid {kind} {resource_type.name}.{field_name}: {exc}")
            field_errors.append(FieldError(field_name, f"Invalid {kind} value for {resource_type.name}.{field_name}"))

    if field_errors:
        raise ValidationError(field_errors)
    return attributes
