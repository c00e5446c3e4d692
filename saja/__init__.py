# flake8: noqa: F401
#
# The package logger and the db are created first: the other modules refer to saja.log and saja.DB
#
from .saja_init import DB, log, SAJA
from .errors import JsonapiError, InvalidRequestError, MissingContentTypeError, UnsupportedMediaTypeError
from .errors import NotFoundError, RelationshipNotFoundError, ValidationError, FieldError, DatabaseError
from .registry import registry, ResourceType, ToMany, ToOneOwned, ToOneOwning
from .request import SAJARequest, RequestOptions
from .jsonapi_formatting import jsonapi_format_response, jsonapi_format_errors
from .saja_api import SajaAPI
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "SAJA",
    "SajaAPI",
    "DB",
    "log",
    # registry:
    "registry",
    "ResourceType",
    "ToMany",
    "ToOneOwned",
    "ToOneOwning",
    # jsonapi:
    "jsonapi_format_response",
    "jsonapi_format_errors",
    "RequestOptions",
    "SAJARequest",
    # Errors:
    "JsonapiError",
    "InvalidRequestError",
    "MissingContentTypeError",
    "UnsupportedMediaTypeError",
    "NotFoundError",
    "RelationshipNotFoundError",
    "ValidationError",
    "FieldError",
    "DatabaseError",
)
