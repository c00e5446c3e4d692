# flask_restful API subclass
from collections import OrderedDict
from functools import wraps
from http import HTTPStatus
from typing import Callable
from flask import current_app, make_response, request
from flask.app import Flask
from flask_restful import Api as FRApiBase
from sqlalchemy.exc import StatementError
import saja
from .config import is_debug
from .errors import JsonapiError, DatabaseError
from .jsonapi import SAJARestAPI, SAJARestRelationshipAPI, SAJARestRelatedAPI
from .jsonapi_formatting import jsonapi_format_errors
from .registry import registry
from .validation import JSONAPI_CONTENT_TYPE, validate_content_type

HTTP_METHODS = ["get", "post", "patch", "delete"]


def output_jsonapi(data, code, headers=None):
    """
    flask-restful representation: serialize the document with the app json provider
    (which handles dates, decimals etc.), responses without document have an empty body
    """
    body = "" if data is None else current_app.json.dumps(data) + "\n"
    response = make_response(body, code)
    response.headers.extend(headers or {})
    response.headers["Content-Type"] = JSONAPI_CONTENT_TYPE
    return response


DEFAULT_REPRESENTATIONS = [(JSONAPI_CONTENT_TYPE, output_jsonapi)]


class SajaAPI(FRApiBase):
    """
    Subclass of the flask_restful API class where we add the expose_object method
    this method creates the API endpoints for a SQLAlchemy model
    """

    def __init__(self, app: Flask, prefix: str = "", app_db=None, decorators=None, **kwargs) -> None:
        """
        http://jsonapi.org/format/#content-negotiation-servers
        Servers MUST send all JSON:API data in response documents with
        the header Content-Type: application/vnd.api+json without any media type parameters.

        :param app: Flask app
        :param prefix: url prefix of all routes, e.g. "/api"
        :param app_db: Flask-SQLAlchemy object, app.extensions["sqlalchemy"] is used if not set
        :param decorators: flask-restful decorators applied to all resources
        :param kwargs: SAJA configuration settings, e.g. TRUST_FORWARDED_HEADERS=False
        """
        saja.SAJA(app, app_db=app_db, **kwargs)
        super().__init__(app, prefix=prefix, default_mediatype=JSONAPI_CONTENT_TYPE, decorators=decorators)
        self.representations = OrderedDict(DEFAULT_REPRESENTATIONS)

    def expose_object(self, model, url_prefix="", **properties):
        """This methods creates the API url endpoints for a SQLAlchemy model
        :param model: declarative model class that we would like to expose
        :param url_prefix: url prefix, appended to the api prefix
        :param properties: additional class attributes of the created resources

        creates classes of the form

        @api_decorator
        class User_API(SAJARestAPI):
            resource_type = ResourceType(User)

        and adds them as api resources to
        - /users
        - /users/<id>
        - /users/<id>/relationships/<relationship>
        - /users/<id>/<relationship>
        """
        resource_type = registry.register(model)
        properties["resource_type"] = resource_type
        properties["url_prefix"] = self.prefix + url_prefix

        name = resource_type.name
        url = f"{url_prefix}/{resource_type.route_name}"
        endpoint = f"{url_prefix}api.{name}"

        # Expose the collection
        api_class = api_decorator(type(f"{name}_API", (SAJARestAPI,), properties))
        saja.log.info(f"Exposing {name} collection on {url}, endpoint: {endpoint}")
        self.add_resource(api_class, url, endpoint=endpoint, methods=["GET", "POST"])

        # Expose the instances
        instance_url = f"{url}/<string:id>"
        api_class = api_decorator(type(f"{name}_API_i", (SAJARestAPI,), properties))
        saja.log.info(f"Exposing {name} instances on {instance_url}, endpoint: {endpoint}Id")
        self.add_resource(api_class, instance_url, endpoint=f"{endpoint}Id", methods=["GET", "PATCH", "DELETE"])

        # Expose the relationships
        rel_url = f"{instance_url}/relationships/<string:relationship>"
        api_class = api_decorator(type(f"{name}_API_rel", (SAJARestRelationshipAPI,), properties))
        saja.log.info(f"Exposing {name} relationships on {rel_url}")
        self.add_resource(api_class, rel_url, endpoint=f"{endpoint}Relationship", methods=["GET", "PATCH"])

        related_url = f"{instance_url}/<string:relationship>"
        api_class = api_decorator(type(f"{name}_API_related", (SAJARestRelatedAPI,), properties))
        saja.log.info(f"Exposing {name} related resources on {related_url}")
        self.add_resource(api_class, related_url, endpoint=f"{endpoint}Related", methods=["GET"])

        for assoc in resource_type.associations:
            saja.log.debug(f"{name}.{assoc.relationship_name}: {type(assoc).__name__} {assoc.target}")

        return resource_type

    def expose(self, *models, url_prefix="", **properties):
        """
        Expose multiple models at once
        """
        for model in models:
            self.expose_object(model, url_prefix, **properties)


def api_decorator(cls):
    """Decorator for the API views: add generic exception handling to the http methods

    :param cls: The class that will be decorated (e.g. SAJARestAPI, SAJARestRelationshipAPI)
    :return: decorated class
    """
    for method_name in HTTP_METHODS:
        method = getattr(cls, method_name, None)
        if not method:
            continue
        setattr(cls, method_name, http_method_decorator(method))
    return cls


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the supported jsonapi HTTP methods (get, post, patch, delete)
    - check the content type of requests with a body
    - commit the database
    - convert JsonapiErrors and database errors to an errors document

    Other exceptions are raised after rollback, they're handled by flask(-restful)
    :param fun:
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        """Wrap the method and perform error handling
        :param *args:
        :param **kwargs:
        :return: result of the wrapped method or an errors document
        """
        session = saja.DB.session
        try:
            validate_content_type(request.method, request.raw_content_type)
            result = fun(*args, **kwargs)
            session.commit()
            return result

        except JsonapiError as exc:
            error = exc

        except StatementError as exc:
            # DBAPIError or a value the column type could not bind, the message isn't sent to the client
            if is_debug():
                saja.log.exception(exc)
            else:
                saja.log.error(f"Database error: {type(exc).__name__}")
            error = DatabaseError()

        except Exception:
            session.rollback()
            raise

        session.rollback()
        status_code = getattr(error, "status_code", HTTPStatus.INTERNAL_SERVER_ERROR.value)
        return jsonapi_format_errors(error.to_list()), status_code

    return method_wrapper
