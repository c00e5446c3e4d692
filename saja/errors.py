# Exception Handlers
#
# The exceptions are caught in http_method_decorator and rendered as a JSON:API errors document:
# {
#     "jsonapi": {"version": "1.1"},
#     "errors": [
#         {
#             "status": "404",
#             "title": "Resource Not Found",
#             "detail": "User with id 9999 not found"
#         }
#     ]
# }
#
# Database errors never expose the underlying engine message to the client,
# the message is only logged.
#
from http import HTTPStatus
from sqlalchemy.exc import DontWrapMixin
import saja


class JsonapiError(Exception, DontWrapMixin):
    """
    Base class for the errors that are rendered as a JSON:API errors document
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    title = "Error"

    def __init__(self, detail=None, source=None, status_code=None):
        """
        :param detail: human readable explanation, shown to the client
        :param source: error source object, e.g. {"pointer": "/data"} or {"header": "Content-Type"}
        :param status_code: HTTP Status code, overrides the class default
        """
        super().__init__(detail or self.title)
        self.detail = detail
        self.source = source
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        """
        :return: JSON:API error object
        """
        error = {"status": str(self.status_code), "title": self.title}
        if self.detail:
            error["detail"] = self.detail
        if self.source:
            error["source"] = self.source
        return error

    def to_list(self):
        """
        :return: list of error objects for the "errors" member
        """
        return [self.to_dict()]


class InvalidRequestError(JsonapiError):
    """
    The request document doesn't have the required shape
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    title = "Invalid Request"

    def __init__(self, detail="", pointer="/data"):
        source = {"pointer": pointer} if pointer else None
        super().__init__(detail, source)
        saja.log.warning("Invalid Request: %s", detail)


class MissingContentTypeError(JsonapiError):
    """
    A request with a body was sent without Content-Type header
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    title = "Missing Content-Type"


class UnsupportedMediaTypeError(JsonapiError):
    """
    The Content-Type is not "application/vnd.api+json" or it has media type parameters
    """

    status_code = HTTPStatus.UNSUPPORTED_MEDIA_TYPE.value
    title = "Unsupported Media Type"


class NotFoundError(JsonapiError):
    """
    This exception is raised when an item was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    title = "Resource Not Found"

    def __init__(self, detail=""):
        super().__init__(detail)
        saja.log.info("Not found: %s", detail)


class RelationshipNotFoundError(NotFoundError):
    """
    The relationship name in the url doesn't match any association of the resource type
    """

    title = "Relationship Not Found"


class FieldError:
    """
    A single failed field constraint
    """

    def __init__(self, field, message):
        self.field = field
        self.message = message

    def __repr__(self):
        return f"<FieldError {self.field}: {self.message}>"


class ValidationError(JsonapiError):
    """
    This exception is raised when invalid attribute values have been detected (client side input)
    Every failed field constraint results in one error object
    """

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY.value
    title = "Validation Error"

    def __init__(self, field_errors):
        self.field_errors = list(field_errors)
        super().__init__("; ".join(err.message for err in self.field_errors))
        saja.log.warning("ValidationError: %s", self.detail)

    def to_list(self):
        return [
            {
                "status": str(self.status_code),
                "title": self.title,
                "detail": err.message,
                "source": {"pointer": f"/data/attributes/{err.field}"},
            }
            for err in self.field_errors
        ]


class DatabaseError(JsonapiError):
    """
    Opaque wrapper for persistence errors, the detail is always a generic message
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    title = "Database Error"

    def __init__(self, detail="An error occurred while processing your request"):
        super().__init__(detail)
