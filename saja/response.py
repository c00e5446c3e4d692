# Response class
from flask import Response


class SAJAResponse(Response):
    """
    Response class, all documents are served with the JSON:API media type
    """

    default_mimetype = "application/vnd.api+json"
