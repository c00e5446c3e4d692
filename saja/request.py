"""
http://jsonapi.org/format/#content-negotiation-servers

Server Responsibilities
Servers MUST send all JSON API data in response documents with the header
"Content-Type: application/vnd.api+json" without any media type parameters.

Servers MUST respond with a 415 Unsupported Media Type status code if a request specifies the header
"Content-Type: application/vnd.api+json" with any media type parameters.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping
from flask import Request
import saja

FILTER_ARG_RE = re.compile(r"^filter\[(\w+)\](?:\[(\w+)\])?$")
TRUE_VALUES = ("true", "1", "yes")


# pylint: disable=too-many-ancestors
class SAJARequest(Request):
    """
    Parse the jsonapi-related request arguments:
    - header: Content-Type should be "application/vnd.api+json"
    - query args: filter[<field>], filter[<field>][<op>], simple, include
    - body: json object
    """

    filters = None
    includes = None
    simple = False

    def __init__(self, *args, **kwargs):
        """
        constructor
        """
        super().__init__(*args, **kwargs)
        self.parse_jsonapi_args()

    @property
    def raw_content_type(self):
        """
        :return: the Content-Type header as sent by the client, None if it's missing
        """
        return self.headers.get("Content-Type", None)

    def parse_jsonapi_args(self):
        """
        parse the jsonapi request arguments:
        - filter[field]=value          => {"field": "value"}
        - filter[field][op]=value      => {"field": {"op": "value"}}
        - simple=true
        - include=...
        """
        self.filters = {}
        self.includes = None

        for arg, val in self.args.items():
            filter_attr = FILTER_ARG_RE.match(arg)
            if filter_attr:
                attr_name, operator = filter_attr.groups()
                if operator is None:
                    self.filters[attr_name] = val
                else:
                    current = self.filters.get(attr_name)
                    if not isinstance(current, dict):
                        current = self.filters[attr_name] = {}
                    current[operator] = val
            elif arg.startswith("filter") and arg != "filter":
                saja.log.debug(f"Ignoring malformed filter argument {arg}")

            if arg == "include":
                self.includes = [inc for inc in val.split(",") if inc]

        simple = self.args.get(saja.SAJA.SIMPLE_ARG, "")
        self.simple = simple.lower() in TRUE_VALUES

    @property
    def has_include(self):
        """
        :return: whether the client sent an include= query argument
        """
        return self.includes is not None

    def get_jsonapi_payload(self):
        """
        :return: jsonapi request payload or None if the body isn't a json object
        """
        result = self.get_json(force=True, silent=True)
        if not isinstance(result, dict):
            saja.log.debug(f"Invalid JSON Payload : {result}")
            return None
        return result

    def get_options(self, base_url):
        """
        :param base_url: api base url
        :return: the RequestOptions of this request
        """
        query_string = self.query_string.decode("utf-8", errors="replace")
        return RequestOptions(
            simple=self.simple,
            include=self.has_include,
            filters=MappingProxyType(dict(self.filters or {})),
            base_url=base_url,
            query_string=f"?{query_string}" if query_string else "",
        )


@dataclass(frozen=True)
class RequestOptions:
    """
    The jsonapi arguments of a request, created once and passed to the handlers
    :param simple: omit relationships, included and links
    :param include: the client sent an include= argument
    :param filters: parsed filter[] arguments
    :param base_url: api base url used in the links
    :param query_string: the query string of the request url including "?", or ""
    """

    simple: bool = False
    include: bool = False
    filters: Mapping = field(default_factory=lambda: MappingProxyType({}))
    base_url: str = ""
    query_string: str = ""

    @property
    def has_filter(self):
        return bool(self.filters)
