# Canonical resource and relationship urls
#
# resource_url("http://host/api", "UserProfile", 1) => "http://host/api/user-profiles/1"
#
from flask import request
from .config import get_config
from .util import plural_dasherize


def resource_url(base_url, type_name, id=None):
    """
    :param base_url: api base url, e.g. "http://localhost:5000/api"
    :param type_name: resource type name, e.g. "User"
    :param id: optional resource id
    :return: url of the collection, or of the resource if an id is given
    """
    url = f"{base_url}/{plural_dasherize(type_name)}"
    if id is not None and id != "":
        url = f"{url}/{id}"
    return url


def relationship_links(base_url, type_name, id, relationship_name):
    """
    :return: the "self" and "related" links of a relationship object
    """
    url = resource_url(base_url, type_name, id)
    return {"self": f"{url}/relationships/{relationship_name}", "related": f"{url}/{relationship_name}"}


def related_url(base_url, type_name, id, relationship_name):
    """
    :return: url of the related resource(s) endpoint
    """
    return f"{resource_url(base_url, type_name, id)}/{relationship_name}"


def get_base_url(url_prefix=""):
    """
    Build the api base url from the current request, e.g. "http://localhost:5000/api"

    When the app is served behind a reverse proxy, the proxy may set
    X-Forwarded-Proto and X-Forwarded-Prefix, the prefix replaces the api url prefix

    :param url_prefix: url prefix of the exposed api
    :return: base url without trailing slash
    """
    scheme = request.scheme
    path = request.script_root + url_prefix
    if get_config("TRUST_FORWARDED_HEADERS", True):
        forwarded_proto = request.headers.get("X-Forwarded-Proto", "")
        if forwarded_proto:
            scheme = forwarded_proto.split(",")[0].strip()
        forwarded_prefix = request.headers.get("X-Forwarded-Prefix", "")
        if forwarded_prefix:
            path = forwarded_prefix
    return f"{scheme}://{request.host}{path.rstrip('/')}"
