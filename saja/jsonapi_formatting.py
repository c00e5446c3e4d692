# JSON:API document formatting functions:
# - compound documents: deduplication of the "included" resources
# - top-level document envelope
# - errors documents
#
# https://jsonapi.org/format/#document-top-level:
# The members data and errors MUST NOT coexist in the same document.
#
from .config import get_config


def deduplicate_included(included):
    """
    Remove duplicate resource objects, resources are identified by their (type, id)
    The first occurrence is kept and the order is preserved

    :param included: list of resource objects
    :return: list of unique resource objects
    """
    seen = set()
    result = []
    for resource in included:
        key = (resource["type"], resource["id"])
        if key in seen:
            continue
        seen.add(key)
        result.append(resource)
    return result


def jsonapi_version():
    return {"version": get_config("JSONAPI_VERSION", "1.1")}


def jsonapi_format_response(data=None, included=None, links=None, simple=False):
    """
    Create a response dict according to the json:api schema spec
    :param data: primary data: resource object(s), resource identifier(s) or None
    :param included: resource objects related to the primary data
    :param links: top-level links object
    :param simple: omit the included and links members
    :return: jsonapi formatted dictionary
    """
    result = {"data": data}
    if included and not simple:
        included = deduplicate_included(included)
        if included:
            result["included"] = included
    if links and not simple:
        result["links"] = links
    result["jsonapi"] = jsonapi_version()
    return result


def jsonapi_format_errors(errors):
    """
    :param errors: list of JSON:API error objects
    :return: errors document, it never contains "data"
    """
    if not errors:
        raise ValueError("An errors document requires at least one error object")
    return {"jsonapi": jsonapi_version(), "errors": list(errors)}
