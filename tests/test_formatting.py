import pytest

from saja.jsonapi_formatting import deduplicate_included, jsonapi_format_errors, jsonapi_format_response


def _resource(type_name: str, id: str, **attributes) -> dict:
    return {"type": type_name, "id": id, "attributes": attributes}


def test_deduplicate_keeps_the_first_occurrence() -> None:
    included = [_resource("Post", "1", title="a"), _resource("Comment", "1"), _resource("Post", "1", title="b"), _resource("Post", "2")]
    result = deduplicate_included(included)
    assert [(item["type"], item["id"]) for item in result] == [("Post", "1"), ("Comment", "1"), ("Post", "2")]
    assert result[0]["attributes"] == {"title": "a"}


def test_deduplicate_is_idempotent() -> None:
    included = deduplicate_included([_resource("Post", "1"), _resource("Post", "1"), _resource("User", "1")])
    assert deduplicate_included(included) == included


def test_response_document() -> None:
    document = jsonapi_format_response(
        data={"type": "User", "id": "1"},
        included=[_resource("Post", "1"), _resource("Post", "1")],
        links={"self": "http://localhost/users/1"},
    )
    assert list(document) == ["data", "included", "links", "jsonapi"]
    assert document["included"] == [_resource("Post", "1")]
    assert document["jsonapi"] == {"version": "1.1"}


def test_empty_included_is_omitted() -> None:
    document = jsonapi_format_response(data=[], included=[])
    assert document == {"data": [], "jsonapi": {"version": "1.1"}}


def test_simple_document_omits_included_and_links() -> None:
    document = jsonapi_format_response(data=None, included=[_resource("Post", "1")], links={"self": "x"}, simple=True)
    assert document == {"data": None, "jsonapi": {"version": "1.1"}}


def test_errors_document() -> None:
    errors = [{"status": "404", "title": "Resource Not Found"}]
    document = jsonapi_format_errors(errors)
    assert document == {"jsonapi": {"version": "1.1"}, "errors": errors}
    assert "data" not in document


def test_errors_document_requires_errors() -> None:
    with pytest.raises(ValueError):
        jsonapi_format_errors([])
