from http import HTTPStatus

from saja.errors import DatabaseError, FieldError, InvalidRequestError, NotFoundError, RelationshipNotFoundError, ValidationError


def test_error_object() -> None:
    error = InvalidRequestError("Request body must contain a \"data\" object", "/data")
    assert error.status_code == HTTPStatus.BAD_REQUEST
    assert error.to_dict() == {
        "status": "400",
        "title": "Invalid Request",
        "detail": "Request body must contain a \"data\" object",
        "source": {"pointer": "/data"},
    }


def test_not_found_errors() -> None:
    assert NotFoundError("User with id 1 not found").to_list() == [{"status": "404", "title": "Resource Not Found", "detail": "User with id 1 not found"}]
    error = RelationshipNotFoundError("Relationship 'x' not found on User")
    assert isinstance(error, NotFoundError)
    assert error.to_dict()["title"] == "Relationship Not Found"


def test_validation_error_has_one_object_per_field() -> None:
    error = ValidationError([FieldError("name", "User.name cannot be null"), FieldError("email", "User.email cannot be null")])
    assert error.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert [item["source"]["pointer"] for item in error.to_list()] == ["/data/attributes/name", "/data/attributes/email"]
    assert {item["status"] for item in error.to_list()} == {"422"}
    assert str(error) == "User.name cannot be null; User.email cannot be null"


def test_database_error_detail_is_generic() -> None:
    assert DatabaseError().to_dict() == {
        "status": "500",
        "title": "Database Error",
        "detail": "An error occurred while processing your request",
    }
