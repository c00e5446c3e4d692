import datetime
import operator

from sqlalchemy.sql import operators

from conftest import Post, User
from saja.jsonapi_filters import convert_unix_to_date, translate_filters
from saja.registry import DATE, ResourceType

POST = ResourceType.from_model(Post)
USER = ResourceType.from_model(User)

# 2024-03-01T00:00:00Z
MARCH_FIRST_MS = "1709251200000"


def test_convert_unix_to_date() -> None:
    assert convert_unix_to_date(MARCH_FIRST_MS) == datetime.datetime(2024, 3, 1)
    assert convert_unix_to_date(1709251200000) == datetime.datetime(2024, 3, 1)
    assert convert_unix_to_date(MARCH_FIRST_MS, DATE) == datetime.date(2024, 3, 1)


def test_convert_invalid_values_pass_through() -> None:
    assert convert_unix_to_date("") == ""
    assert convert_unix_to_date(None) is None
    assert convert_unix_to_date("yesterday") == "yesterday"


def test_equality() -> None:
    (expression,) = translate_filters({"name": "John Doe"}, USER)
    assert expression.operator is operator.eq
    assert expression.right.value == "John Doe"


def test_primary_key_membership() -> None:
    (expression,) = translate_filters({"id": "1,2,3"}, USER)
    assert expression.operator is operators.in_op
    assert expression.right.value == ["1", "2", "3"]


def test_comma_separated_value_of_other_fields_is_literal() -> None:
    (expression,) = translate_filters({"name": "Doe, John"}, USER)
    assert expression.operator is operator.eq
    assert expression.right.value == "Doe, John"


def test_comparison_operators() -> None:
    expressions = translate_filters({"age": {"gt": "1", "lte": "9"}}, USER)
    assert [expression.operator for expression in expressions] == [operator.gt, operator.le]
    assert [expression.right.value for expression in expressions] == ["1", "9"]


def test_in_operator_splits_strings() -> None:
    (expression,) = translate_filters({"age": {"in": "25,30"}}, USER)
    assert expression.operator is operators.in_op
    assert expression.right.value == ["25", "30"]


def test_date_fields_are_converted() -> None:
    (expression,) = translate_filters({"publishedAt": {"gte": MARCH_FIRST_MS}}, POST)
    assert expression.operator is operator.ge
    assert expression.right.value == datetime.datetime(2024, 3, 1)

    (expression,) = translate_filters({"publishedAt": MARCH_FIRST_MS}, POST)
    assert expression.right.value == datetime.datetime(2024, 3, 1)

    (expression,) = translate_filters({"publishedAt": {"in": f"{MARCH_FIRST_MS},0"}}, POST)
    assert expression.right.value == [datetime.datetime(2024, 3, 1), datetime.datetime(1970, 1, 1)]


def test_invalid_dates_are_not_converted() -> None:
    (expression,) = translate_filters({"publishedAt": {"lt": "soon"}}, POST)
    assert expression.right.value == "soon"


def test_unknown_operator_uses_the_value_object() -> None:
    (expression,) = translate_filters({"title": {"gt": "a", "startswith": "b"}}, POST)
    assert expression.operator is operator.eq
    assert expression.right.value == {"gt": "a", "startswith": "b"}


def test_unknown_fields_are_skipped() -> None:
    assert translate_filters({"user": "1", "nope": "x"}, POST) == []
    assert translate_filters({}, POST) == []
    assert translate_filters(None, POST) == []
