"""
JSON:API filtering (https://jsonapi.org/recommendations/#filtering)

Supported query arguments:

- filter[<field>]=<value>          equality
- filter[id]=1,2,3                 primary key membership
- filter[<field>][<op>]=<value>    comparison, op is one of gt, gte, lt, lte, ne, like, in
- filter[<field>][in]=a,b,c        membership

Values for date and datetime columns are unix timestamps in milliseconds.
"""
import datetime
import operator
import saja
from .registry import DATE


def _like(column, value):
    return column.like(value)


def _in(column, value):
    return column.in_(value)


OPERATORS = {
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
    "ne": operator.ne,
    "like": _like,
    "in": _in,
}


def convert_unix_to_date(value, kind=None):
    """
    Convert a unix timestamp in milliseconds to a datetime (utc)
    Empty and non-numeric values are returned unchanged

    :param value: timestamp, number or numeric string
    :param kind: semantic column type, a `date` is returned for DATE columns
    """
    if value is None or value == "":
        return value
    try:
        timestamp = float(value)
    except (TypeError, ValueError):
        return value
    try:
        result = datetime.datetime.fromtimestamp(timestamp / 1000, tz=datetime.timezone.utc).replace(tzinfo=None)
    except (OverflowError, OSError, ValueError) as exc:
        saja.log.debug(f"Invalid timestamp {value}: {exc}")
        return value
    if kind == DATE:
        return result.date()
    return result


def translate_filters(filters, resource_type):
    """
    Translate the parsed filter[] query arguments to sqla filter expressions

    :param filters: {field: value} or {field: {op: value}}
    :param resource_type: ResourceType of the filtered collection
    :return: list of sqla expressions, they should be combined with AND
    """
    expressions = []
    model = resource_type.model

    for field_name, value in (filters or {}).items():
        if field_name not in resource_type.columns:
            # validation failed: this attribute can't be queried
            saja.log.warning(f"Invalid filter {resource_type.name}.{field_name}")
            continue

        column = getattr(model, field_name)
        kind = resource_type.columns[field_name]
        is_date = resource_type.is_date_field(field_name)

        if isinstance(value, dict):
            if any(op not in OPERATORS for op in value):
                # Unknown operator: the value object itself is the equality target
                saja.log.debug(f"Unknown filter operator in {field_name}: {value}")
                expressions.append(column == value)
                continue
            for op, op_value in value.items():
                if op == "in":
                    if isinstance(op_value, str):
                        op_value = op_value.split(",")
                    if is_date:
                        op_value = [convert_unix_to_date(val, kind) for val in op_value]
                elif is_date:
                    op_value = convert_unix_to_date(op_value, kind)
                expressions.append(OPERATORS[op](column, op_value))
        elif field_name == resource_type.primary_key and isinstance(value, str) and "," in value:
            expressions.append(column.in_(value.split(",")))
        else:
            if is_date:
                value = convert_unix_to_date(value, kind)
            expressions.append(column == value)

    return expressions


def jsonapi_filter(query, resource_type, filters):
    """
    Apply the filter[] query arguments to `query`

    :param query: sqla query object
    :return: filtered statement
    """
    expressions = translate_filters(filters, resource_type)
    if expressions:
        query = query.filter(*expressions)
    return query
