# -*- coding: utf-8 -*-
"""
    db.py: persistence operations on the exposed SQLAlchemy models

    The request handlers only talk to the database through these functions:
    - find_by_id / find_all / find_first: queries, optionally loading the to-many and has-one associations
    - create / update / destroy: row mutations, flushed but not committed
    - update_where: bulk update used to (re)assign foreign keys

    The session is committed (or rolled back) by the http_method_decorator
"""
# pylint: disable=redefined-builtin,invalid-name
from sqlalchemy.orm import selectinload
import saja
from .registry import INTEGER
from .jsonapi_filters import jsonapi_filter


def get_session():
    """
    :return: the scoped Flask-SQLAlchemy session
    """
    return saja.DB.session


def coerce_id(resource_type, id):
    """
    jsonapi ids are strings, convert them to ints for integer primary keys
    Values that can't be converted are returned unchanged (the query won't match)
    """
    if id is None or resource_type.columns.get(resource_type.primary_key) != INTEGER:
        return id
    try:
        return int(id)
    except (TypeError, ValueError):
        return id


def load_options(resource_type):
    """
    Eager load options for the to-many and has-one associations
    belongs-to targets are not loaded: their linkage comes from the foreign key
    """
    classification = resource_type.classification
    model = resource_type.model
    options = []
    for assoc in classification.to_many + classification.to_one_owned:
        options.append(selectinload(getattr(model, assoc.alias)))
    return options


def query(resource_type, load=False):
    """
    :param load: eager load the associations, rows already in the session are refreshed
    :return: sqla query object
    """
    result = get_session().query(resource_type.model)
    if load:
        result = result.options(*load_options(resource_type)).populate_existing()
    return result


def find_by_id(resource_type, id, load=False):
    """
    :return: row or None
    """
    pk_column = getattr(resource_type.model, resource_type.primary_key)
    return query(resource_type, load).filter(pk_column == coerce_id(resource_type, id)).one_or_none()


def find_all(resource_type, filters=None, load=False):
    """
    :param filters: parsed filter[] arguments
    :return: list of rows in the order returned by the database
    """
    return jsonapi_filter(query(resource_type, load), resource_type, filters).all()


def find_where(resource_type, field_name, value, load=False):
    """
    :return: the rows where `field_name` equals `value`
    """
    column = getattr(resource_type.model, field_name)
    return query(resource_type, load).filter(column == value).all()


def find_first(resource_type, field_name, value, load=False):
    """
    :return: the first row where `field_name` equals `value` or None
    """
    column = getattr(resource_type.model, field_name)
    return query(resource_type, load).filter(column == value).first()


def create(resource_type, attributes):
    """
    Create a row, attributes that don't correspond to a column are ignored

    :return: the new row, flushed so the primary key is set
    """
    values = {}
    for name, value in attributes.items():
        if name not in resource_type.columns:
            saja.log.debug(f"Ignoring attribute {resource_type.name}.{name}")
            continue
        values[name] = value
    row = resource_type.model(**values)
    session = get_session()
    session.add(row)
    session.flush()
    return row


def update(resource_type, row, attributes):
    """
    Set the attributes of `row`, attributes that don't correspond to a column are ignored
    """
    for name, value in attributes.items():
        if name not in resource_type.columns:
            saja.log.debug(f"Ignoring attribute {resource_type.name}.{name}")
            continue
        setattr(row, name, value)
    get_session().flush()
    return row


def destroy(row):
    session = get_session()
    session.delete(row)
    session.flush()


def update_where(resource_type, values, *criteria):
    """
    Bulk update: "UPDATE <table> SET <values> WHERE <criteria>"

    The objects in the session are expired afterwards, they're refreshed on next access
    :return: number of matched rows
    """
    session = get_session()
    count = session.query(resource_type.model).filter(*criteria).update(values, synchronize_session=False)
    session.expire_all()
    saja.log.debug(f"Updated {count} {resource_type.name} rows: {values}")
    return count
