# registry.py: resource type descriptors built from the SQLAlchemy models
#
# The descriptors are created once, when a model is exposed, and they are not modified afterwards.
# Request handlers look up associations here instead of inspecting the sqla mappers.
#
# pylint: disable=protected-access
"""
A resource type has three kinds of associations:

- ToMany (one-to-many): the foreign key is on the target type,
  the relationship name is the camel cased alias, e.g. "posts"
- ToOneOwned (has-one): the foreign key is on the target type,
  the relationship name is the alias followed by "Id", e.g. "profileId"
- ToOneOwning (belongs-to): the foreign key is on this type,
  the relationship name is the foreign key attribute name, e.g. "userId"
"""
from __future__ import annotations
import datetime
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, FrozenSet, Optional, Tuple
import sqlalchemy
from sqlalchemy import inspect as sqla_inspect
from sqlalchemy.orm.interfaces import ONETOMANY, MANYTOONE, MANYTOMANY
import saja
from .util import lower_first, plural_dasherize

# Semantic column types
STRING = "string"
INTEGER = "integer"
FLOAT = "float"
BOOLEAN = "boolean"
DATE = "date"
DATETIME = "datetime"
JSON = "json"
OTHER = "other"

DATE_KINDS = (DATE, DATETIME)

# Order matters: Boolean and Integer are checked before the generic types
SQLALCHEMY_COLUMN_KIND = (
    (sqlalchemy.Boolean, BOOLEAN),
    (sqlalchemy.Integer, INTEGER),
    (sqlalchemy.Numeric, FLOAT),
    (sqlalchemy.Float, FLOAT),
    (sqlalchemy.DateTime, DATETIME),
    (sqlalchemy.Date, DATE),
    (sqlalchemy.JSON, JSON),
    (sqlalchemy.String, STRING),
)


def column_kind(column) -> str:
    """
    :param column: sqla column
    :return: semantic column type
    """
    for sqla_type, kind in SQLALCHEMY_COLUMN_KIND:
        if isinstance(column.type, sqla_type):
            return kind
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        # custom column types
        return OTHER
    if python_type is datetime.datetime:
        return DATETIME
    if python_type is datetime.date:
        return DATE
    return OTHER


@dataclass(frozen=True)
class Association:
    """
    Base class of the association variants
    :param alias: name under which the related rows are attached to the owning row
    :param target: type name of the associated resource
    :param foreign_key: foreign key attribute name
    :param target_model: model class of the associated resource
    """

    alias: str
    target: str
    foreign_key: str
    target_model: Any = field(default=None, compare=False, repr=False)

    to_many = False
    owns_foreign_key = False

    @property
    def relationship_name(self) -> str:  # pragma: no cover
        raise NotImplementedError


@dataclass(frozen=True)
class ToMany(Association):
    """
    has-many: foreign key on the target, the linkage is a list of identifiers
    """

    to_many = True

    @property
    def relationship_name(self) -> str:
        return lower_first(self.alias)


@dataclass(frozen=True)
class ToOneOwned(Association):
    """
    has-one: foreign key on the target, the linkage is an identifier or null
    """

    @property
    def relationship_name(self) -> str:
        return self.alias + "Id"


@dataclass(frozen=True)
class ToOneOwning(Association):
    """
    belongs-to: foreign key on this type, the linkage is derived from the foreign key value
    """

    owns_foreign_key = True

    @property
    def relationship_name(self) -> str:
        return self.foreign_key


@dataclass(frozen=True)
class Classification:
    """
    Result of `classify`: the associations grouped by kind and
    the attribute keys that aren't shown as plain attributes
    """

    to_many: Tuple[ToMany, ...]
    to_one_owned: Tuple[ToOneOwned, ...]
    to_one_owning: Tuple[ToOneOwning, ...]
    excluded_keys: frozenset


def classify(resource_type: ResourceType) -> Classification:
    """
    Group the associations of `resource_type` by kind and compute the excluded attribute keys:
    every to-many/has-one alias and every belongs-to foreign key and alias
    """
    to_many, to_one_owned, to_one_owning = [], [], []
    excluded = set()
    for assoc in resource_type.associations:
        if isinstance(assoc, ToMany):
            to_many.append(assoc)
            excluded.add(assoc.alias)
        elif isinstance(assoc, ToOneOwned):
            to_one_owned.append(assoc)
            excluded.add(assoc.alias)
        elif isinstance(assoc, ToOneOwning):
            to_one_owning.append(assoc)
            excluded.add(assoc.foreign_key)
            excluded.add(assoc.alias)
        else:  # pragma: no cover
            raise TypeError(f"Unknown association {assoc!r}")
    return Classification(tuple(to_many), tuple(to_one_owned), tuple(to_one_owning), frozenset(excluded))


@dataclass(frozen=True, eq=False)
class ResourceType:
    """
    Resource type descriptor
    :param name: type name (singular), e.g. "User"
    :param model: sqla model class used to query and persist the rows
    :param primary_key: primary key attribute name
    :param columns: attribute name => semantic column type, in declaration order
    :param associations: Association instances
    :param required: attributes that can't be null and have no default
    """

    name: str
    model: Any
    primary_key: str = "id"
    columns: Dict[str, str] = field(default_factory=dict)
    associations: Tuple[Association, ...] = ()
    required: FrozenSet[str] = frozenset()

    def __post_init__(self):
        aliases = [assoc.alias for assoc in self.associations]
        if len(aliases) != len(set(aliases)):
            raise ValueError(f"Duplicate association alias for {self.name}: {aliases}")

    @cached_property
    def classification(self) -> Classification:
        return classify(self)

    @property
    def route_name(self) -> str:
        """
        :return: collection path segment, e.g. "user-profiles" for "UserProfile"
        """
        return plural_dasherize(self.name)

    @cached_property
    def attribute_names(self) -> Tuple[str, ...]:
        """
        :return: names of the plain attributes: all columns but the primary key and the excluded keys
        """
        excluded = self.classification.excluded_keys
        return tuple(name for name in self.columns if name != self.primary_key and name not in excluded)

    def is_date_field(self, field_name: str) -> bool:
        return self.columns.get(field_name) in DATE_KINDS

    def find_association(self, relationship_name: str) -> Optional[Association]:
        """
        Resolve a relationship name, as shown in the documents, to its association
        :param relationship_name: e.g. "posts", "profileId" or "userId"
        :return: association or None
        """
        classification = self.classification
        for group in (classification.to_many, classification.to_one_owned, classification.to_one_owning):
            for assoc in group:
                if assoc.relationship_name == relationship_name:
                    return assoc
        return None

    @classmethod
    def from_model(cls, model) -> ResourceType:
        """
        Create the descriptor by inspecting the sqla mapper of `model`
        """
        mapper = sqla_inspect(model)
        columns = {}
        required = set()
        for prop in mapper.column_attrs:
            column = prop.columns[0]
            columns[prop.key] = column_kind(column)
            if not column.nullable and not column.primary_key and column.default is None and column.server_default is None:
                required.add(prop.key)

        pk_columns = mapper.primary_key
        if len(pk_columns) > 1:
            saja.log.warning(f"Composite primary keys are not supported, using {pk_columns[0].name} for {model.__name__}")
        primary_key = mapper.get_property_by_column(pk_columns[0]).key

        associations = []
        for rel in mapper.relationships:
            target_model = rel.mapper.class_
            local_column, remote_column = list(rel.local_remote_pairs)[0]
            if rel.direction == MANYTOONE:
                foreign_key = mapper.get_property_by_column(local_column).key
                assoc_cls = ToOneOwning
            elif rel.direction == ONETOMANY:
                foreign_key = rel.mapper.get_property_by_column(remote_column).key
                assoc_cls = ToMany if rel.uselist else ToOneOwned
            elif rel.direction == MANYTOMANY:
                saja.log.warning(f"Not exposing many-to-many relationship {model.__name__}.{rel.key}")
                continue
            else:  # pragma: no cover
                saja.log.error(f"Unknown relationship direction for relationship {rel.key}: {rel.direction}")
                continue
            associations.append(assoc_cls(rel.key, target_model.__name__, foreign_key, target_model))

        return cls(model.__name__, model, primary_key, columns, tuple(associations), frozenset(required))


class Registry:
    """
    Resource types by name, populated when the models are exposed
    """

    def __init__(self):
        self._types = {}

    def register(self, model) -> ResourceType:
        """
        Create and store the descriptor for `model`, existing descriptors are returned unchanged
        """
        resource_type = self._types.get(model.__name__)
        if resource_type is not None and resource_type.model is model:
            return resource_type
        return self.add(ResourceType.from_model(model))

    def add(self, resource_type: ResourceType) -> ResourceType:
        """
        Store a descriptor, replacing the descriptor with the same name
        """
        self._types[resource_type.name] = resource_type
        saja.log.debug(f"Registered resource type {resource_type.name}: {resource_type.associations}")
        return resource_type

    def get(self, type_name: str) -> Optional[ResourceType]:
        return self._types.get(type_name)

    def target_of(self, assoc: Association) -> ResourceType:
        """
        :return: the descriptor of the association target, registered on first use
        if the target model hasn't been exposed
        """
        resource_type = self._types.get(assoc.target)
        if resource_type is None:
            if assoc.target_model is None:
                raise LookupError(f"Unknown resource type {assoc.target}")
            resource_type = self.register(assoc.target_model)
        return resource_type

    def __contains__(self, type_name):
        return type_name in self._types


registry = Registry()
