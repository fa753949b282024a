from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.orm import ColumnProperty
from sqlalchemy.orm import (  # type: ignore[attr-defined]  # sqlalchemy stubs not updated
    InstrumentedAttribute,
    QueryableAttribute,
    MapperProperty,
)

from sapluck.sainfo.models import model_name
from sapluck.typing import SAModelOrAlias, SAAttribute
from sapluck import exc


def resolve_column_by_name(field_name: str, Model: SAModelOrAlias, *, where: str) -> InstrumentedAttribute:
    # As simple as it looks, this code invokes __getattr__() on sa.orm.AliasedClass which adapts the SQL expression
    # to make sure it uses the proper aliased name in queries
    try:
        attribute = getattr(Model, field_name)
    except AttributeError as e:
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where) from e

    # Check that it actually is a column
    if not is_column_property(attribute):
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where)

    # Done
    return attribute


def find_column_by_name(field_name: str, Model: SAModelOrAlias) -> InstrumentedAttribute | None:
    """ Get a column attribute by name, or None if the model has no such column """
    attribute = getattr(Model, field_name, None)
    if attribute is None or not is_column_property(attribute):
        return None
    return attribute


def is_column_property(attribute: SAAttribute) -> bool:
    return (
        isinstance(attribute, (QueryableAttribute, MapperProperty)) and
        isinstance(attribute.property, ColumnProperty) and
        isinstance(attribute.expression, sa.Column)  # not an expression, but a real column
    )


def is_column(expression: sa.sql.ColumnElement) -> bool:
    """ Is it a real table column (as opposed to a function, a label, or a literal)? """
    return isinstance(expression, sa.Column) and expression.table is not None
