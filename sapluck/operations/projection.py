""" Projection: the columns to pluck, and where to find cursor values among them

Batch iteration needs cursor column values from the last row of every batch.
If the user has already selected these columns, we know where to find them.
If not, they are appended to the list of selected columns, and stripped from every row before it's given to the user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections import abc
from typing import Optional, Union

import sqlalchemy as sa
from sqlalchemy.engine.default import DefaultDialect
from sqlalchemy.sql.compiler import IdentifierPreparer

from sapluck.sainfo.columns import is_column_property, is_column


@dataclass(frozen=True)
class NamedColumn:
    """ A column referenced by name: "id", "users.id", '"users"."id"' """
    name: str

    # The SQL expression to select, if already known (e.g. when given a model attribute)
    expression: Optional[sa.sql.ColumnElement] = field(default=None, compare=False)


@dataclass(frozen=True, eq=False)
class RawExpression:
    """ An opaque SQL expression. Never matches any cursor column """
    expression: sa.sql.ColumnElement


ColumnRef = Union[NamedColumn, RawExpression]


def column_ref(column: Union[str, ColumnRef, sa.sql.ColumnElement]) -> ColumnRef:
    """ Convert user input into a column reference

    * 'name' -> NamedColumn('name')
    * User.id -> NamedColumn('users.id')
    * users_table.c.id -> NamedColumn('users.id')
    * anything else -> RawExpression
    """
    if isinstance(column, (NamedColumn, RawExpression)):
        return column
    elif isinstance(column, str):
        return NamedColumn(column)
    elif is_column_property(column):
        return NamedColumn(f'{column.expression.table.name}.{column.key}', expression=column)
    elif is_column(column):
        return NamedColumn(f'{column.table.name}.{column.key}', expression=column)
    else:
        return RawExpression(column)


@dataclass(frozen=True)
class ResolvedProjection:
    """ Columns to select, and positions of cursor columns in a row """
    # The columns to select: requested ones + missing cursor columns
    columns: tuple[ColumnRef, ...]

    # For every cursor column: its index in a row
    cursor_indexes: tuple[int, ...]

    # How many columns were appended. That's how many trailing values to strip from every row
    n_missing: int

    def cursor_values(self, row: tuple) -> tuple:
        """ Get cursor values from a row """
        return tuple(row[index] for index in self.cursor_indexes)

    def strip(self, row: tuple) -> tuple:
        """ Remove appended cursor columns from a row """
        if self.n_missing:
            return row[:-self.n_missing]
        else:
            return row


def resolve_projection(columns: abc.Sequence[ColumnRef], cursor_columns: abc.Sequence[str], *, table_name: str, preparer: IdentifierPreparer = None) -> ResolvedProjection:
    """ Find cursor columns among the requested columns. Append those that are missing.

    A cursor column is matched by: its name ("id"), its qualified name ("users.id"), its quoted name ('"users"."id"').
    The first match wins.

    Args:
        columns: The requested columns
        cursor_columns: Names of cursor columns
        table_name: The name of the table, to match qualified names
        preparer: The dialect's preparer, to match quoted names
    """
    preparer = preparer or DEFAULT_PREPARER

    # Only named columns can match
    names = [
        column.name if isinstance(column, NamedColumn) else None
        for column in columns
    ]

    # Find every cursor column
    projection = list(columns)
    cursor_indexes = []
    n_missing = 0
    for cursor_column in cursor_columns:
        lookup = (
            cursor_column,
            f'{table_name}.{cursor_column}',
            f'{preparer.quote_identifier(table_name)}.{preparer.quote_identifier(cursor_column)}',
        )
        index = next((names.index(name) for name in lookup if name in names), None)

        # Missing? Append.
        if index is None:
            index = len(projection)
            projection.append(NamedColumn(cursor_column))
            n_missing += 1

        cursor_indexes.append(index)

    # Done
    return ResolvedProjection(
        columns=tuple(projection),
        cursor_indexes=tuple(cursor_indexes),
        n_missing=n_missing,
    )


# Default identifier preparer: used when the dialect is unknown
DEFAULT_PREPARER = DefaultDialect().identifier_preparer
