""" Tuple comparison: WHERE condition that compares a row of cursor columns to a tuple of values

A simple `(a, b) > (1, 2)` row-value comparison only works when all columns are sorted in the same direction.
With mixed directions, we have to expand it:

    a > 1 OR (a = 1 AND b > 2)

With more columns, recursively:

    a > 1 OR (a = 1 AND (b > 2 OR (b = 2 AND c > 3)))
"""

from __future__ import annotations

import operator
from collections import abc
from typing import Literal

import sqlalchemy as sa

from .sort import SortingDirection


# A comparison operator: operator.gt, operator.ge, operator.lt, operator.le
ComparisonOperator = abc.Callable[[sa.sql.ColumnElement, object], sa.sql.ColumnElement]


def build_tuple_condition(columns: abc.Sequence[sa.sql.ColumnElement], values: abc.Sequence, operators: abc.Sequence[ComparisonOperator]) -> sa.sql.ColumnElement:
    """ Build a condition that compares `columns` to `values` lexicographically

    Args:
        columns: Cursor columns
        values: Values to compare with. One for every column
        operators: Comparison operator for every column.
            The last one applies to the last column. Those before it are tie-breakers: they are made strict.
    """
    assert len(columns) == len(values) == len(operators)
    positions = list(zip(columns, values, operators))

    # The last column: compare as is
    column, value, op = positions.pop()
    condition = op(column, value)

    # Wrap it, right to left
    for column, value, op in reversed(positions):
        condition = sa.or_(
            STRICT_OPERATORS[op](column, value),
            sa.and_(column == value, condition),
        )

    # Done
    return condition


def boundary_operators(directions: abc.Sequence[SortingDirection], boundary: Literal['start', 'finish']) -> list[ComparisonOperator]:
    """ Operators for an inclusive `start` or `finish` boundary """
    if boundary == 'start':
        asc, desc = operator.ge, operator.le
    else:
        asc, desc = operator.le, operator.ge

    return [
        desc if direction == SortingDirection.DESC else asc
        for direction in directions
    ]


def advance_operators(directions: abc.Sequence[SortingDirection]) -> list[ComparisonOperator]:
    """ Operators to get rows strictly after the last row of the previous batch """
    operators = boundary_operators(directions, 'start')
    operators[-1] = operator.lt if directions[-1] == SortingDirection.DESC else operator.gt
    return operators


# Strict versions of comparison operators
STRICT_OPERATORS: dict[ComparisonOperator, ComparisonOperator] = {
    operator.ge: operator.gt,
    operator.le: operator.lt,
    operator.gt: operator.gt,
    operator.lt: operator.lt,
}
