""" BatchQuery: arguments for one batch iteration, validated """

from __future__ import annotations

from collections import abc
from dataclasses import dataclass
from typing import Optional, Union

import sqlalchemy as sa

from sapluck import exc
from sapluck.source import QuerySource
from sapluck.operations.projection import ColumnRef, column_ref
from sapluck.operations.sort import SortingDirection, OrderInput, parse_directions


@dataclass(frozen=True)
class BatchQuery:
    """ Batch Query: what to pluck, how to iterate

    Constructed once per call; never modified.
    """
    # Columns to pluck
    columns: tuple[ColumnRef, ...]

    # Names of columns to iterate by
    cursor_columns: tuple[str, ...]

    # Sorting direction for every cursor column
    directions: tuple[SortingDirection, ...]

    # The number of rows per batch
    batch_size: int

    # Cursor values to start from, inclusive
    start: Optional[tuple]

    # Cursor values to finish at, inclusive
    finish: Optional[tuple]

    # Raise an error when the source's ORDER BY is ignored? `None`: not set
    error_on_ignored_order: Optional[bool]

    @classmethod
    def build(cls,
              operation_name: str,
              source: QuerySource,
              columns: abc.Sequence[Union[str, ColumnRef, sa.sql.ColumnElement]],
              *,
              start=None,
              finish=None,
              batch_size: int,
              error_on_ignored_order: Optional[bool] = None,
              cursor_column: Union[str, abc.Sequence[str]] = None,
              order: OrderInput = SortingDirection.ASC,
              ) -> BatchQuery:
        """ Validate arguments, build a BatchQuery

        Args:
            operation_name: Name of the public function, for error messages
            source: The source to iterate over; used to validate cursor columns

        Raises:
            exc.InvalidArgumentError
            exc.InvalidColumnError
        """
        if not columns:
            raise exc.InvalidArgumentError(f'Call `{operation_name}()` with at least one column.')

        # Cursor columns: default to the primary key
        if cursor_column is None:
            cursor_columns = source.primary_key
        elif isinstance(cursor_column, str):
            cursor_columns = (cursor_column,)
        else:
            cursor_columns = tuple(cursor_column)

        if not cursor_columns:
            raise exc.InvalidArgumentError('At least one cursor column is required')

        directions = parse_directions(order, len(cursor_columns))

        if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
            raise exc.InvalidArgumentError(f'batch_size must be a positive integer, got {batch_size!r}')

        # Make sure cursor columns exist
        for name in cursor_columns:
            source.resolve_column(name, where='cursor_column')

        return cls(
            columns=tuple(column_ref(column) for column in columns),
            cursor_columns=cursor_columns,
            directions=directions,
            batch_size=batch_size,
            start=_cursor_tuple(start, cursor_columns, 'start'),
            finish=_cursor_tuple(finish, cursor_columns, 'finish'),
            error_on_ignored_order=error_on_ignored_order,
        )


def _cursor_tuple(value, cursor_columns: tuple[str, ...], name: str) -> Optional[tuple]:
    """ Convert a `start`/`finish` value into a tuple of cursor values """
    if value is None:
        return None

    # Scalar -> tuple
    if isinstance(value, (tuple, list)):
        value = tuple(value)
    else:
        value = (value,)

    if len(value) != len(cursor_columns):
        raise exc.InvalidArgumentError(
            f'{name} must have a value for every cursor column {cursor_columns!r}, got {value!r}'
        )

    return value
