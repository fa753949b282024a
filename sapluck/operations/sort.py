""" Sort: batch order, and what to do with an order that the user has already set """

from __future__ import annotations

from collections import abc
from enum import Enum
from typing import Optional, Union, TYPE_CHECKING

import sqlalchemy as sa

from sapluck import exc

if TYPE_CHECKING:
    from sapluck.source import QuerySource
    from sapluck.engine.settings import BatchSettings


class SortingDirection(Enum):
    ASC = 'asc'
    DESC = 'desc'

    @classmethod
    def parse(cls, value: Union[SortingDirection, str]) -> SortingDirection:
        """ Get a sorting direction from an enum member or a string: 'asc', 'desc'

        Raises:
            exc.InvalidArgumentError: unknown direction
        """
        if isinstance(value, SortingDirection):
            return value

        try:
            return cls(value.lower() if isinstance(value, str) else value)
        except ValueError:
            raise exc.InvalidArgumentError(
                f'order must be "asc" or "desc" or a list consisting of "asc" or "desc", got {value!r}'
            ) from None


OrderInput = Union[SortingDirection, str, abc.Sequence[Union[SortingDirection, str]]]


def parse_directions(order: OrderInput, n_columns: int) -> tuple[SortingDirection, ...]:
    """ Get a sorting direction for every cursor column

    Args:
        order: One direction for all columns, or a list of directions.
            A short list is padded with its last direction.
        n_columns: The number of cursor columns

    Raises:
        exc.InvalidArgumentError: unknown direction, too many directions
    """
    # Default
    if order is None:
        directions = []
    # One direction
    elif isinstance(order, (SortingDirection, str)):
        directions = [SortingDirection.parse(order)]
    # A list of directions
    elif isinstance(order, abc.Sequence):
        directions = [SortingDirection.parse(value) for value in order]
    else:
        raise exc.InvalidArgumentError(
            f'order must be "asc" or "desc" or a list consisting of "asc" or "desc", got {order!r}'
        )

    if len(directions) > n_columns:
        raise exc.InvalidArgumentError(f'Got {len(directions)} sorting directions for {n_columns} cursor columns')

    # Pad
    last = directions[-1] if directions else SortingDirection.ASC
    directions.extend([last] * (n_columns - len(directions)))

    # Done
    return tuple(directions)


def batch_order_clauses(columns: abc.Iterable[sa.sql.ColumnElement], directions: abc.Iterable[SortingDirection]) -> list[sa.sql.ColumnElement]:
    """ Get ORDER BY clauses for batch iteration """
    return [
        column.desc() if direction == SortingDirection.DESC else column.asc()
        for column, direction in zip(columns, directions)
    ]


# region Ignored order

IGNORED_ORDER_MESSAGE = "Scoped order is ignored, it's forced to be batch order."


def resolve_error_on_ignored_order(error_on_ignored_order: Optional[bool], source: QuerySource, settings: BatchSettings) -> bool:
    """ Decide whether an ignored order is an error

    The first one that is set wins: the argument, the source default, the settings default.
    """
    if error_on_ignored_order is not None:
        return error_on_ignored_order
    elif source.error_on_ignored_order is not None:
        return source.error_on_ignored_order
    else:
        return settings.error_on_ignored_order


def act_on_ignored_order(error_on_ignored_order: Optional[bool], source: QuerySource, settings: BatchSettings):
    """ The source has an ORDER BY that batch iteration is going to replace. Complain.

    Raises:
        exc.InvalidOrderError: when the policy says so
    """
    if resolve_error_on_ignored_order(error_on_ignored_order, source, settings):
        raise exc.InvalidOrderError(IGNORED_ORDER_MESSAGE)
    elif settings.logger is not None:
        settings.logger.warning(IGNORED_ORDER_MESSAGE)

# endregion
