""" BatchIterator: pluck columns in batches, using keyset pagination

Instead of OFFSET, every next batch is selected with a condition: "cursor columns are beyond the last row we've seen".
The database does not have to skip rows, and concurrent INSERTs do not shift the pages.

NOTE: batches are fetched with separate queries, not within a snapshot.
Rows modified between batches may be seen twice, or not at all.
"""

from __future__ import annotations

import logging
from collections import abc
from functools import partial
from typing import ClassVar, Optional, Union

import sqlalchemy as sa

from sapluck.typing import SAModelOrAlias, PluckedRow
from sapluck.source import QuerySource, ensure_query_source
from sapluck.operations.projection import ColumnRef, resolve_projection
from sapluck.operations.condition import build_tuple_condition, boundary_operators, advance_operators
from sapluck.operations.sort import SortingDirection, OrderInput, batch_order_clauses, act_on_ignored_order

from .batch_query import BatchQuery
from .lazy import LazyBatchSequence
from .settings import BatchSettings

logger = logging.getLogger(__name__)


class BatchIterator:
    """ Batch Iterator: iterates over a query source in batches

    Example:
        iterator = BatchIterator(query_source(User).filter(User.age > 21))
        for emails in iterator.each_batch(connection, 'email', batch_size=100):
            ...
    """
    # The source to iterate over
    source: QuerySource

    # Batch settings
    settings: BatchSettings

    # Settings to use when none are given
    DEFAULT_SETTINGS: ClassVar[BatchSettings] = BatchSettings()

    def __init__(self, source: Union[QuerySource, SAModelOrAlias], settings: BatchSettings = None):
        """
        Args:
            source: The query source, or a model class
            settings: Batch settings
        """
        self.source = ensure_query_source(source)
        self.settings = settings or self.DEFAULT_SETTINGS

    __slots__ = 'source', 'settings'

    def each(self,
             connection: sa.engine.Connection,
             *columns: Union[str, ColumnRef, sa.sql.ColumnElement],
             start=None,
             finish=None,
             batch_size: int = None,
             error_on_ignored_order: bool = None,
             cursor_column: Union[str, abc.Sequence[str]] = None,
             order: OrderInput = SortingDirection.ASC,
             callback: abc.Callable[[PluckedRow], None] = None,
             ) -> Optional[LazyBatchSequence[PluckedRow]]:
        """ Pluck rows one by one. Rows are loaded in batches.

        If one column is plucked, every row is its value. If many columns are plucked, every row is a tuple.

        Returns:
            None, if a `callback` is given: it is called for every row.
            A LazyBatchSequence of rows otherwise. Its size() is the number of rows.

        Raises:
            exc.InvalidArgumentError
            exc.InvalidColumnError
            exc.InvalidOrderError
        """
        batch_query = self._batch_query('pluck_each', columns, start=start, finish=finish, batch_size=batch_size,
                                        error_on_ignored_order=error_on_ignored_order, cursor_column=cursor_column, order=order)

        if callback is not None:
            for row in self._iterate_rows(connection, batch_query):
                callback(row)
            return None
        else:
            return LazyBatchSequence(
                partial(self._iterate_rows, connection, batch_query),
                partial(self._count_rows, connection, batch_query),
            )

    def each_batch(self,
                   connection: sa.engine.Connection,
                   *columns: Union[str, ColumnRef, sa.sql.ColumnElement],
                   start=None,
                   finish=None,
                   batch_size: int = None,
                   error_on_ignored_order: bool = None,
                   cursor_column: Union[str, abc.Sequence[str]] = None,
                   order: OrderInput = SortingDirection.ASC,
                   callback: abc.Callable[[list[PluckedRow]], None] = None,
                   ) -> Optional[LazyBatchSequence[list[PluckedRow]]]:
        """ Pluck rows in batches: lists of rows

        Args:
            connection: The connection to execute queries with
            columns: Columns to pluck: names, model attributes, SQL expressions
            start: Cursor value to start from, inclusive. A tuple when there are many cursor columns.
            finish: Cursor value to finish at, inclusive. A tuple when there are many cursor columns.
            batch_size: The number of rows in a batch. Default: `settings.batch_size`
            error_on_ignored_order: Raise an error if the source is ordered? Default: see the source & settings
            cursor_column: Column name (or names) to iterate by. Default: the primary key
            order: Sorting direction: 'asc', 'desc', or a list of those (one per cursor column)
            callback: Function to call for every batch.

        Returns:
            None, if a `callback` is given.
            A LazyBatchSequence of batches otherwise. Its size() is the number of batches.

        Raises:
            exc.InvalidArgumentError
            exc.InvalidColumnError
            exc.InvalidOrderError
        """
        batch_query = self._batch_query('pluck_in_batches', columns, start=start, finish=finish, batch_size=batch_size,
                                        error_on_ignored_order=error_on_ignored_order, cursor_column=cursor_column, order=order)

        if callback is not None:
            for batch in self._iterate_batches(connection, batch_query):
                callback(batch)
            return None
        else:
            return LazyBatchSequence(
                partial(self._iterate_batches, connection, batch_query),
                partial(self._count_batches, connection, batch_query),
            )

    def _batch_query(self, operation_name: str, columns: tuple, *, batch_size: Optional[int], **kwargs) -> BatchQuery:
        return BatchQuery.build(
            operation_name,
            self.source,
            columns,
            batch_size=self.settings.batch_size if batch_size is None else batch_size,
            **kwargs
        )

    def _iterate_rows(self, connection: sa.engine.Connection, batch_query: BatchQuery) -> abc.Iterator[PluckedRow]:
        for batch in self._iterate_batches(connection, batch_query):
            yield from batch

    def _iterate_batches(self, connection: sa.engine.Connection, batch_query: BatchQuery) -> abc.Iterator[list[PluckedRow]]:
        """ Fetch batches, one query per batch """
        source = self.source
        directions = batch_query.directions
        cursor_attributes = self._cursor_attributes(batch_query)
        flatten = len(batch_query.columns) == 1

        # Find cursor columns among the plucked columns
        projection = resolve_projection(
            batch_query.columns,
            batch_query.cursor_columns,
            table_name=source.table_name,
            preparer=connection.dialect.identifier_preparer,
        )
        select_columns = [source.column(ref) for ref in projection.columns]

        # The source's own ORDER BY is going to be replaced
        if source.has_order:
            act_on_ignored_order(batch_query.error_on_ignored_order, source, self.settings)

        # Honor the source's LIMIT
        batch_limit = batch_query.batch_size
        remaining = source.limit_value
        if remaining is not None and remaining < batch_limit:
            batch_limit = remaining

        relation = source.reorder(*batch_order_clauses(cursor_attributes, directions)).limit(batch_limit)
        relation = self._apply_boundaries(relation, batch_query)
        batch_source = relation

        while True:
            rows = batch_source.pluck(connection, select_columns, customize=self.settings.customize_statement)
            if not rows:
                break

            # Remember where we've stopped
            cursor_values = projection.cursor_values(rows[-1])

            # Prepare rows for the user
            batch = [projection.strip(row) for row in rows]
            if flatten:
                batch = [row[0] for row in batch]

            logger.debug('Fetched a batch of %d rows; last cursor values: %r', len(batch), cursor_values)
            yield batch

            # Incomplete batch: no more rows
            if len(batch) < batch_limit:
                break

            if remaining is not None:
                remaining -= len(batch)

                # Saves a useless query when the limit is a multiple of the batch size
                if remaining == 0:
                    break
                elif remaining < batch_limit:
                    relation = relation.limit(remaining)

            # Next batch: rows beyond the last one
            batch_source = relation.filter(
                build_tuple_condition(cursor_attributes, cursor_values, advance_operators(directions))
            )

    def _count_rows(self, connection: sa.engine.Connection, batch_query: BatchQuery) -> int:
        """ Count rows that the iteration is going to produce """
        source = self._apply_boundaries(self.source, batch_query)
        return source.count(connection, customize=self.settings.customize_statement)

    def _count_batches(self, connection: sa.engine.Connection, batch_query: BatchQuery) -> int:
        """ Count batches that the iteration is going to produce """
        total = self._count_rows(connection, batch_query)
        return (total + batch_query.batch_size - 1) // batch_query.batch_size

    def _apply_boundaries(self, source: QuerySource, batch_query: BatchQuery) -> QuerySource:
        """ Apply `start` and `finish` conditions """
        if batch_query.start is None and batch_query.finish is None:
            return source

        cursor_attributes = self._cursor_attributes(batch_query)
        if batch_query.start is not None:
            source = source.filter(build_tuple_condition(
                cursor_attributes, batch_query.start, boundary_operators(batch_query.directions, 'start')
            ))
        if batch_query.finish is not None:
            source = source.filter(build_tuple_condition(
                cursor_attributes, batch_query.finish, boundary_operators(batch_query.directions, 'finish')
            ))
        return source

    def _cursor_attributes(self, batch_query: BatchQuery) -> list[sa.orm.InstrumentedAttribute]:
        return [
            self.source.resolve_column(name, where='cursor_column')
            for name in batch_query.cursor_columns
        ]
