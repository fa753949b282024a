""" QuerySource: an immutable description of what to select from, and how

This is a thin wrapper around SqlAlchemy Core: it remembers the model, the filter criteria, the ordering, and the limit,
and builds a `sa.select()` statement when asked to.
Every method returns a new QuerySource: the original one is never modified.
"""

from __future__ import annotations

import dataclasses
from collections import abc
from typing import Optional, Union

import sqlalchemy as sa

from sapluck.typing import SAModelOrAlias
from sapluck.sainfo.models import unaliased_class, model_table_name
from sapluck.sainfo.primary_key import primary_key_names
from sapluck.sainfo.columns import resolve_column_by_name, find_column_by_name
from sapluck.operations.projection import ColumnRef, NamedColumn, RawExpression


# Customization callback for a statement: see BatchSettings.customize_statement()
CustomizeStatementCallable = abc.Callable[[sa.sql.Select], sa.sql.Select]


@dataclasses.dataclass(frozen=True)
class QuerySource:
    """ Query Source: the model to select from, filters, ordering, limit

    Example:
        source = query_source(User).filter(User.age > 21).limit(100)
        source.pluck(connection, [User.id, User.email])
    """
    # The model (or aliased class) to select rows from
    Model: SAModelOrAlias

    # Filter criteria: WHERE ... AND ...
    criteria: tuple[sa.sql.ColumnElement, ...] = ()

    # ORDER BY clauses, as set by the user
    ordering: tuple[sa.sql.ColumnElement, ...] = ()

    # LIMIT: the max number of rows in the result set
    limit_value: Optional[int] = None

    # Raise an error when batch iteration is going to ignore `ordering`?
    # This is a per-source default: overrides BatchSettings, and is overridden by an explicit argument.
    # `None` means "not set": use BatchSettings
    error_on_ignored_order: Optional[bool] = None

    def filter(self, *criteria: sa.sql.ColumnElement) -> QuerySource:
        """ Add filter criteria. They are combined with the existing ones using AND """
        return dataclasses.replace(self, criteria=self.criteria + criteria)

    def order_by(self, *clauses: sa.sql.ColumnElement) -> QuerySource:
        """ Add ORDER BY clauses after the existing ones """
        return dataclasses.replace(self, ordering=self.ordering + clauses)

    def reorder(self, *clauses: sa.sql.ColumnElement) -> QuerySource:
        """ Replace the ORDER BY clauses. Call with no arguments to remove ordering """
        return dataclasses.replace(self, ordering=clauses)

    def limit(self, limit: Optional[int]) -> QuerySource:
        """ Set the LIMIT. `None` removes it """
        return dataclasses.replace(self, limit_value=limit)

    @property
    def has_order(self) -> bool:
        """ Does this source carry an explicit ORDER BY? """
        return bool(self.ordering)

    @property
    def primary_key(self) -> tuple[str, ...]:
        """ Names of the natural identity columns: the primary key """
        return primary_key_names(unaliased_class(self.Model))

    @property
    def table_name(self) -> str:
        """ The name the table is referenced by in queries """
        return model_table_name(self.Model)

    def resolve_column(self, name: str, *, where: str) -> sa.orm.InstrumentedAttribute:
        """ Get a model column by its attribute name

        Raises:
            exc.InvalidColumnError
        """
        return resolve_column_by_name(name, self.Model, where=where)

    def column(self, ref: ColumnRef) -> sa.sql.ColumnElement:
        """ Get an SQL expression for a column reference

        Names are looked up on the model: either as "name", or as "table.name".
        Names that are not model attributes are used as literal SQL.
        """
        if isinstance(ref, RawExpression):
            return ref.expression

        assert isinstance(ref, NamedColumn)
        if ref.expression is not None:
            return ref.expression

        # Try the model attribute
        table_name, _, name = ref.name.rpartition('.')
        if not table_name or table_name == self.table_name:
            attribute = find_column_by_name(name, self.Model)
            if attribute is not None:
                return attribute

        # Give up: literal SQL
        return sa.literal_column(ref.name)

    def statement(self, columns: abc.Iterable[sa.sql.ColumnElement]) -> sa.sql.Select:
        """ Build a SELECT statement for the given columns """
        stmt = sa.select(*columns).select_from(self.Model)

        if self.criteria:
            stmt = stmt.where(*self.criteria)
        if self.ordering:
            stmt = stmt.order_by(*self.ordering)
        if self.limit_value is not None:
            stmt = stmt.limit(self.limit_value)

        # Done
        return stmt

    def count_statement(self, *, customize: CustomizeStatementCallable = None) -> sa.sql.Select:
        """ Build a SELECT COUNT(*) statement that counts rows under the same filters and limit

        `customize` is applied to the inner SELECT: the one that selects the rows.
        """
        # Ordering makes no difference to the count, but LIMIT does: use a subquery
        stmt = self.reorder().statement([sa.literal_column('1')])
        if customize is not None:
            stmt = customize(stmt)

        subquery = stmt.subquery()
        return sa.select(sa.func.count()).select_from(subquery)

    def pluck(self, connection: sa.engine.Connection, columns: abc.Iterable[sa.sql.ColumnElement], *, customize: CustomizeStatementCallable = None) -> list[tuple]:
        """ Execute the query and get rows as tuples """
        stmt = self.statement(columns)
        if customize is not None:
            stmt = customize(stmt)

        return [tuple(row) for row in connection.execute(stmt).all()]

    def count(self, connection: sa.engine.Connection, *, customize: CustomizeStatementCallable = None) -> int:
        """ Count rows without fetching them """
        stmt = self.count_statement(customize=customize)
        return connection.execute(stmt).scalar_one()


def query_source(Model: SAModelOrAlias, *, error_on_ignored_order: bool = None) -> QuerySource:
    """ Get the default QuerySource for a model: all rows, no ordering, no limit

    Args:
        Model: The model class, or an aliased class, to select from
        error_on_ignored_order: Per-source default for the "error on ignored order" policy
    """
    return QuerySource(Model, error_on_ignored_order=error_on_ignored_order)


def ensure_query_source(source: Union[QuerySource, SAModelOrAlias]) -> QuerySource:
    """ Construct a QuerySource from any valid input: a QuerySource, or a model """
    if isinstance(source, QuerySource):
        return source
    else:
        return query_source(source)
