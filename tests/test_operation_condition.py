import operator

import pytest
import sqlalchemy as sa

from sapluck.operations.condition import build_tuple_condition, boundary_operators, advance_operators
from sapluck.operations.sort import SortingDirection
from sapluck.testing import created_tables, insert

from .util.models import User, Product
from .util.test_queries import assert_statement_lines

ASC, DESC = SortingDirection.ASC, SortingDirection.DESC


@pytest.mark.parametrize(('directions', 'expected_start', 'expected_finish', 'expected_advance'), [
    ([ASC], [operator.ge], [operator.le], [operator.gt]),
    ([DESC], [operator.le], [operator.ge], [operator.lt]),
    ([ASC, ASC], [operator.ge, operator.ge], [operator.le, operator.le], [operator.ge, operator.gt]),
    ([ASC, DESC], [operator.ge, operator.le], [operator.le, operator.ge], [operator.ge, operator.lt]),
    ([DESC, ASC, DESC], [operator.le, operator.ge, operator.le], [operator.ge, operator.le, operator.ge], [operator.le, operator.ge, operator.lt]),
])
def test_operators(directions, expected_start, expected_finish, expected_advance):
    assert boundary_operators(directions, 'start') == expected_start
    assert boundary_operators(directions, 'finish') == expected_finish
    assert advance_operators(directions) == expected_advance


@pytest.mark.parametrize(('columns', 'values', 'operators', 'expected'), [
    # One column: just a comparison
    ([User.id], (5,), [operator.ge], 'users.id >= 5'),
    ([User.id], (5,), [operator.lt], 'users.id < 5'),
    # Two columns: the first one is a tie-breaker, made strict
    ([Product.shop_id, Product.id], (1, 2), advance_operators([ASC, ASC]),
     'products.shop_id > 1 OR products.shop_id = 1 AND products.id > 2'),
    ([Product.shop_id, Product.id], (1, 2), advance_operators([DESC, DESC]),
     'products.shop_id < 1 OR products.shop_id = 1 AND products.id < 2'),
    ([Product.shop_id, Product.id], (1, 2), advance_operators([ASC, DESC]),
     'products.shop_id > 1 OR products.shop_id = 1 AND products.id < 2'),
    ([Product.shop_id, Product.id], (1, 2), boundary_operators([ASC, DESC], 'start'),
     'products.shop_id > 1 OR products.shop_id = 1 AND products.id <= 2'),
    ([Product.shop_id, Product.id], (1, 2), boundary_operators([ASC, ASC], 'finish'),
     'products.shop_id < 1 OR products.shop_id = 1 AND products.id <= 2'),
])
def test_build_tuple_condition_sql(columns, values, operators, expected: str):
    condition = build_tuple_condition(columns, values, operators)
    assert_statement_lines(condition, expected)


def test_build_tuple_condition_three_columns(db: sa.engine.Connection):
    """ Check the semantics of a 3-column condition against the database """
    metadata = sa.MetaData()
    table = sa.Table(
        'triples', metadata,
        sa.Column('a', sa.Integer),
        sa.Column('b', sa.Integer),
        sa.Column('c', sa.Integer),
    )
    rows = [(a, b, c) for a in (1, 2, 3) for b in (1, 2, 3) for c in (1, 2, 3)]
    columns = [table.c.a, table.c.b, table.c.c]
    pivot = (2, 2, 2)

    with created_tables(db, metadata):
        insert(db, table, *(dict(a=a, b=b, c=c) for a, b, c in rows))

        for directions, sort_key in [
            ([ASC, ASC, ASC], lambda row: row),
            ([DESC, ASC, DESC], lambda row: (-row[0], row[1], -row[2])),
        ]:
            # Advance: strictly after the pivot
            stmt = sa.select(*columns).where(build_tuple_condition(columns, pivot, advance_operators(directions)))
            actual = {tuple(row) for row in db.execute(stmt)}
            assert actual == {row for row in rows if sort_key(row) > sort_key(pivot)}

            # Start: at or after the pivot
            stmt = sa.select(*columns).where(build_tuple_condition(columns, pivot, boundary_operators(directions, 'start')))
            actual = {tuple(row) for row in db.execute(stmt)}
            assert actual == {row for row in rows if sort_key(row) >= sort_key(pivot)}

            # Finish: at or before the pivot
            stmt = sa.select(*columns).where(build_tuple_condition(columns, pivot, boundary_operators(directions, 'finish')))
            actual = {tuple(row) for row in db.execute(stmt)}
            assert actual == {row for row in rows if sort_key(row) <= sort_key(pivot)}
