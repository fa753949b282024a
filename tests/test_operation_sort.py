import logging

import pytest

from sapluck import exc
from sapluck.source import query_source
from sapluck.engine.settings import BatchSettings
from sapluck.operations.sort import SortingDirection, parse_directions, batch_order_clauses
from sapluck.operations.sort import resolve_error_on_ignored_order, act_on_ignored_order

from .util.models import User, Product
from .util.test_queries import assert_statement_lines

ASC, DESC = SortingDirection.ASC, SortingDirection.DESC


@pytest.mark.parametrize(('order', 'n_columns', 'expected'), [
    # Defaults
    (None, 1, (ASC,)),
    ([], 2, (ASC, ASC)),
    # One direction for all columns
    ('asc', 1, (ASC,)),
    ('DESC', 2, (DESC, DESC)),
    (DESC, 2, (DESC, DESC)),
    # A list: padded with the last direction
    (['desc'], 3, (DESC, DESC, DESC)),
    (['asc', 'desc'], 3, (ASC, DESC, DESC)),
    (['desc', ASC], 2, (DESC, ASC)),
])
def test_parse_directions(order, n_columns: int, expected: tuple):
    assert parse_directions(order, n_columns) == expected


@pytest.mark.parametrize(('order', 'n_columns'), [
    ('up', 1),
    (['asc', 'sideways'], 2),
    ([1], 1),
    (1, 1),
    (['asc', 'asc'], 1),
])
def test_parse_directions_errors(order, n_columns: int):
    with pytest.raises(exc.InvalidArgumentError):
        parse_directions(order, n_columns)


def test_batch_order_clauses():
    clauses = batch_order_clauses([Product.shop_id, Product.id], [ASC, DESC])

    assert_statement_lines(
        query_source(Product).reorder(*clauses).statement([Product.name]),
        'ORDER BY products.shop_id ASC, products.id DESC',
    )


@pytest.mark.parametrize(('argument', 'source_default', 'settings_default', 'expected'), [
    # Settings default
    (None, None, False, False),
    (None, None, True, True),
    # Source overrides settings
    (None, True, False, True),
    (None, False, True, False),
    # Argument overrides everything
    (True, False, False, True),
    (False, True, True, False),
])
def test_resolve_error_on_ignored_order(argument, source_default, settings_default, expected: bool):
    source = query_source(User, error_on_ignored_order=source_default)
    settings = BatchSettings(error_on_ignored_order=settings_default)

    assert resolve_error_on_ignored_order(argument, source, settings) == expected


def test_act_on_ignored_order(caplog: pytest.LogCaptureFixture):
    source = query_source(User).order_by(User.name)

    # Error
    with pytest.raises(exc.InvalidOrderError):
        act_on_ignored_order(True, source, BatchSettings())

    # Warning, to the configured logger
    logger = logging.getLogger('test.ignored_order')
    with caplog.at_level(logging.WARNING, logger='test.ignored_order'):
        act_on_ignored_order(False, source, BatchSettings(logger=logger))
    assert [(r.name, r.levelno) for r in caplog.records] == [('test.ignored_order', logging.WARNING)]

    # Silence
    caplog.clear()
    act_on_ignored_order(False, source, BatchSettings(logger=None))
    assert caplog.records == []
