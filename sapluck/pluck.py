""" pluck_each(), pluck_in_batches(): the shortcuts """

from __future__ import annotations

from typing import Union, Optional

import sqlalchemy as sa

from sapluck.typing import SAModelOrAlias
from sapluck.source import QuerySource
from sapluck.engine import BatchIterator, BatchSettings, LazyBatchSequence


def pluck_each(connection: sa.engine.Connection, source: Union[QuerySource, SAModelOrAlias], *columns, settings: BatchSettings = None, **kwargs) -> Optional[LazyBatchSequence]:
    """ Pluck values of the specified columns, row by row. Rows are loaded in batches.

    If one column is plucked, you get its value. If many columns are plucked, you get tuples.

        pluck_each(connection, User, 'id', 'email', callback=print)

    See BatchIterator.each_batch() for all the details.
    """
    return BatchIterator(source, settings).each(connection, *columns, **kwargs)


def pluck_in_batches(connection: sa.engine.Connection, source: Union[QuerySource, SAModelOrAlias], *columns, settings: BatchSettings = None, **kwargs) -> Optional[LazyBatchSequence]:
    """ Pluck values of the specified columns in batches: lists of rows

        def remind(emails: list[str]):
            ...

        source = query_source(User).filter(User.age > 21)
        pluck_in_batches(connection, source, 'email', callback=remind)

    Without a `callback`, you get a lazy sequence of batches:

        for index, batch in enumerate(pluck_in_batches(connection, User, 'name', 'email')):
            print(f'Processing batch #{index}')
            jobs = [ReminderJob(name, email) for name, email in batch]

    Limits are honored: the batch size can be less than, equal to, or greater than the limit.

    The `start` and `finish` options are especially useful if you want multiple workers to share a processing queue:
    worker 1 handles all rows between id=1 and id=9999, worker 2 handles id=10000 and beyond.

        pluck_in_batches(connection, User, 'email', start=10_000, callback=remind)

    NOTE: the source's ORDER BY is replaced with the order of the cursor columns: primary key, by default.
    This means that this function only works when cursor columns are orderable (e.g. integers or strings).

    NOTE: by its nature, batch processing is subject to race conditions if other processes are modifying the database.

    See BatchIterator.each_batch() for all the details.
    """
    return BatchIterator(source, settings).each_batch(connection, *columns, **kwargs)
