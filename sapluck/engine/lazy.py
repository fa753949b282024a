from __future__ import annotations

from collections import abc
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class LazyBatchSequence(abc.Iterator, Generic[T]):
    """ A lazy iterator over batches (or rows) that knows its size without iterating

    Nothing is executed until the first item is pulled; every pull fetches at most one batch.
    The size is computed with a separate COUNT query.

    It cannot be restarted: once consumed, it stays consumed. Make another one.

    Example:
        batches = pluck_in_batches(connection, User, 'email', batch_size=100)
        batches.size()  #-> 3
        for index, emails in enumerate(batches):
            ...
    """

    def __init__(self, iterate: abc.Callable[[], abc.Iterator[T]], size: abc.Callable[[], int]):
        """
        Args:
            iterate: Function that starts the iteration: returns an iterator
            size: Function that computes the number of items
        """
        self._iterate = iterate
        self._size = size
        self._iterator: Optional[abc.Iterator[T]] = None

    __slots__ = '_iterate', '_size', '_iterator'

    def __iter__(self) -> LazyBatchSequence[T]:
        return self

    def __next__(self) -> T:
        if self._iterator is None:
            self._iterator = self._iterate()
        return next(self._iterator)

    def size(self) -> int:
        """ The number of items this sequence would produce. Executes a query. """
        return self._size()
