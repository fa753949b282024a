""" Batch iteration engine

* BatchIterator: fetches batches with keyset pagination
* BatchQuery: validated arguments of one iteration
* LazyBatchSequence: the lazy result you get when you give no callback
* BatchSettings: configuration
"""

from .iterator import BatchIterator
from .batch_query import BatchQuery
from .lazy import LazyBatchSequence
from .settings import BatchSettings
