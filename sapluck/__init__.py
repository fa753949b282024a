from .source import QuerySource, query_source
from .engine import BatchIterator, BatchQuery, BatchSettings, LazyBatchSequence
from .operations import SortingDirection, NamedColumn, RawExpression
from .pluck import pluck_each, pluck_in_batches

from . import exc
