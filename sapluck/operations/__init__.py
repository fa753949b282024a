""" Operations that batch iteration is made of

* projection: select columns, find cursor columns among them
* condition: compare cursor columns to a tuple of values
* sort: batch order, and the order that the user has already set
"""

from .projection import NamedColumn, RawExpression, ColumnRef, column_ref
from .projection import ResolvedProjection, resolve_projection
from .condition import build_tuple_condition, boundary_operators, advance_operators
from .sort import SortingDirection, parse_directions, batch_order_clauses
from .sort import act_on_ignored_order, resolve_error_on_ignored_order
