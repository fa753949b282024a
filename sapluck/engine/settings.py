from __future__ import annotations

import dataclasses
import logging
from typing import Optional

import sqlalchemy as sa


@dataclasses.dataclass
class BatchSettings:
    """ Settings for batch iteration

    This object is the explicit alternative to global configuration: create one, give it to the BatchIterator.
    Subclass it to customize statements.
    """
    # The default number of rows per batch
    batch_size: int = 1000

    # Raise an error when the source has its own ORDER BY, which batch iteration is going to ignore?
    # Used when neither the argument nor the source say otherwise
    error_on_ignored_order: bool = False

    # Where to report an ignored order when it's not an error.
    # Set to `None` to ignore silently.
    logger: Optional[logging.Logger] = dataclasses.field(default_factory=lambda: logging.getLogger('sapluck'))

    def customize_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Callback that customizes every statement right before it is executed

        Used by: BatchIterator, for batch queries and count queries.

        Default behavior: none
        You can override this method for custom behavior: e.g. add execution options
        """
        return stmt
