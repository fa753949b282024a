import sqlalchemy as sa


class BaseSapluckException(Exception):
    pass


class InvalidArgumentError(BaseSapluckException, ValueError):
    """ Invalid arguments provided by the developer

    Reported before any query is executed: no columns to pluck, unknown sort direction, bad batch size, etc
    """


class InvalidColumnError(InvalidArgumentError):
    """ A cursor column mentioned by name is not found on the SqlAlchemy model """

    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super().__init__(f'Invalid column "{column_name}" for "{model}" specified in {where}')


class InvalidOrderError(BaseSapluckException):
    """ The query source has its own ORDER BY, but it is going to be replaced with the batch order

    Only reported when the "error on ignored order" policy says so
    """


# Errors from the database are not wrapped: they propagate as is
ExecutionError = sa.exc.SQLAlchemyError
