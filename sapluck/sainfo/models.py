import sqlalchemy as sa
import sqlalchemy.orm

from sapluck.typing import SAModelOrAlias


def unaliased_class(Model: SAModelOrAlias) -> type:
    """ Get the actual model class; unaliased, if was

    Args:
         Model: model class or AliasedClass
    """
    return sa.inspect(Model).mapper.class_


def model_name(Model: SAModelOrAlias) -> str:
    """ Get the name of the Model for this class """
    # We can't do `Model.__name__` because we can be given a type of an aliased class
    return unaliased_class(Model).__name__


def model_table_name(Model: SAModelOrAlias) -> str:
    """ Get the name of the table the Model is mapped to

    For aliased classes, this is the alias name: that's what the columns are qualified with in a query
    """
    selectable = sa.inspect(Model).selectable
    return selectable.name
