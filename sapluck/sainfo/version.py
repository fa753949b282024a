""" SqlAlchemy version tools """

from sqlalchemy import __version__ as SA_VERSION

# SqlAlchemy version tuple
SA_VERSION_TUPLE: tuple[int, ...] = tuple(int(v) for v in SA_VERSION.split('.')[:3] if v.isdigit())

# SqlAlchemy minor version: 1.X or 2.X
SA_VERSION_MINOR: tuple[int, int] = SA_VERSION_TUPLE[:2]  # type: ignore

# SqlAlchemy version bools
SA_14 = SA_VERSION_MINOR == (1, 4)
