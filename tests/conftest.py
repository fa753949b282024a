import os
import pytest
import sqlalchemy as sa

from sapluck.sainfo.version import SA_14
from sapluck.testing import created_tables, insert

from .util.models import Base, User, Subscriber, Product, Package
from .util.models import USERS, SUBSCRIBERS, PRODUCTS, PACKAGES


@pytest.fixture(scope='function')
def engine() -> sa.engine.Engine:
    return sa.engine.create_engine(
        DATABASE_URL,
        # SA 1.4: 2.0 forward compatibility
        **(dict(future=True) if SA_14 else dict())
    )


@pytest.fixture(scope='function')
def connection(engine: sa.engine.Engine) -> sa.engine.Connection:
    with engine.connect() as conn:
        yield conn


@pytest.fixture(scope='function')
def db(connection: sa.engine.Connection) -> sa.engine.Connection:
    """ A connection to a database with tables and test data """
    with created_tables(connection, Base):
        insert(connection, User, *USERS)
        insert(connection, Subscriber, *SUBSCRIBERS)
        insert(connection, Product, *PRODUCTS)
        insert(connection, Package, *PACKAGES)
        yield connection


# URL of the database to connect to
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite://')
