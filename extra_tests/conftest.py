import pytest

import sqlitebridge


@pytest.fixture
def con():
    con = sqlitebridge.open(':memory:')
    yield con
    con.close()


@pytest.fixture
def db_path(tmpdir):
    return str(tmpdir.join('test.db'))


@pytest.fixture
def contended(db_path):
    """Two connections to one file; the first one holds the schema."""
    holder = sqlitebridge.open(db_path)
    holder.execute('CREATE TABLE t(a INTEGER)')
    waiter = sqlitebridge.open(db_path)
    yield holder, waiter
    waiter.close()
    holder.close()
