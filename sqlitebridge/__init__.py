"""Typed access to SQLite through its C interface.

    import sqlitebridge

    with sqlitebridge.open(":memory:") as connection:
        connection.execute("CREATE TABLE t(a INT, b TEXT)")
        connection.execute("INSERT INTO t VALUES (1, 'x')")
        for row in connection.select("SELECT a, b FROM t"):
            print(row.get("a", int), row.get("b", str))
"""

from ._ffi import ffi as _ffi, lib as _lib
from .connection import Connection, OpenFlags, enable_callback_tracebacks
from .errors import Error, EngineError, ConversionError, ProgrammingError
from .select import Select, Row, extract, register_extractor, NOT_CONVERTIBLE
from .statement import Statement, Cursor, State
from .value import Type, Value

__version__ = "0.1.0"

sqlite_version = str(_ffi.string(_lib.sqlite3_libversion()).decode('ascii'))
sqlite_version_info = tuple(int(x) for x in sqlite_version.split('.'))


def open(path):
    """Open a read-write connection to a new or existing database."""
    return Connection.open(path)


def version():
    """Return the version number of the SQLite library, e.g. 3045001."""
    return _lib.sqlite3_libversion_number()


__all__ = [
    'Connection', 'OpenFlags', 'enable_callback_tracebacks',
    'Error', 'EngineError', 'ConversionError', 'ProgrammingError',
    'Select', 'Row', 'extract', 'register_extractor', 'NOT_CONVERTIBLE',
    'Statement', 'Cursor', 'State',
    'Type', 'Value',
    'open', 'version', 'sqlite_version', 'sqlite_version_info',
]
