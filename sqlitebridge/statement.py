"""Prepared statements and the cursors that step through them."""

import logging
from enum import Enum

from ._ffi import ffi, lib, SQLITE_TRANSIENT
from .errors import Error, ProgrammingError, check, last_error, EngineError, \
    to_cstr
from .value import Type, Value

log = logging.getLogger(__name__)


class State(Enum):
    ROW = lib.SQLITE_ROW
    DONE = lib.SQLITE_DONE


class Statement(object):
    _statement = None

    def __init__(self, connection, sql):
        self.__con = connection
        c_sql = ffi.new("char[]", to_cstr(sql))
        statement_star = ffi.new('sqlite3_stmt **')
        ret = lib.sqlite3_prepare_v2(connection._db, c_sql, -1,
                                     statement_star, ffi.NULL)
        if ret != lib.SQLITE_OK:
            lib.sqlite3_finalize(statement_star[0])
            check(connection._db, ret)
        self._statement = statement_star[0]

        if not self._statement:
            # an empty statement, work around that, as it's the least trouble
            c_sql = ffi.new("char[]", b"select 42 where 42 = 23")
            ret = lib.sqlite3_prepare_v2(connection._db, c_sql, -1,
                                         statement_star, ffi.NULL)
            check(connection._db, ret)
            self._statement = statement_star[0]
            self.__column_count = 0
        else:
            self.__column_count = lib.sqlite3_column_count(self._statement)

        connection._remember_statement(self)
        log.debug("prepared %r", sql)

    def __del__(self):
        if self._statement:
            self.__con._finalize_statement(self)

    def _check(self):
        if not self._statement:
            raise ProgrammingError("Cannot operate on a finalized statement.")

    def finalize(self):
        if self._statement:
            self.__con._finalize_statement(self)

    @property
    def finalized(self):
        return not self._statement

    def column_count(self):
        self._check()
        return self.__column_count

    def column_name(self, i):
        self._check()
        self.__check_column(i)
        name = lib.sqlite3_column_name(self._statement, i)
        if not name:
            raise MemoryError
        return ffi.string(name).decode('utf-8')

    def column_names(self):
        return [self.column_name(i) for i in range(self.column_count())]

    def column_type(self, i):
        """Return the type of column ``i`` in the current row, or None when
        no row has been stepped to."""
        self._check()
        self.__check_column(i)
        if not lib.sqlite3_data_count(self._statement):
            return None
        return Type(lib.sqlite3_column_type(self._statement, i))

    def __check_column(self, i):
        if not 0 <= i < self.__column_count:
            raise IndexError("column index %d out of range" % (i,))

    def parameter_count(self):
        self._check()
        return lib.sqlite3_bind_parameter_count(self._statement)

    def parameter_index(self, name):
        """Return the 1-based index of the named parameter, or None."""
        self._check()
        index = lib.sqlite3_bind_parameter_index(self._statement,
                                                 to_cstr(name, "name"))
        return index or None

    def bind(self, index, value):
        self._check()
        if isinstance(index, str):
            position = self.parameter_index(index)
            if position is None:
                raise Error("no parameter named %r" % (index,))
            index = position
        value = Value.from_python(value)
        if value.type is Type.NULL:
            rc = lib.sqlite3_bind_null(self._statement, index)
        elif value.type is Type.INTEGER:
            rc = lib.sqlite3_bind_int64(self._statement, index,
                                        value.as_integer())
        elif value.type is Type.FLOAT:
            rc = lib.sqlite3_bind_double(self._statement, index,
                                         value.as_float())
        elif value.type is Type.TEXT:
            data = value.as_string().encode('utf-8')
            rc = lib.sqlite3_bind_text(self._statement, index, data,
                                       len(data), SQLITE_TRANSIENT)
        else:
            data = value.as_binary()
            if data:
                rc = lib.sqlite3_bind_blob(self._statement, index, data,
                                           len(data), SQLITE_TRANSIENT)
            else:
                rc = lib.sqlite3_bind_zeroblob(self._statement, index, 0)
        check(self.__con._db, rc)
        return self

    def next(self):
        self._check()
        ret = lib.sqlite3_step(self._statement)
        if ret == lib.SQLITE_ROW:
            return State.ROW
        elif ret == lib.SQLITE_DONE:
            return State.DONE
        raise last_error(self.__con._db) or EngineError(code=ret)

    def read(self, i):
        self._check()
        self.__check_column(i)
        statement = self._statement
        typ = lib.sqlite3_column_type(statement, i)
        if typ == lib.SQLITE_NULL:
            return Value.null()
        elif typ == lib.SQLITE_INTEGER:
            return Value.integer(int(lib.sqlite3_column_int64(statement, i)))
        elif typ == lib.SQLITE_FLOAT:
            return Value.float(lib.sqlite3_column_double(statement, i))
        elif typ == lib.SQLITE_TEXT:
            text = lib.sqlite3_column_text(statement, i)
            text_len = lib.sqlite3_column_bytes(statement, i)
            data = ffi.buffer(text, text_len)[:] if text_len else b''
            try:
                return Value.text(data.decode('utf-8'))
            except UnicodeDecodeError:
                raise Error("Could not decode to UTF-8 column '%s'"
                            % (self.column_name(i),))
        elif typ == lib.SQLITE_BLOB:
            blob = lib.sqlite3_column_blob(statement, i)
            blob_len = lib.sqlite3_column_bytes(statement, i)
            return Value.blob(ffi.buffer(blob, blob_len)[:] if blob_len
                              else b'')
        raise EngineError("unknown column type %d" % (typ,))

    def reset(self):
        self._check()
        check(self.__con._db, lib.sqlite3_reset(self._statement))
        return self

    def into_cursor(self):
        return Cursor(self)


class Cursor(object):
    """Forward-only rows of a statement, each a tuple of Value."""

    def __init__(self, statement):
        self.__statement = statement
        self.__done = False

    @property
    def statement(self):
        return self.__statement

    def column_count(self):
        return self.__statement.column_count()

    def column_names(self):
        return self.__statement.column_names()

    def bind(self, values):
        self.__statement.reset()
        for i, value in enumerate(values):
            self.__statement.bind(i + 1, value)
        self.__done = False
        return self

    def fetchone(self):
        if self.__done:
            return None
        statement = self.__statement
        try:
            state = statement.next()
        except Error:
            self.__done = True
            raise
        if state is State.DONE:
            self.__done = True
            return None
        return tuple(statement.read(i)
                     for i in range(statement.column_count()))

    def fetchall(self):
        return list(self)

    def __iter__(self):
        return self

    def __next__(self):
        row = self.fetchone()
        if row is None:
            raise StopIteration
        return row
