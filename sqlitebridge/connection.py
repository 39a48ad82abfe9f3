import logging
import os
import weakref
from functools import wraps

from ._ffi import ffi, lib
from .errors import ProgrammingError, EngineError, check, last_error, to_cstr
from .select import Select
from .statement import Statement

log = logging.getLogger(__name__)

_enable_callback_tracebacks = [0]


def enable_callback_tracebacks(enable, /):
    """Enable or disable logging of exceptions raised by callbacks with
    their traceback at ERROR level.
    """
    _enable_callback_tracebacks[0] = int(enable)


def _report_callback_error(callback, exc):
    if _enable_callback_tracebacks[0]:
        log.error("exception in callback %r", callback, exc_info=exc)
    else:
        log.debug("exception in callback %r: %s", callback, exc)


class OpenFlags(object):
    """Flags for opening a database connection.

    Every setter returns a new OpenFlags, so they chain:
    ``OpenFlags.new().set_create().set_read_write()``.
    """
    __slots__ = ('bits',)

    def __init__(self, bits=0):
        self.bits = bits

    @classmethod
    def new(cls):
        return cls()

    def __with(self, flag):
        return OpenFlags(self.bits | flag)

    def set_create(self):
        """Create the database if it does not already exist."""
        return self.__with(lib.SQLITE_OPEN_CREATE)

    def set_full_mutex(self):
        """Open the database in the serialized threading mode."""
        return self.__with(lib.SQLITE_OPEN_FULLMUTEX)

    def set_no_mutex(self):
        """Open the database in the multi-thread threading mode."""
        return self.__with(lib.SQLITE_OPEN_NOMUTEX)

    def set_read_only(self):
        return self.__with(lib.SQLITE_OPEN_READONLY)

    def set_read_write(self):
        return self.__with(lib.SQLITE_OPEN_READWRITE)

    def __eq__(self, other):
        if not isinstance(other, OpenFlags):
            return NotImplemented
        return self.bits == other.bits

    def __hash__(self):
        return hash(self.bits)

    def __repr__(self):
        return 'OpenFlags(0x%x)' % (self.bits,)


class _RowCallback(object):
    def __init__(self, callback):
        self.callback = callback
        self.stopped = False
        self.error = None


@ffi.callback("int(void*, int, char**, char**)", error=1)
def _process_callback(userdata, count, values, columns):
    context = ffi.from_handle(userdata)
    try:
        pairs = []
        for i in range(count):
            column = ffi.string(columns[i]).decode('utf-8')
            value = values[i]
            if value:
                value = ffi.string(value).decode('utf-8')
            else:
                value = None
            pairs.append((column, value))
        if context.callback(pairs):
            return 0
        context.stopped = True
    except BaseException as e:
        context.error = e
    return 1


@ffi.callback("int(void*, int)", error=0)
def _busy_callback(userdata, attempts):
    callback = ffi.from_handle(userdata)
    try:
        return 1 if callback(attempts) else 0
    except Exception as e:
        _report_callback_error(callback, e)
        return 0


class Connection(object):
    """A database connection.

    Owns the native handle from a successful open until close(); leaving a
    ``with`` block or garbage collection closes it as well.
    """
    _db = None
    _busy_handle = None

    def __init__(self, path, flags=None):
        if flags is None:
            flags = OpenFlags.new().set_create().set_read_write()
        c_path = to_cstr(os.fsencode(path), "path")
        db_star = ffi.new('sqlite3 **')
        rc = lib.sqlite3_open_v2(c_path, db_star, flags.bits, ffi.NULL)
        if rc != lib.SQLITE_OK:
            error = last_error(db_star[0]) or EngineError(code=rc)
            lib.sqlite3_close(db_star[0])
            raise error
        self._db = db_star[0]
        self.__statements = weakref.WeakSet()
        self.__rawstatements = set()
        log.debug("opened %r with %r", path, flags)

    @classmethod
    def open(cls, path):
        """Open a read-write connection to a new or existing database."""
        return cls(path)

    @classmethod
    def open_with_flags(cls, path, flags):
        return cls(path, flags)

    def __del__(self):
        self.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        self.close()

    def close(self):
        if not self._db:
            return
        db = self._db
        if self._busy_handle is not None:
            rc = lib.sqlite3_busy_handler(db, ffi.NULL, ffi.NULL)
            if rc != lib.SQLITE_OK:
                log.warning("failed to clear the busy handler: %s",
                            last_error(db) or EngineError(code=rc))
            self._busy_handle = None
        for statement in list(self.__statements):
            self._finalize_statement(statement)
        self.__statements.clear()
        # the statements' weakrefs may be already dead while their __del__
        # has not run yet; the raw pointers are still in __rawstatements
        for raw in list(self.__rawstatements):
            self._finalize_raw_statement(raw)
        self._db = None
        rc = lib.sqlite3_close(db)
        if rc != lib.SQLITE_OK:
            log.warning("failed to close the database: %s",
                        last_error(db) or EngineError(code=rc))
        else:
            log.debug("closed connection %r", self)

    @property
    def closed(self):
        return not self._db

    def _check_closed(self):
        if not self._db:
            raise ProgrammingError("Cannot operate on a closed database.")

    def _check_closed_wrap(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            self._check_closed()
            return func(self, *args, **kwargs)
        return wrapper

    def _remember_statement(self, statement):
        self.__rawstatements.add(statement._statement)
        self.__statements.add(statement)

    def _finalize_statement(self, statement):
        self.__statements.discard(statement)
        raw, statement._statement = statement._statement, None
        if raw:
            self._finalize_raw_statement(raw)

    def _finalize_raw_statement(self, raw):
        try:
            self.__rawstatements.remove(raw)
        except KeyError:
            return    # already finalized by close()
        lib.sqlite3_finalize(raw)

    @_check_closed_wrap
    def execute(self, sql):
        """Execute one or more statements, discarding any rows."""
        c_sql = ffi.new("char[]", to_cstr(sql))
        check(self._db, lib.sqlite3_exec(self._db, c_sql, ffi.NULL, ffi.NULL,
                                         ffi.NULL))

    @_check_closed_wrap
    def iterate(self, sql, callback):
        """Execute ``sql`` and hand each row to ``callback`` as text.

        The callback receives a list of ``(column, value)`` pairs where value
        is None for NULL. Returning a false value stops the iteration without
        an error; an exception raised by the callback stops it too and is
        re-raised here.
        """
        c_sql = ffi.new("char[]", to_cstr(sql))
        context = _RowCallback(callback)
        handle = ffi.new_handle(context)
        ret = lib.sqlite3_exec(self._db, c_sql, _process_callback, handle,
                               ffi.NULL)
        if context.error is not None:
            raise context.error
        if ret == lib.SQLITE_ABORT and context.stopped:
            return
        check(self._db, ret)

    @_check_closed_wrap
    def prepare(self, sql):
        return Statement(self, sql)

    @_check_closed_wrap
    def change_count(self):
        """Return the number of rows changed by the most recent INSERT,
        UPDATE or DELETE."""
        return lib.sqlite3_changes(self._db)

    @_check_closed_wrap
    def total_change_count(self):
        """Return the number of rows changed since the connection was
        opened."""
        return lib.sqlite3_total_changes(self._db)

    @_check_closed_wrap
    def set_busy_handler(self, callback):
        """Set a callback for busy events.

        ``callback(attempts)`` is called with the number of prior attempts
        whenever the database is locked by another connection; returning a
        true value retries the operation. The previous handler is removed,
        and released, before the new one is registered.
        """
        if not callable(callback):
            raise TypeError("parameter must be callable")
        self.remove_busy_handler()
        handle = ffi.new_handle(callback)
        check(self._db, lib.sqlite3_busy_handler(self._db, _busy_callback,
                                                 handle))
        self._busy_handle = handle

    @_check_closed_wrap
    def set_busy_timeout(self, milliseconds):
        """Retry operations on busy events until ``milliseconds`` have
        elapsed. Replaces any handler set with set_busy_handler()."""
        check(self._db, lib.sqlite3_busy_timeout(self._db, int(milliseconds)))
        self._busy_handle = None

    @_check_closed_wrap
    def remove_busy_handler(self):
        check(self._db, lib.sqlite3_busy_handler(self._db, ffi.NULL,
                                                 ffi.NULL))
        self._busy_handle = None

    @_check_closed_wrap
    def select(self, query):
        """Return a lazy Select over the rows of ``query``."""
        return Select(self, query)
