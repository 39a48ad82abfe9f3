"""Exceptions raised by sqlitebridge and the glue that builds them from
native status codes."""

from ._ffi import ffi, lib

_error_names = {
    getattr(lib, name): name for name in [
        "SQLITE_ABORT",
        "SQLITE_AUTH",
        "SQLITE_BUSY",
        "SQLITE_CANTOPEN",
        "SQLITE_CONSTRAINT",
        "SQLITE_CORRUPT",
        "SQLITE_DONE",
        "SQLITE_EMPTY",
        "SQLITE_ERROR",
        "SQLITE_FORMAT",
        "SQLITE_FULL",
        "SQLITE_INTERNAL",
        "SQLITE_INTERRUPT",
        "SQLITE_IOERR",
        "SQLITE_LOCKED",
        "SQLITE_MISMATCH",
        "SQLITE_MISUSE",
        "SQLITE_NOLFS",
        "SQLITE_NOMEM",
        "SQLITE_NOTADB",
        "SQLITE_NOTFOUND",
        "SQLITE_NOTICE",
        "SQLITE_OK",
        "SQLITE_PERM",
        "SQLITE_PROTOCOL",
        "SQLITE_RANGE",
        "SQLITE_READONLY",
        "SQLITE_ROW",
        "SQLITE_SCHEMA",
        "SQLITE_TOOBIG",
        "SQLITE_WARNING",
    ]
}


class Error(Exception):
    """Base class of recoverable failures.

    Both attributes are optional: ``code`` is the engine status code when
    one is known and ``message`` is the human readable description.
    """

    def __init__(self, message=None, code=None):
        Exception.__init__(self, message, code)
        self.message = message
        self.code = code

    def __str__(self):
        if self.message is not None and self.code is not None:
            return "%s (code %d)" % (self.message, self.code)
        elif self.message is not None:
            return self.message
        elif self.code is not None:
            return "an SQLite error (code %d)" % (self.code,)
        return "an SQLite error"

    def __repr__(self):
        return "%s(message=%r, code=%r)" % (type(self).__name__,
                                            self.message, self.code)


class EngineError(Error):
    """A native call reported a status other than SQLITE_OK."""

    @property
    def name(self):
        return _error_names.get(self.code)


class ConversionError(Error):
    """A column is missing or holds a value of another type."""


class ProgrammingError(Exception):
    """Misuse by the caller.

    Not a subclass of Error: ``except Error`` never catches it.
    """


def last_error(db):
    if not db:
        return None
    code = lib.sqlite3_errcode(db)
    if code == lib.SQLITE_OK:
        return None
    message = lib.sqlite3_errmsg(db)
    if message:
        message = ffi.string(message).decode('utf-8', 'replace')
    else:
        message = None
    return EngineError(message, code)


def check(db, code):
    if code != lib.SQLITE_OK:
        raise last_error(db) or EngineError(code=code)


def to_cstr(text, what="query"):
    """Encode ``text`` for the engine, rejecting embedded terminators."""
    if isinstance(text, str):
        text = text.encode('utf-8')
    elif not isinstance(text, bytes):
        raise TypeError("%s must be str, not %s" % (what, type(text).__name__))
    if b'\x00' in text:
        raise Error("the %s contains a null character" % (what,))
    return text
