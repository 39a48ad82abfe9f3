"""Lazy row sequences with typed, fallible column access.

    for row in connection.select("SELECT a, b FROM t"):
        a = row.try_get("a", int)
        b = row.try_get(1, Optional[str])
"""

import types
import typing
from types import MappingProxyType

from .errors import Error, ConversionError, ProgrammingError
from .value import Value

NoneType = type(None)

NOT_CONVERTIBLE = object()

extractors = {}


def register_extractor(kind, callable):
    """Register ``callable(value)`` as the conversion of a Value to ``kind``.

    The callable returns the converted object, or NOT_CONVERTIBLE when the
    value cannot be represented as ``kind``.
    """
    extractors[kind] = callable


def register_default_extractors():
    def extract_value(value):
        return value

    def extract_int(value):
        data = value.as_integer()
        return NOT_CONVERTIBLE if data is None else data

    def extract_float(value):
        data = value.as_float()
        return NOT_CONVERTIBLE if data is None else data

    def extract_str(value):
        data = value.as_string()
        return NOT_CONVERTIBLE if data is None else data

    def extract_bytes(value):
        data = value.as_binary()
        return NOT_CONVERTIBLE if data is None else data

    register_extractor(Value, extract_value)
    register_extractor(int, extract_int)
    register_extractor(float, extract_float)
    register_extractor(str, extract_str)
    register_extractor(bytes, extract_bytes)


def _optional_of(kind):
    # Optional[T] and T | None
    if typing.get_origin(kind) not in (typing.Union, types.UnionType):
        return None
    args = typing.get_args(kind)
    if len(args) != 2 or NoneType not in args:
        return None
    return args[0] if args[1] is NoneType else args[1]


def extract(value, kind=Value):
    """Convert ``value`` to ``kind`` or return NOT_CONVERTIBLE.

    ``Optional[T]`` turns NULL into None and defers anything else to ``T``.
    """
    inner = _optional_of(kind)
    if inner is not None:
        if value.is_null:
            return None
        return extract(value, inner)
    try:
        extractor = extractors[kind]
    except (KeyError, TypeError):
        raise TypeError("no extractor registered for %r" % (kind,))
    return extractor(value)


class Row(object):
    def __init__(self, values, columns):
        self.values = tuple(values)
        self.__columns = columns

    @property
    def columns(self):
        return MappingProxyType(self.__columns)

    def keys(self):
        return sorted(self.__columns, key=self.__columns.__getitem__)

    def column_index(self, name):
        """Return the position of column ``name``.

        The columns of a query are fixed, so an unknown name is a bug in the
        caller and raises ProgrammingError.
        """
        try:
            return self.__columns[name]
        except KeyError:
            raise ProgrammingError("no column named %r" % (name,))

    def __lookup(self, column):
        if isinstance(column, str):
            index = self.__columns.get(column)
        elif isinstance(column, int) and not isinstance(column, bool):
            index = column if 0 <= column < len(self.values) else None
        else:
            raise TypeError("column must be str or int, not '%s'"
                            % (type(column).__name__,))
        if index is None:
            return NOT_CONVERTIBLE
        return self.values[index]

    def try_get(self, column, kind=Value):
        """Read ``column`` (a name or a zero-based position) as ``kind``.

        Raises ConversionError when the column does not exist or holds a
        value that does not convert.
        """
        value = self.__lookup(column)
        if value is not NOT_CONVERTIBLE:
            result = extract(value, kind)
            if result is not NOT_CONVERTIBLE:
                return result
        raise ConversionError("column %r could not be read" % (column,))

    def get(self, column, kind=Value):
        """Like try_get(), for columns known to exist and convert; a failure
        raises ProgrammingError."""
        try:
            return self.try_get(column, kind)
        except ConversionError as e:
            raise ProgrammingError(str(e)) from e

    def __len__(self):
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __eq__(self, other):
        if not isinstance(other, Row):
            return NotImplemented
        return (self.values == other.values and
                self.__columns == other.__columns)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(tuple(self.keys())) ^ hash(self.values)

    def __repr__(self):
        return 'Row(%s)' % ', '.join('%s=%r' % (name, self.values[index])
                                     for name, index in
                                     sorted(self.__columns.items(),
                                            key=lambda item: item[1]))


def _columns_map(statement):
    return {statement.column_name(i): i
            for i in range(statement.column_count())}


class Select(object):
    """Single-pass iterator of Row.

    An error preparing the query is raised by the first next(); after that,
    or after the last row, the iterator stays exhausted.
    """

    def __init__(self, connection, query):
        try:
            statement = connection.prepare(query)
        except Error as e:
            self.__cursor = None
            self.__columns = {}
            self.__error = e
        else:
            self.__start(statement)

    @classmethod
    def from_statement(cls, statement):
        self = object.__new__(cls)
        self.__start(statement)
        return self

    def __start(self, statement):
        self.__columns = _columns_map(statement)
        self.__cursor = statement.into_cursor()
        self.__error = None

    def __finish(self):
        cursor, self.__cursor = self.__cursor, None
        if cursor is not None:
            cursor.statement.finalize()

    def __iter__(self):
        return self

    def __next__(self):
        if self.__error is not None:
            error, self.__error = self.__error, None
            raise error
        if self.__cursor is None:
            raise StopIteration
        try:
            values = self.__cursor.fetchone()
        except Error:
            self.__finish()
            raise
        if values is None:
            self.__finish()
            raise StopIteration
        return Row(values, self.__columns)


register_default_extractors()
