from enum import IntEnum

from ._ffi import lib


class Type(IntEnum):
    """Fundamental column types, numbered as the engine numbers them."""
    INTEGER = lib.SQLITE_INTEGER
    FLOAT = lib.SQLITE_FLOAT
    TEXT = lib.SQLITE_TEXT
    BLOB = lib.SQLITE_BLOB
    NULL = lib.SQLITE_NULL


class Value(object):
    """One dynamically typed value: NULL, INTEGER, FLOAT, TEXT or BLOB.

    The ``as_*`` accessors return None when the tag does not match; they
    never coerce.
    """
    __slots__ = ('type', '_data')

    def __init__(self, type, data=None):
        type = Type(type)
        if type is Type.NULL:
            data = None
        elif type is Type.INTEGER:
            if isinstance(data, bool) or not isinstance(data, int):
                raise TypeError("INTEGER value must be int, not %s"
                                % (data.__class__.__name__,))
        elif type is Type.FLOAT:
            if not isinstance(data, float):
                raise TypeError("FLOAT value must be float, not %s"
                                % (data.__class__.__name__,))
        elif type is Type.TEXT:
            if not isinstance(data, str):
                raise TypeError("TEXT value must be str, not %s"
                                % (data.__class__.__name__,))
        elif type is Type.BLOB:
            if not isinstance(data, (bytes, bytearray, memoryview)):
                raise TypeError("BLOB value must be bytes, not %s"
                                % (data.__class__.__name__,))
            data = bytes(data)
        self.type = type
        self._data = data

    @classmethod
    def null(cls):
        return cls(Type.NULL)

    @classmethod
    def integer(cls, data):
        return cls(Type.INTEGER, data)

    @classmethod
    def float(cls, data):
        return cls(Type.FLOAT, data)

    @classmethod
    def text(cls, data):
        return cls(Type.TEXT, data)

    @classmethod
    def blob(cls, data):
        return cls(Type.BLOB, data)

    @classmethod
    def from_python(cls, obj):
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.integer(int(obj))
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.float(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.blob(obj)
        raise TypeError("type '%s' is not supported" % (type(obj).__name__,))

    @property
    def is_null(self):
        return self.type is Type.NULL

    def as_integer(self):
        if self.type is Type.INTEGER:
            return self._data
        return None

    def as_float(self):
        if self.type is Type.FLOAT:
            return self._data
        return None

    def as_string(self):
        if self.type is Type.TEXT:
            return self._data
        return None

    def as_binary(self):
        if self.type is Type.BLOB:
            return self._data
        return None

    def to_python(self):
        return self._data

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self.type is other.type and self._data == other._data

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((self.type, self._data))

    def __repr__(self):
        if self.type is Type.NULL:
            return 'Value.null()'
        return 'Value.%s(%r)' % (self.type.name.lower(), self._data)
