import ctypes.util
import os
import sys

from cffi import FFI

ffi = FFI()

ffi.cdef('''
#define SQLITE_OK 0
#define SQLITE_ERROR 1
#define SQLITE_INTERNAL 2
#define SQLITE_PERM 3
#define SQLITE_ABORT 4
#define SQLITE_BUSY 5
#define SQLITE_LOCKED 6
#define SQLITE_NOMEM 7
#define SQLITE_READONLY 8
#define SQLITE_INTERRUPT 9
#define SQLITE_IOERR 10
#define SQLITE_CORRUPT 11
#define SQLITE_NOTFOUND 12
#define SQLITE_FULL 13
#define SQLITE_CANTOPEN 14
#define SQLITE_PROTOCOL 15
#define SQLITE_EMPTY 16
#define SQLITE_SCHEMA 17
#define SQLITE_TOOBIG 18
#define SQLITE_CONSTRAINT 19
#define SQLITE_MISMATCH 20
#define SQLITE_MISUSE 21
#define SQLITE_NOLFS 22
#define SQLITE_AUTH 23
#define SQLITE_FORMAT 24
#define SQLITE_RANGE 25
#define SQLITE_NOTADB 26
#define SQLITE_NOTICE 27
#define SQLITE_WARNING 28
#define SQLITE_ROW 100
#define SQLITE_DONE 101

#define SQLITE_OPEN_READONLY 1
#define SQLITE_OPEN_READWRITE 2
#define SQLITE_OPEN_CREATE 4
#define SQLITE_OPEN_NOMUTEX 32768
#define SQLITE_OPEN_FULLMUTEX 65536

#define SQLITE_INTEGER 1
#define SQLITE_FLOAT 2
#define SQLITE_TEXT 3
#define SQLITE_BLOB 4
#define SQLITE_NULL 5

typedef struct sqlite3 sqlite3;
typedef struct sqlite3_stmt sqlite3_stmt;
typedef long long sqlite3_int64;
typedef void (*sqlite3_destructor_type)(void*);

const char *sqlite3_libversion(void);
int sqlite3_libversion_number(void);

int sqlite3_open_v2(const char *filename, sqlite3 **ppDb, int flags,
                    const char *zVfs);
int sqlite3_close(sqlite3 *);

int sqlite3_exec(sqlite3 *, const char *sql,
                 int (*callback)(void*, int, char**, char**),
                 void *, char **errmsg);
int sqlite3_changes(sqlite3 *);
int sqlite3_total_changes(sqlite3 *);

int sqlite3_busy_handler(sqlite3 *, int (*)(void*, int), void *);
int sqlite3_busy_timeout(sqlite3 *, int ms);

int sqlite3_errcode(sqlite3 *db);
const char *sqlite3_errmsg(sqlite3 *);

int sqlite3_prepare_v2(sqlite3 *db, const char *zSql, int nByte,
                       sqlite3_stmt **ppStmt, const char **pzTail);
int sqlite3_step(sqlite3_stmt *);
int sqlite3_reset(sqlite3_stmt *);
int sqlite3_finalize(sqlite3_stmt *);

int sqlite3_column_count(sqlite3_stmt *);
const char *sqlite3_column_name(sqlite3_stmt *, int N);
int sqlite3_column_type(sqlite3_stmt *, int iCol);
sqlite3_int64 sqlite3_column_int64(sqlite3_stmt *, int iCol);
double sqlite3_column_double(sqlite3_stmt *, int iCol);
const unsigned char *sqlite3_column_text(sqlite3_stmt *, int iCol);
const void *sqlite3_column_blob(sqlite3_stmt *, int iCol);
int sqlite3_column_bytes(sqlite3_stmt *, int iCol);
int sqlite3_data_count(sqlite3_stmt *);

int sqlite3_bind_parameter_count(sqlite3_stmt *);
int sqlite3_bind_parameter_index(sqlite3_stmt *, const char *zName);
int sqlite3_bind_null(sqlite3_stmt *, int);
int sqlite3_bind_int64(sqlite3_stmt *, int, sqlite3_int64);
int sqlite3_bind_double(sqlite3_stmt *, int, double);
int sqlite3_bind_text(sqlite3_stmt *, int, const char *, int,
                      sqlite3_destructor_type);
int sqlite3_bind_blob(sqlite3_stmt *, int, const void *, int n,
                      sqlite3_destructor_type);
int sqlite3_bind_zeroblob(sqlite3_stmt *, int, int n);
''')


LIBRARY_ENV = 'SQLITEBRIDGE_LIBRARY'


def _candidates():
    explicit = os.environ.get(LIBRARY_ENV)
    if explicit:
        yield explicit
        return
    yield 'libsqlite3.so.0'
    found = ctypes.util.find_library('sqlite3')
    if found:
        yield found
    if sys.platform == 'darwin':
        yield 'libsqlite3.dylib'
    elif sys.platform == 'win32':
        yield 'sqlite3.dll'
    # the stdlib extension module links the engine; its symbols resolve
    # through the dependency chain
    try:
        import _sqlite3
    except ImportError:
        return
    path = getattr(_sqlite3, '__file__', None)
    if path:
        yield path


def _load_library():
    tried = []
    for name in _candidates():
        try:
            library = ffi.dlopen(name)
            library.sqlite3_libversion_number
        except (OSError, AttributeError) as e:
            tried.append('%s (%s)' % (name, e))
            continue
        return library
    raise ImportError("could not load the SQLite shared library; tried: %s. "
                      "Set %s to its path." % (', '.join(tried) or 'nothing',
                                               LIBRARY_ENV))


lib = _load_library()

SQLITE_TRANSIENT = ffi.cast('sqlite3_destructor_type', -1)
