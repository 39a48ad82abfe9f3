"""Tests for sqlitebridge.select"""

from typing import Optional

import pytest

from sqlitebridge import (Select, Row, Value, ConversionError, EngineError,
                          ProgrammingError, extract, register_extractor,
                          NOT_CONVERTIBLE)
from sqlitebridge import select as select_module


@pytest.fixture
def filled(con):
    con.execute('CREATE TABLE t(a INT, b TEXT)')
    con.execute("INSERT INTO t VALUES (1, 'x')")
    return con


VALUES = [
    Value.null(),
    Value.integer(5),
    Value.float(2.5),
    Value.text('x'),
    Value.blob(b'\x00\x01'),
]

ACCEPTED = {
    int: Value.integer(5),
    float: Value.float(2.5),
    str: Value.text('x'),
    bytes: Value.blob(b'\x00\x01'),
}


@pytest.mark.parametrize('kind', [int, float, str, bytes])
def test_extract_accepts_only_its_own_tag(kind):
    for value in VALUES:
        result = extract(value, kind)
        if value == ACCEPTED[kind]:
            assert result == value.to_python()
            assert type(result) is kind
        else:
            assert result is NOT_CONVERTIBLE


def test_extract_examples():
    assert extract(Value.text('x'), int) is NOT_CONVERTIBLE
    assert extract(Value.integer(5), int) == 5
    assert extract(Value.integer(5), float) is NOT_CONVERTIBLE
    assert extract(Value.float(5.0), int) is NOT_CONVERTIBLE
    assert extract(Value.null(), str) is NOT_CONVERTIBLE


def test_extract_value_is_identity():
    for value in VALUES:
        assert extract(value, Value) is value
    assert extract(Value.integer(1)) == Value.integer(1)


@pytest.mark.parametrize('kind', [int, float, str, bytes, Value])
def test_extract_optional(kind):
    assert extract(Value.null(), Optional[kind]) is None
    assert extract(Value.null(), kind | None) is None
    for value in VALUES[1:]:
        assert extract(value, Optional[kind]) == extract(value, kind)


def test_extract_unknown_kind():
    with pytest.raises(TypeError):
        extract(Value.integer(1), list)
    with pytest.raises(TypeError):
        extract(Value.integer(1), Optional[list])


def test_register_extractor(monkeypatch):
    monkeypatch.setattr(select_module, 'extractors',
                        dict(select_module.extractors))

    def extract_bool(value):
        data = value.as_integer()
        if data not in (0, 1):
            return NOT_CONVERTIBLE
        return bool(data)

    register_extractor(bool, extract_bool)
    assert extract(Value.integer(1), bool) is True
    assert extract(Value.integer(7), bool) is NOT_CONVERTIBLE
    assert extract(Value.null(), Optional[bool]) is None


def test_scenario_insert_then_select(filled):
    row = next(filled.select('SELECT a, b FROM t'))
    assert isinstance(row, Row)
    assert row.try_get('a', int) == 1
    assert row.try_get('b', str) == 'x'


def test_get_by_name_and_position_agree(con):
    con.execute('CREATE TABLE t(i INTEGER, f REAL, s TEXT, b BLOB, n)')
    con.execute("INSERT INTO t VALUES (7, 0.5, 'hello', x'0102', NULL)")
    row = next(con.select('SELECT i, f, s, b, n FROM t'))
    names = ['i', 'f', 's', 'b', 'n']
    assert row.keys() == names
    for i, name in enumerate(names):
        assert row.try_get(name) == row.try_get(i)
    assert row.get('i', int) == 7
    assert row.get(1, float) == 0.5
    assert row.get('s', str) == 'hello'
    assert row.get(3, bytes) == b'\x01\x02'
    assert row.get('n', Optional[str]) is None
    assert row.get('s', Optional[str]) == 'hello'
    assert row.get('n') == Value.null()


def test_try_get_unknown_column(filled):
    row = next(filled.select('SELECT a, b FROM t'))
    with pytest.raises(ConversionError) as excinfo:
        row.try_get('nonexistent_column', int)
    assert 'nonexistent_column' in str(excinfo.value)
    assert excinfo.value.code is None
    with pytest.raises(ConversionError):
        row.try_get(2, int)
    with pytest.raises(ConversionError):
        row.try_get(-1, int)


def test_get_unknown_column_is_programming_error(filled):
    row = next(filled.select('SELECT a, b FROM t'))
    with pytest.raises(ProgrammingError) as excinfo:
        row.get('nonexistent_column', int)
    assert 'nonexistent_column' in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ConversionError)


def test_type_mismatch_is_not_defaulted(filled):
    row = next(filled.select('SELECT a, b FROM t'))
    with pytest.raises(ConversionError) as excinfo:
        row.try_get('a', str)
    assert str(excinfo.value) == "column 'a' could not be read"
    with pytest.raises(ConversionError):
        row.try_get('b', Optional[int])
    with pytest.raises(ProgrammingError):
        row.get('a', float)


def test_column_index(filled):
    row = next(filled.select('SELECT a, b FROM t'))
    assert row.column_index('b') == 1
    with pytest.raises(ProgrammingError):
        row.column_index('nonexistent_column')
    with pytest.raises(TypeError):
        row.try_get(1.5)


def test_rows_share_columns_and_outlive_the_select(con):
    con.execute('CREATE TABLE t(a INT)')
    con.execute('INSERT INTO t VALUES (1), (2), (3)')
    rows = list(con.select('SELECT a FROM t ORDER BY a'))
    assert [row.get('a', int) for row in rows] == [1, 2, 3]
    assert rows[0].columns == rows[1].columns == {'a': 0}
    assert len(rows[0]) == 1
    assert list(rows[2]) == [Value.integer(3)]
    assert rows[0] == Row([Value.integer(1)], {'a': 0})


def test_select_is_single_pass(filled):
    select = filled.select('SELECT a FROM t')
    assert len(list(select)) == 1
    with pytest.raises(StopIteration):
        next(select)
    with pytest.raises(StopIteration):
        next(select)


def test_select_defers_prepare_error(con):
    select = con.select('SELEC nonsense')
    with pytest.raises(EngineError) as excinfo:
        next(select)
    assert 'syntax error' in excinfo.value.message
    with pytest.raises(StopIteration):
        next(select)
    assert list(select) == []


def test_select_error_while_stepping(con):
    select = con.select('SELECT abs(-9223372036854775807 - 1)')
    with pytest.raises(EngineError) as excinfo:
        next(select)
    assert 'integer overflow' in excinfo.value.message
    with pytest.raises(StopIteration):
        next(select)


def test_select_from_statement(con):
    statement = con.prepare('SELECT ? AS x')
    statement.bind(1, 'bound')
    rows = list(Select.from_statement(statement))
    assert [row.get('x', str) for row in rows] == ['bound']
    assert statement.finalized


def test_select_empty_result(con):
    con.execute('CREATE TABLE t(a INT)')
    assert list(con.select('SELECT a FROM t')) == []
