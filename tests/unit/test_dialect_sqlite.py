"""
Unit tests for SQLite SQL generation.
"""
import pytest
from sqlstruct.dialect import SQLiteDialect
from sqlstruct.exceptions import ValidationError
from sqlstruct.types import Field, FieldType


@pytest.fixture
def dialect():
    return SQLiteDialect()


def test_type_map(dialect):
    """Test every integer width shares NUMERIC affinity"""
    assert [dialect.sql_type(t) for t in (FieldType.INT8, FieldType.INT16,
                                          FieldType.INT32, FieldType.INT64,
                                          FieldType.BOOLEAN)] == ['NUMERIC'] * 5
    assert dialect.sql_type(FieldType.FLOAT32) == 'REAL'
    assert dialect.sql_type(FieldType.STRING) == 'TEXT'
    assert dialect.sql_type(FieldType.BYTES) == 'BLOB'


def test_create_multiple_pk_columns(dialect):
    actual = dialect.create_table('tableA', [
        Field(FieldType.INT32, 'userid', True),
        Field(FieldType.INT32, 'userdataid', True),
        Field(FieldType.STRING, 'info', False),
        ])
    expected = ('CREATE TABLE tableA (\n'
                'userid NUMERIC NOT NULL ,\n'
                'userdataid NUMERIC NOT NULL ,\n'
                'info TEXT NULL,\n'
                'PRIMARY KEY(userid,userdataid));')
    assert actual == expected


def test_create_last_column_primary_key(dialect):
    actual = dialect.create_table('tableA', [
        Field(FieldType.STRING, 'info', False),
        Field(FieldType.INT64, 'userid', True),
        ])
    expected = ('CREATE TABLE tableA (\n'
                'info TEXT NULL,\n'
                'userid NUMERIC NOT NULL ,\n'
                'PRIMARY KEY(userid));')
    assert actual == expected


def test_create_without_primary_key(dialect):
    actual = dialect.create_table('tableA', [
        Field(FieldType.STRING, 'info'),
        Field(FieldType.DATE, 'day'),
        ])
    assert actual == 'CREATE TABLE tableA (\ninfo TEXT NULL,\nday DATE NULL);'


def test_alter_one_statement_per_field(dialect):
    actual = dialect.alter_table('tableA', [
        Field(FieldType.INT32, 'col1'),
        Field(FieldType.FLOAT64, 'col2'),
        Field(FieldType.STRING, 'col3'),
        ])
    assert actual == [
        'ALTER TABLE tableA ADD col1 NUMERIC NULL;',
        'ALTER TABLE tableA ADD col2 REAL NULL;',
        'ALTER TABLE tableA ADD col3 TEXT NULL;',
        ]


def test_alter_empty_fields(dialect):
    with pytest.raises(ValidationError):
        dialect.alter_table('tableA', [])


def test_upsert(dialect):
    actual = dialect.upsert_query('Customer', ['name', 'salary', 'address'], ['id'])
    assert actual == ('update or ignore Customer set name=?,salary=?,address=? where id=?\n'
                      ';insert or ignore into Customer(name,salary,address,id) values (?,?,?,?)')


def test_upsert_composite_key(dialect):
    actual = dialect.upsert_query('Book', ['ISBN', 'year'], ['author', 'title'])
    assert actual == ('update or ignore Book set ISBN=?,year=? where author=? and title=?\n'
                      ';insert or ignore into Book(ISBN,year,author,title) values (?,?,?,?)')


def test_split_statements(dialect):
    query = dialect.upsert_query('T', ['a'], ['id'])
    assert SQLiteDialect.split_statements(query) == [
        'update or ignore T set a=? where id=?',
        'insert or ignore into T(a,id) values (?,?)',
        ]


@pytest.mark.parametrize(('table', 'non_key', 'keys'), [
    (None, ['a'], ['id']),
    ('  ', ['a'], ['id']),
    ('T', [], ['id']),
    ('T', ['a'], []),
    ('T', ['a'], None),
    ])
def test_upsert_invalid_arguments(dialect, table, non_key, keys):
    with pytest.raises(ValidationError):
        dialect.upsert_query(table, non_key, keys)


if __name__ == '__main__':
    __import__('pytest').main([__file__])
