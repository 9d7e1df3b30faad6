"""
Unit tests for PostgreSQL SQL generation.
"""
import pytest
from sqlstruct.dialect import PostgresDialect
from sqlstruct.exceptions import ValidationError
from sqlstruct.types import Field, FieldType


@pytest.fixture
def dialect():
    return PostgresDialect()


def test_create(dialect):
    actual = dialect.create_table('tableA', [
        Field(FieldType.INT32, 'userid', True),
        Field(FieldType.INT32, 'userdataid', True),
        Field(FieldType.STRING, 'info', False),
        Field(FieldType.FLOAT64, 'score', False),
        Field(FieldType.TIMESTAMP, 'created', False),
        ])
    expected = ('CREATE TABLE tableA (\n'
                'userid INTEGER NOT NULL,\n'
                'userdataid INTEGER NOT NULL,\n'
                'info TEXT NULL,\n'
                'score DOUBLE PRECISION NULL,\n'
                'created TIMESTAMPTZ NULL,\n'
                'PRIMARY KEY(userid,userdataid));')
    assert actual == expected


def test_alter(dialect):
    actual = dialect.alter_table('tableA', [
        Field(FieldType.BOOLEAN, 'flag'),
        Field(FieldType.BYTES, 'data'),
        ])
    assert actual == ['ALTER TABLE tableA\n'
                      'ADD COLUMN flag BOOLEAN NULL,\n'
                      'ADD COLUMN data BYTEA NULL;']


def test_upsert(dialect):
    actual = dialect.upsert_query('Customer', ['name', 'salary', 'address'], ['id'])
    assert actual == ('INSERT INTO Customer (name,salary,address,id) VALUES (%s,%s,%s,%s) '
                      'ON CONFLICT (id) DO UPDATE SET name=EXCLUDED.name,salary=EXCLUDED.salary,'
                      'address=EXCLUDED.address')


def test_upsert_composite_key(dialect):
    actual = dialect.upsert_query('Book', ['pages'], ['author', 'title'])
    assert actual == ('INSERT INTO Book (pages,author,title) VALUES (%s,%s,%s) '
                      'ON CONFLICT (author,title) DO UPDATE SET pages=EXCLUDED.pages')


def test_upsert_empty_keys(dialect):
    with pytest.raises(ValidationError):
        dialect.upsert_query('Customer', ['name'], [])


if __name__ == '__main__':
    __import__('pytest').main([__file__])
