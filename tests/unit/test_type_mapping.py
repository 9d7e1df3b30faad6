"""
Unit tests for column type resolution.
"""
import pytest
from sqlstruct.adapters.type_mapping import TYPE_RULES, UNSUPPORTED, decimal_scale
from sqlstruct.adapters.type_mapping import get_rule, narrow_numeric
from sqlstruct.adapters.type_mapping import resolve_field, resolve_postgres_type
from sqlstruct.adapters.type_mapping import resolve_sqlite_type, supported_sql_types
from sqlstruct.converter import convert_schema
from sqlstruct.types import FieldType, Nullability, SqlType

CANONICAL_TYPES = [
    (SqlType.BIT, FieldType.BOOLEAN),
    (SqlType.BOOLEAN, FieldType.BOOLEAN),
    (SqlType.TINYINT, FieldType.INT8),
    (SqlType.SMALLINT, FieldType.INT16),
    (SqlType.INTEGER, FieldType.INT32),
    (SqlType.BIGINT, FieldType.INT64),
    (SqlType.REAL, FieldType.FLOAT32),
    (SqlType.FLOAT, FieldType.FLOAT64),
    (SqlType.DOUBLE, FieldType.FLOAT64),
    (SqlType.NUMERIC, FieldType.DECIMAL),
    (SqlType.DECIMAL, FieldType.DECIMAL),
    (SqlType.CHAR, FieldType.STRING),
    (SqlType.VARCHAR, FieldType.STRING),
    (SqlType.LONGVARCHAR, FieldType.STRING),
    (SqlType.NCHAR, FieldType.STRING),
    (SqlType.NVARCHAR, FieldType.STRING),
    (SqlType.LONGNVARCHAR, FieldType.STRING),
    (SqlType.CLOB, FieldType.STRING),
    (SqlType.NCLOB, FieldType.STRING),
    (SqlType.DATALINK, FieldType.STRING),
    (SqlType.SQLXML, FieldType.STRING),
    (SqlType.BINARY, FieldType.BYTES),
    (SqlType.VARBINARY, FieldType.BYTES),
    (SqlType.LONGVARBINARY, FieldType.BYTES),
    (SqlType.BLOB, FieldType.BYTES),
    (SqlType.DATE, FieldType.DATE),
    (SqlType.TIME, FieldType.TIME),
    (SqlType.TIMESTAMP, FieldType.TIMESTAMP),
    (SqlType.ARRAY, FieldType.ARRAY),
    ]


class TestSchemaMapping:
    """Test single-column schema mapping for every supported type code."""

    @pytest.mark.parametrize(('sql_type', 'expected'), CANONICAL_TYPES)
    @pytest.mark.parametrize(('nullable', 'optional'), [
        (Nullability.NO_NULLS, False),
        (Nullability.NULLABLE, True),
        (Nullability.UNKNOWN, True),
        ])
    def test_single_column(self, make_column, sql_type, expected, nullable, optional):
        column = make_column(sql_type, name='c1', nullable=nullable)
        schema = convert_schema('t', [column])

        assert len(schema) == 1
        field = schema.fields[0]
        assert field.name == 'c1'
        assert field.type == expected
        assert field.optional is optional

    @pytest.mark.parametrize('type_name', ['json', 'jsonb', 'uuid', 'JSONB', 'Uuid'])
    def test_string_convertible_other(self, make_column, type_name):
        column = make_column(SqlType.OTHER, type_name=type_name)
        schema = convert_schema('t', [column])
        assert [f.type for f in schema.fields] == [FieldType.STRING]

    @pytest.mark.parametrize('column_kwargs', [
        {'sql_type': SqlType.OTHER, 'type_name': 'XML-VENDOR-EXT'},
        {'sql_type': SqlType.OTHER, 'type_name': None},
        {'sql_type': SqlType.NULL},
        {'sql_type': SqlType.JAVA_OBJECT},
        {'sql_type': SqlType.DISTINCT},
        {'sql_type': SqlType.STRUCT},
        {'sql_type': SqlType.REF},
        {'sql_type': SqlType.ROWID},
        {'sql_type': 9999},
        ])
    def test_unsupported_column_is_skipped(self, make_column, column_kwargs):
        column = make_column(**column_kwargs)
        schema = convert_schema('t', [column])
        assert len(schema) == 0

    def test_unsupported_column_logs_warning(self, make_column, caplog):
        column = make_column(SqlType.STRUCT, name='address')
        with caplog.at_level('WARNING', logger='sqlstruct.converter'):
            convert_schema('t', [column])
        assert 'address' in caplog.text

    def test_label_preferred_over_name(self, make_column):
        column = make_column(SqlType.INTEGER, name='user_id', label='id')
        assert convert_schema('t', [column]).field_names() == ['id']

    def test_empty_label_falls_back_to_name(self, make_column):
        column = make_column(SqlType.INTEGER, name='user_id', label='')
        assert convert_schema('t', [column]).field_names() == ['user_id']

    def test_field_order_follows_columns(self, make_column):
        columns = [
            make_column(SqlType.VARCHAR, name='b', index=0),
            make_column(SqlType.STRUCT, name='skip', index=1),
            make_column(SqlType.INTEGER, name='a', index=2),
            ]
        assert convert_schema('t', columns).field_names() == ['b', 'a']

    def test_array_value_type(self, make_column):
        field = convert_schema('t', [make_column(SqlType.ARRAY, type_name='_text')]).fields[0]
        assert field.value_type.type == FieldType.STRING
        assert field.value_type.optional is True


class TestIntegers:
    """Test signedness widening."""

    @pytest.mark.parametrize(('sql_type', 'expected'), [
        (SqlType.TINYINT, FieldType.INT16),
        (SqlType.SMALLINT, FieldType.INT32),
        (SqlType.INTEGER, FieldType.INT64),
        (SqlType.BIGINT, FieldType.INT64),
        ])
    def test_unsigned_widens(self, make_column, sql_type, expected):
        field = resolve_field(make_column(sql_type, signed=False))
        assert field.type == expected


class TestNumerics:
    """Test NUMERIC narrowing and the decimal fallthrough."""

    def test_narrowing_enabled(self, make_column):
        column = make_column(SqlType.NUMERIC, precision=3, scale=0)
        assert resolve_field(column, map_numerics=True).type == FieldType.INT16

    def test_narrowing_disabled(self, make_column):
        column = make_column(SqlType.NUMERIC, precision=3, scale=0)
        field = resolve_field(column, map_numerics=False)
        assert field.type == FieldType.DECIMAL
        assert field.scale == 0

    @pytest.mark.parametrize(('precision', 'expected'), [
        (1, FieldType.INT8),
        (2, FieldType.INT8),
        (3, FieldType.INT16),
        (4, FieldType.INT16),
        (5, FieldType.INT32),
        (9, FieldType.INT32),
        (10, FieldType.INT64),
        (18, FieldType.INT64),
        ])
    def test_narrowing_by_precision(self, make_column, precision, expected):
        column = make_column(SqlType.NUMERIC, precision=precision, scale=0)
        assert narrow_numeric(column, True) == expected

    @pytest.mark.parametrize(('precision', 'scale'), [(19, 0), (38, 0), (10, 2)])
    def test_falls_through_to_decimal(self, make_column, precision, scale):
        column = make_column(SqlType.NUMERIC, precision=precision, scale=scale)
        field = resolve_field(column, map_numerics=True)
        assert field.type == FieldType.DECIMAL
        assert field.scale == scale

    def test_decimal_is_never_narrowed(self, make_column):
        column = make_column(SqlType.DECIMAL, precision=3, scale=0)
        assert resolve_field(column, map_numerics=True).type == FieldType.DECIMAL

    def test_undefined_scale_normalized(self, make_column):
        column = make_column(SqlType.NUMERIC, precision=0, scale=-127)
        assert decimal_scale(column) == 127
        assert resolve_field(column).scale == 127


class TestRuleTable:
    """Test the lookup table itself."""

    def test_every_sql_type_has_a_rule(self):
        assert set(TYPE_RULES) == set(SqlType)

    def test_unknown_code_is_unsupported(self):
        assert get_rule(123456) is UNSUPPORTED

    def test_supported_sql_types(self):
        supported = supported_sql_types()
        assert SqlType.INTEGER in supported
        assert SqlType.OTHER in supported
        assert SqlType.STRUCT not in supported
        assert SqlType.NULL not in supported


class TestDriverTypeMaps:
    """Test native type code translation."""

    def test_postgres_scalar(self):
        assert resolve_postgres_type(23) == (SqlType.INTEGER, 'int4')
        assert resolve_postgres_type(1700) == (SqlType.NUMERIC, 'numeric')

    def test_postgres_array(self):
        assert resolve_postgres_type(1009) == (SqlType.ARRAY, '_text')

    def test_postgres_string_convertible(self):
        assert resolve_postgres_type(3802) == (SqlType.OTHER, 'jsonb')
        assert resolve_postgres_type(2950) == (SqlType.OTHER, 'uuid')

    def test_postgres_unknown_oid(self):
        sql_type, _ = resolve_postgres_type(999999)
        assert sql_type == SqlType.OTHER

    @pytest.mark.parametrize(('decltype', 'expected'), [
        ('INTEGER', (SqlType.INTEGER, 0, 0)),
        ('NUMERIC', (SqlType.FLOAT, 0, 0)),
        ('NUMERIC(10,2)', (SqlType.NUMERIC, 10, 2)),
        ('numeric(5)', (SqlType.NUMERIC, 5, 0)),
        ('VARCHAR(20)', (SqlType.VARCHAR, 20, 0)),
        ('DOUBLE PRECISION', (SqlType.DOUBLE, 0, 0)),
        ('UNSIGNED BIG INT', (SqlType.BIGINT, 0, 0)),
        ('DATETIME', (SqlType.TIMESTAMP, 0, 0)),
        ('INT8', (SqlType.BIGINT, 0, 0)),
        ('INT2', (SqlType.BIGINT, 0, 0)),
        ('VARCHAR2(10)', (SqlType.VARCHAR, 10, 0)),
        ('NVARCHAR2(30)', (SqlType.VARCHAR, 30, 0)),
        ('FLOAT8', (SqlType.DOUBLE, 0, 0)),
        ('', (SqlType.BLOB, 0, 0)),
        (None, (SqlType.BLOB, 0, 0)),
        ])
    def test_sqlite_decltype(self, decltype, expected):
        assert resolve_sqlite_type(decltype) == expected


if __name__ == '__main__':
    __import__('pytest').main([__file__])
