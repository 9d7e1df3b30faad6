"""
Oracle-specific dialect implementation.

Oracle statements sent through a driver must not carry a trailing semicolon,
bind variables are positional (:1, :2, ...), and the MERGE source selects from
DUAL. Oracle has no TIME type, so TIME fields cannot be created.
"""
import logging

from sqlstruct.dialect.base import LINE_SEPARATOR, Dialect, register_dialect
from sqlstruct.dialect.sqlserver import merge_statement
from sqlstruct.types import FieldType
from sqlstruct.utils.strings import join

logger = logging.getLogger(__name__)


@register_dialect('oracle')
class OracleDialect(Dialect):
    """Oracle SQL generation"""

    statement_terminator = ''

    type_map = {
        FieldType.INT8: 'NUMBER(3,0)',
        FieldType.INT16: 'NUMBER(5,0)',
        FieldType.INT32: 'NUMBER(10,0)',
        FieldType.INT64: 'NUMBER(19,0)',
        FieldType.FLOAT32: 'BINARY_FLOAT',
        FieldType.FLOAT64: 'BINARY_DOUBLE',
        FieldType.BOOLEAN: 'NUMBER(1,0)',
        FieldType.STRING: 'VARCHAR2(256)',
        FieldType.BYTES: 'BLOB',
        FieldType.DATE: 'DATE',
        FieldType.TIMESTAMP: 'TIMESTAMP',
        }

    def placeholders(self, count):
        return [f':{i}' for i in range(1, count + 1)]

    def alter_table(self, table, fields):
        self._validate_table(table)
        self._validate_fields(fields)
        columns = [f'{f.name} {self.sql_type(f.type)} NULL' for f in fields]
        body = join(columns, f',{LINE_SEPARATOR}')
        return [f'ALTER TABLE {table} ADD({LINE_SEPARATOR}{body})']

    def upsert_query(self, table, non_key_columns, key_columns):
        self._validate_upsert(table, non_key_columns, key_columns)
        columns = list(non_key_columns) + list(key_columns)
        params = self.placeholders(len(columns))
        source = 'select ' + join((f'{p} {c}' for p, c in zip(params, columns)), ', ') + ' FROM dual'
        return merge_statement(table, table, source, non_key_columns, key_columns)
