"""
PostgreSQL-specific dialect implementation.

Upserts use INSERT ... ON CONFLICT, which requires a unique index or primary
key over the key columns. Placeholders follow the psycopg %s style.
"""
import logging

from sqlstruct.dialect.base import LINE_SEPARATOR, Dialect, register_dialect
from sqlstruct.types import FieldType
from sqlstruct.utils.strings import join

logger = logging.getLogger(__name__)


@register_dialect('postgresql', 'postgres')
class PostgresDialect(Dialect):
    """PostgreSQL SQL generation"""

    placeholder = '%s'

    type_map = {
        FieldType.INT8: 'SMALLINT',
        FieldType.INT16: 'SMALLINT',
        FieldType.INT32: 'INTEGER',
        FieldType.INT64: 'BIGINT',
        FieldType.FLOAT32: 'REAL',
        FieldType.FLOAT64: 'DOUBLE PRECISION',
        FieldType.BOOLEAN: 'BOOLEAN',
        FieldType.STRING: 'TEXT',
        FieldType.BYTES: 'BYTEA',
        FieldType.DATE: 'DATE',
        FieldType.TIME: 'TIME',
        FieldType.TIMESTAMP: 'TIMESTAMPTZ',
        }

    def alter_table(self, table, fields):
        self._validate_table(table)
        self._validate_fields(fields)
        clauses = [f'ADD COLUMN {f.name} {self.sql_type(f.type)} NULL' for f in fields]
        body = join(clauses, f',{LINE_SEPARATOR}')
        return [f'ALTER TABLE {table}{LINE_SEPARATOR}{body}{self.statement_terminator}']

    def upsert_query(self, table, non_key_columns, key_columns):
        self._validate_upsert(table, non_key_columns, key_columns)
        columns = list(non_key_columns) + list(key_columns)
        values = join(self.placeholders(len(columns)), ',')
        updates = join((f'{c}=EXCLUDED.{c}' for c in non_key_columns), ',')
        return (f'INSERT INTO {table} ({join(columns, ",")}) VALUES ({values}) '
                f'ON CONFLICT ({join(key_columns, ",")}) DO UPDATE SET {updates}')
