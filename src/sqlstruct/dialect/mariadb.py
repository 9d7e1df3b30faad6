"""
MariaDB-specific dialect implementation.

Handles MariaDB's syntax for:
- ALTER TABLE with one ADD COLUMN clause per line in a single statement
- INSERT ... ON DUPLICATE KEY UPDATE upserts
"""
import logging

from sqlstruct.dialect.base import LINE_SEPARATOR, Dialect, register_dialect
from sqlstruct.types import FieldType
from sqlstruct.utils.strings import join

logger = logging.getLogger(__name__)


@register_dialect('mariadb')
class MariaDbDialect(Dialect):
    """MariaDB SQL generation"""

    type_map = {
        FieldType.INT8: 'TINYINT',
        FieldType.INT16: 'SMALLINT',
        FieldType.INT32: 'INTEGER',
        FieldType.INT64: 'BIGINT',
        FieldType.FLOAT32: 'FLOAT',
        FieldType.FLOAT64: 'DOUBLE',
        FieldType.BOOLEAN: 'TINYINT',
        FieldType.STRING: 'VARCHAR(256)',
        FieldType.BYTES: 'BLOB',
        FieldType.DATE: 'DATE',
        FieldType.TIME: 'TIME',
        FieldType.TIMESTAMP: 'DATETIME',
        }

    def alter_table(self, table, fields):
        self._validate_table(table)
        self._validate_fields(fields)
        clauses = [f'ADD COLUMN {f.name} {self.sql_type(f.type)} NULL' for f in fields]
        body = join(clauses, f',{LINE_SEPARATOR}')
        return [f'ALTER TABLE {table}{LINE_SEPARATOR}{body}{self.statement_terminator}']

    def upsert_query(self, table, non_key_columns, key_columns):
        """Insert with ON DUPLICATE KEY UPDATE of the non-key columns.

        The key columns must be covered by a primary key or unique index.
        """
        self._validate_upsert(table, non_key_columns, key_columns)
        columns = list(non_key_columns) + list(key_columns)
        values = join(self.placeholders(len(columns)), ',')
        updates = join((f'{c}=values({c})' for c in non_key_columns), ',')
        return (f'insert into {table}({join(columns, ",")}) values({values}) '
                f'on duplicate key update {updates}')
