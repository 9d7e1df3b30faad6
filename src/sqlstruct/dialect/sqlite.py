"""
SQLite-specific dialect implementation.

SQLite has no single-statement upsert that works on every supported version,
so the upsert is an UPDATE OR IGNORE followed by an INSERT OR IGNORE; both
statements bind the same values (non-key columns, then key columns).
ALTER TABLE adds one column per statement. Primary key column definitions end
with a space, so CREATE TABLE reads `NOT NULL ,`.
"""
import logging

from sqlstruct.dialect.base import Dialect, register_dialect
from sqlstruct.types import FieldType
from sqlstruct.utils.strings import join

logger = logging.getLogger(__name__)


@register_dialect('sqlite')
class SQLiteDialect(Dialect):
    """SQLite SQL generation"""

    type_map = {
        FieldType.INT8: 'NUMERIC',
        FieldType.INT16: 'NUMERIC',
        FieldType.INT32: 'NUMERIC',
        FieldType.INT64: 'NUMERIC',
        FieldType.FLOAT32: 'REAL',
        FieldType.FLOAT64: 'REAL',
        FieldType.BOOLEAN: 'NUMERIC',
        FieldType.STRING: 'TEXT',
        FieldType.BYTES: 'BLOB',
        FieldType.DATE: 'DATE',
        FieldType.TIME: 'TIME',
        FieldType.TIMESTAMP: 'DATETIME',
        }

    def column_definition(self, field):
        """Primary key columns keep a space before the separating comma"""
        if field.primary_key:
            return f'{field.name} {self.sql_type(field.type)} NOT NULL '
        return f'{field.name} {self.sql_type(field.type)} NULL'

    def alter_table(self, table, fields):
        """One ALTER TABLE per field"""
        self._validate_table(table)
        self._validate_fields(fields)
        return [f'ALTER TABLE {table} ADD {f.name} {self.sql_type(f.type)} NULL;'
                for f in fields]

    def upsert_query(self, table, non_key_columns, key_columns):
        self._validate_upsert(table, non_key_columns, key_columns)
        columns = list(non_key_columns) + list(key_columns)
        assignments = join((f'{c}=?' for c in non_key_columns), ',')
        condition = join((f'{c}=?' for c in key_columns), ' and ')
        values = join(self.placeholders(len(columns)), ',')
        return (f'update or ignore {table} set {assignments} where {condition}\n;'
                f'insert or ignore into {table}({join(columns, ",")}) values ({values})')

    @staticmethod
    def split_statements(query: str) -> list[str]:
        """Split a generated upsert into its statements for sqlite3 execute().
        """
        return [q.strip() for q in query.split('\n;') if q.strip()]
