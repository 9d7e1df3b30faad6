"""
SQL Server-specific dialect implementation.

Handles SQL Server's syntax for:
- ALTER TABLE t ADD with every new column in one statement
- MERGE ... WITH (HOLDLOCK) upserts, which keep the match-then-write atomic
"""
import logging
from collections.abc import Sequence

from sqlstruct.dialect.base import LINE_SEPARATOR, Dialect, register_dialect
from sqlstruct.types import FieldType
from sqlstruct.utils.strings import join

logger = logging.getLogger(__name__)


def merge_statement(target: str, table: str, source: str,
                    non_key_columns: Sequence[str], key_columns: Sequence[str]) -> str:
    """Build a MERGE upsert from an `incoming` single-row source.

    Args:
        target: Merge target clause (table name plus any table hints)
        table: Table name used to qualify columns
        source: SELECT producing the incoming row
        non_key_columns: Columns updated on match
        key_columns: Columns joined on
    """
    columns = list(non_key_columns) + list(key_columns)
    condition = join((f'{table}.{c}=incoming.{c}' for c in key_columns), ' and ')
    updates = join((f'{table}.{c}=incoming.{c}' for c in non_key_columns), ',')
    targets = join((f'{table}.{c}' for c in columns), ',')
    values = join((f'incoming.{c}' for c in columns), ',')
    return (f'merge into {target} using ({source}) incoming on({condition}) '
            f'when matched then update set {updates} '
            f'when not matched then insert({targets}) values({values})')


@register_dialect('mssql', 'sqlserver')
class SqlServerDialect(Dialect):
    """SQL Server SQL generation"""

    type_map = {
        FieldType.INT8: 'tinyint',
        FieldType.INT16: 'smallint',
        FieldType.INT32: 'int',
        FieldType.INT64: 'bigint',
        FieldType.FLOAT32: 'real',
        FieldType.FLOAT64: 'float',
        FieldType.BOOLEAN: 'bit',
        FieldType.STRING: 'varchar(256)',
        FieldType.BYTES: 'varbinary(max)',
        FieldType.DATE: 'date',
        FieldType.TIME: 'time',
        FieldType.TIMESTAMP: 'datetime2',
        }

    def alter_table(self, table, fields):
        self._validate_table(table)
        self._validate_fields(fields)
        columns = [f'{f.name} {self.sql_type(f.type)} NULL' for f in fields]
        body = join(columns, f',{LINE_SEPARATOR}')
        return [f'ALTER TABLE {table} ADD{LINE_SEPARATOR}{body}{self.statement_terminator}']

    def upsert_query(self, table, non_key_columns, key_columns):
        self._validate_upsert(table, non_key_columns, key_columns)
        columns = list(non_key_columns) + list(key_columns)
        params = self.placeholders(len(columns))
        source = 'select ' + join((f'{p} {c}' for p, c in zip(params, columns)), ', ')
        return merge_statement(f'{table} with (HOLDLOCK)', table, source,
                               non_key_columns, key_columns)
