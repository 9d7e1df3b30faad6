"""
MySQL-specific dialect implementation.

MySQL shares MariaDB's DDL and upsert syntax; it differs in the native type
names and in using the %s parameter style of the MySQL drivers.
"""
from sqlstruct.dialect.base import register_dialect
from sqlstruct.dialect.mariadb import MariaDbDialect
from sqlstruct.types import FieldType


@register_dialect('mysql')
class MySqlDialect(MariaDbDialect):
    """MySQL SQL generation"""

    placeholder = '%s'

    type_map = {
        FieldType.INT8: 'TINYINT',
        FieldType.INT16: 'SMALLINT',
        FieldType.INT32: 'INT',
        FieldType.INT64: 'BIGINT',
        FieldType.FLOAT32: 'FLOAT',
        FieldType.FLOAT64: 'DOUBLE',
        FieldType.BOOLEAN: 'TINYINT',
        FieldType.STRING: 'VARCHAR(256)',
        FieldType.BYTES: 'VARBINARY(1024)',
        FieldType.DATE: 'DATE',
        FieldType.TIME: 'TIME',
        FieldType.TIMESTAMP: 'DATETIME',
        }
