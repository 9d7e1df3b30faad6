"""
Structured record conversion and SQL dialect generation for relational databases.

Two subsystems:
- Type conversion: result-set metadata -> canonical Schema, rows -> Struct records
- Dialects: CREATE TABLE / ALTER TABLE / upsert statement generation per engine

Usage:
    columns = columns_from_sqlite_table(cn, 'users')
    schema = convert_schema('users', columns)
    record = convert_record(schema, row)

    dialect = get_dialect('mssql')
    sql = dialect.upsert_query('users', ['name'], ['id'])
"""
__version__ = '0.1.0'

from sqlstruct.adapters.column_info import ColumnDescriptor
from sqlstruct.adapters.column_info import columns_from_cursor_description
from sqlstruct.adapters.column_info import columns_from_sqlite_table
from sqlstruct.adapters.structure import RowReader, create_row_reader
from sqlstruct.cache import Cache
from sqlstruct.converter import TypeConverter, convert_record, convert_schema
from sqlstruct.converter import create_converter
from sqlstruct.dialect import Dialect, get_available_dialects, get_dialect
from sqlstruct.dialect import get_dialect_for_url, is_supported_dialect
from sqlstruct.exceptions import ConfigurationError, DialectNotFoundError
from sqlstruct.exceptions import SqlStructError, TypeConversionError
from sqlstruct.exceptions import UnsupportedTypeError, ValidationError
from sqlstruct.options import ConverterOptions, iterdict_data_loader
from sqlstruct.options import pandas_numpy_data_loader, pandas_pyarrow_data_loader
from sqlstruct.types import Field, FieldSchema, FieldType, Nullability, Schema
from sqlstruct.types import SqlType, Struct
from sqlstruct.utils.strings import join, string_to_map


def clear_cache(table_name: str | None = None) -> None:
    """Clear cached schemas, for one table or all of them.
    """
    if table_name is None:
        Cache.get_instance().clear_all()
    else:
        Cache.get_instance().clear_for_table(table_name)
