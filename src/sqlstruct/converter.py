"""
Conversion of result-set metadata and rows into canonical schemas and records.

The schema is built once per query shape from the column descriptors; each row
is then converted field by field. A field that fails to convert is logged and
omitted from that record only, so one bad value never loses a row.
"""
import datetime
import logging
from collections.abc import Iterable, Sequence
from dataclasses import fields
from typing import Any

from sqlstruct.adapters.column_info import ColumnDescriptor
from sqlstruct.adapters.column_info import columns_from_cursor_description
from sqlstruct.adapters.structure import RowReader, create_row_reader
from sqlstruct.adapters.type_conversion import UTC, convert_value, get_timezone
from sqlstruct.adapters.type_mapping import resolve_field
from sqlstruct.cache import cacheable_schema
from sqlstruct.dialect import Dialect, get_dialect
from sqlstruct.exceptions import ConversionErrors, UnsupportedTypeError
from sqlstruct.exceptions import ValidationError
from sqlstruct.options import ConverterOptions
from sqlstruct.types import Schema, Struct

from libb import load_options

logger = logging.getLogger(__name__)

__all__ = ['convert_schema', 'convert_record', 'TypeConverter', 'create_converter']


@cacheable_schema('schemas')
def convert_schema(table_name: str | None, columns: Sequence[ColumnDescriptor],
                   map_numerics: bool = False) -> Schema:
    """Build the canonical schema for a result set.

    Columns whose type has no canonical mapping are skipped with a warning and
    are absent from the schema.

    Args:
        table_name: Schema name
        columns: Column descriptors in result-set order
        map_numerics: Narrow zero-scale NUMERIC columns to integer types

    Returns
        Schema with one field per supported column, in column order
    """
    fields = []
    for column in columns:
        field = resolve_field(column, map_numerics)
        if field is None:
            logger.warning(f'Skipping column {column.field_name} of {table_name}: '
                           f'unsupported type {column.sql_type!r} ({column.type_name})')
            continue
        fields.append(field)
    return Schema(table_name, fields)


def convert_record(schema: Schema, reader: RowReader | Any, map_numerics: bool = False,
                   timezone: datetime.tzinfo | str | None = UTC) -> Struct:
    """Convert one row into a record of the given schema.

    Args:
        schema: Schema built by convert_schema
        reader: RowReader, or a row the default readers understand
        map_numerics: Must match the flag the schema was built with
        timezone: Canonical calendar for date/time values

    Returns
        Struct holding every field that converted successfully
    """
    missing = [f.name for f in schema.fields if f.column is None]
    if missing:
        raise ValidationError(f'Fields {missing} have no source column; '
                              'convert_record needs a schema built by convert_schema')
    names = {f.column.index: f.column.field_name for f in schema.fields}
    reader = create_row_reader(reader, names)
    timezone = get_timezone(timezone)
    struct = Struct(schema)
    for field in schema.fields:
        try:
            value, was_null = reader.read(field.column.index)
            if was_null:
                struct.put(field.name, None)
                continue
            resolved = resolve_field(field.column, map_numerics)
            if resolved is None or resolved.type != field.type:
                raise UnsupportedTypeError(
                    f'{field.column!r} does not resolve to {field.type.value} '
                    f'with map_numerics={map_numerics}')
            struct.put(field.name, convert_value(value, field, timezone))
        except ConversionErrors as exc:
            logger.warning(f'Failed to convert field {field.name}: {exc}')
    return struct


class TypeConverter:
    """Converter bound to a set of options.

    Example:
        converter = TypeConverter(ConverterOptions(map_numerics=True))
        records = converter.convert_cursor(cursor, 'users')
    """

    def __init__(self, options: ConverterOptions | None = None, **kwargs):
        self.options = options or ConverterOptions(**kwargs)
        self.timezone = get_timezone(self.options.timezone)

    @property
    def dialect(self) -> Dialect | None:
        """Dialect named by the options, for generating DDL/DML of converted data."""
        if self.options.dialect is None:
            return None
        return get_dialect(self.options.dialect)

    def convert_schema(self, table_name: str | None,
                       columns: Sequence[ColumnDescriptor]) -> Schema:
        return convert_schema(table_name, columns, self.options.map_numerics,
                              bypass_cache=not self.options.use_cache)

    def convert_record(self, schema: Schema, reader: RowReader | Any) -> Struct:
        return convert_record(schema, reader, self.options.map_numerics, self.timezone)

    def convert_rows(self, table_name: str | None, columns: Sequence[ColumnDescriptor],
                     rows: Iterable[Any]) -> list[Struct]:
        """Convert rows sharing one set of column descriptors.
        """
        schema = self.convert_schema(table_name, columns)
        return [self.convert_record(schema, row) for row in rows]

    def convert_cursor(self, cursor: Any, table_name: str | None = None,
                       columns: Sequence[ColumnDescriptor] | None = None,
                       connection_type: str = 'postgresql') -> Any:
        """Fetch all rows from an executed cursor and load them.

        Args:
            cursor: DB-API cursor after execute
            table_name: Schema name
            columns: Column descriptors; read from cursor.description when omitted
            connection_type: Database type used to interpret cursor.description

        Returns
            Output of the configured data loader
        """
        if columns is None:
            columns = columns_from_cursor_description(cursor, connection_type)
        schema = self.convert_schema(table_name, columns)
        records = [self.convert_record(schema, row) for row in cursor.fetchall()]
        logger.debug(f'Converted {len(records)} rows for {table_name}')
        return self.options.data_loader(records, schema, table_name=table_name)


@load_options(cls=ConverterOptions)
def create_converter(options: ConverterOptions | dict[str, Any] | str,
                     config: Any | None = None, **kw: Any) -> TypeConverter:
    """Create a TypeConverter from options

    Args:
        options: Can be:
                - ConverterOptions object
                - String path to configuration
                - Dictionary of options
                - Options specified as keyword arguments
        config: Configuration object (for loading from config files)
        **kw: Additional keyword arguments to override options

    Returns
        TypeConverter bound to the options
    """
    if isinstance(options, ConverterOptions):
        for field in fields(options):
            kw.pop(field.name, None)
    else:
        options_func = load_options(cls=ConverterOptions)(lambda o, c: o)
        options = options_func(options, config, **kw)
    return TypeConverter(options)
