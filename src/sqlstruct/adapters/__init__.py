"""
Result-set adapters package.

This package provides the following components:

- column_info: Column descriptors and metadata inspection (cursor description, SQLite PRAGMA)
- structure: Row readers returning (value, was_null) per column (no type conversion)
- type_mapping: Total SqlType -> rule lookup table and driver type maps (no conversion)
- type_conversion: Native value -> canonical value coercers

Type conversion principles:
1. Identification (type_mapping) decides the canonical type once per column
2. Conversion (type_conversion) coerces each value to that type in the canonical calendar

Row readers do NOT perform conversions - they only expose the native value and
whether the source reported it as null.
"""
from sqlstruct.adapters.column_info import ColumnDescriptor
from sqlstruct.adapters.column_info import columns_from_cursor_description
from sqlstruct.adapters.column_info import columns_from_sqlite_table
from sqlstruct.adapters.structure import MappingRowReader, RowReader
from sqlstruct.adapters.structure import SequenceRowReader, create_row_reader
from sqlstruct.adapters.type_conversion import MAX_LOB_LENGTH, UTC, convert_value
from sqlstruct.adapters.type_conversion import get_timezone
from sqlstruct.adapters.type_mapping import TYPE_RULES, UNSUPPORTED, get_rule
from sqlstruct.adapters.type_mapping import resolve_field, supported_sql_types
