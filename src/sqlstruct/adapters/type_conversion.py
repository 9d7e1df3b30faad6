"""
Value conversion from database-native values to canonical values.

Handles the Database → record direction only: each converter takes the value
a driver returned for a column and produces the canonical value for the
column's field type.

Date and time values are evaluated in a single canonical calendar passed in by
the caller, so the result never depends on the server or client time zone:
- naive values are read as wall-clock time in the canonical calendar
- aware values are converted to the canonical calendar
- ISO 8601 strings (as stored by SQLite) are parsed first
"""
import datetime
import decimal
import json
import logging
from collections.abc import Callable
from typing import Any

import dateutil.parser
import numpy as np
from dateutil import tz
from sqlstruct.adapters.type_mapping import STRING_CONVERTIBLE_TYPES
from sqlstruct.exceptions import TypeConversionError
from sqlstruct.types import FieldSchema, FieldType, SqlType

logger = logging.getLogger(__name__)

UTC = tz.UTC

# Largest LOB that can be materialized as a single value
MAX_LOB_LENGTH = 2**31 - 1

TRUE_STRINGS: set[str] = {'1', 't', 'true', 'y', 'yes', 'on'}
FALSE_STRINGS: set[str] = {'0', 'f', 'false', 'n', 'no', 'off'}

_EPOCH = datetime.date(1970, 1, 1)
_isoparser = dateutil.parser.isoparser()


def get_timezone(name: str | datetime.tzinfo | None) -> datetime.tzinfo:
    """Resolve a canonical calendar time zone.

    Args:
        name: IANA zone name, tzinfo instance, or None for UTC

    Returns
        tzinfo instance
    """
    if name is None:
        return UTC
    if isinstance(name, datetime.tzinfo):
        return name
    if name.upper() == 'UTC':
        return UTC
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f'Unknown time zone: {name}')
    return zone


def unwrap_numpy(value: Any) -> Any:
    """Convert NumPy scalars to the equivalent Python value."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def read_lob(value: Any) -> Any:
    """Materialize a LOB locator, refusing LOBs longer than MAX_LOB_LENGTH.

    Driver LOB objects expose size() and read(); plain bytes and str values
    are checked by length.
    """
    size = getattr(value, 'size', None)
    length = size() if callable(size) else len(value)
    if length > MAX_LOB_LENGTH:
        raise TypeConversionError(f"Can't process LOBs longer than {MAX_LOB_LENGTH} ({length})")
    if hasattr(value, 'read'):
        return value.read()
    return value


def to_boolean(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
        raise TypeConversionError(f'Cannot read {value!r} as boolean')
    return bool(value)


def to_integer(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> int:
    """Read an integer, truncating fractional numerics toward zero."""
    if isinstance(value, bytes | bytearray):
        raise TypeConversionError(f'Cannot read bytes as {field.type.value}')
    if isinstance(value, str):
        value = decimal.Decimal(value.strip())
    return int(value)


def to_float32(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> float:
    """Read a single-precision float, rounding to float32."""
    return float(np.float32(float(value)))


def to_float64(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> float:
    return float(value)


def to_decimal(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> decimal.Decimal:
    """Read a decimal quantized to the field scale (half-up rounding)."""
    if isinstance(value, float):
        value = decimal.Decimal(repr(value))
    elif not isinstance(value, decimal.Decimal):
        value = decimal.Decimal(str(value).strip())
    if not value.is_finite():
        raise TypeConversionError(f'Cannot represent {value} as a decimal')
    context = decimal.Context(prec=max(28, value.adjusted() + field.scale + 2))
    return value.quantize(decimal.Decimal(1).scaleb(-field.scale),
                          rounding=decimal.ROUND_HALF_UP, context=context)


def _render_json(value: Any) -> str:
    return json.dumps(value, separators=(',', ':'))


def to_string(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> str:
    """Read a string, materializing CLOBs and rendering JSON documents."""
    sql_type = field.column.sql_type if field.column is not None else None
    if sql_type in {SqlType.CLOB, SqlType.NCLOB}:
        value = read_lob(value)
    elif sql_type == SqlType.SQLXML and hasattr(value, 'getvalue'):
        value = value.getvalue()

    if isinstance(value, str):
        return value
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value).decode()
    if isinstance(value, dict | list):
        return _render_json(value)
    return str(value)


def to_bytes(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> bytes:
    """Read bytes, materializing BLOBs."""
    if field.column is not None and field.column.sql_type == SqlType.BLOB:
        value = read_lob(value)
    if isinstance(value, bytes | bytearray | memoryview):
        return bytes(value)
    raise TypeConversionError(f'Cannot read {type(value).__name__} as bytes')


def _to_calendar(value: datetime.datetime, timezone: datetime.tzinfo) -> datetime.datetime:
    """Place a datetime in the canonical calendar as an aware datetime."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone)
    return value.astimezone(timezone)


def to_date(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> datetime.date:
    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        value = dateutil.parser.isoparse(value.strip())
    if isinstance(value, datetime.datetime):
        return _to_calendar(value, timezone).date()
    if isinstance(value, datetime.date):
        return value
    raise TypeConversionError(f'Cannot read {type(value).__name__} as date')


def to_time(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> datetime.time:
    """Read a time of day as naive wall-clock time in the canonical calendar.

    timedelta values (MySQL drivers) are accepted when within one day.
    """
    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        value = _isoparser.parse_isotime(value.strip())
    if isinstance(value, datetime.timedelta):
        if not datetime.timedelta(0) <= value < datetime.timedelta(days=1):
            raise TypeConversionError(f'Time interval out of range: {value}')
        value = (datetime.datetime.min + value).time()
    if isinstance(value, datetime.datetime):
        return _to_calendar(value, timezone).time()
    if isinstance(value, datetime.time):
        if value.tzinfo is None:
            return value
        combined = datetime.datetime.combine(_EPOCH, value)
        return combined.astimezone(timezone).time()
    raise TypeConversionError(f'Cannot read {type(value).__name__} as time')


def to_timestamp(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> datetime.datetime:
    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        value = dateutil.parser.isoparse(value.strip())
    if isinstance(value, datetime.datetime):
        return _to_calendar(value, timezone)
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time(), tzinfo=timezone)
    raise TypeConversionError(f'Cannot read {type(value).__name__} as timestamp')


def to_string_array(value: Any, field: FieldSchema, timezone: datetime.tzinfo) -> list[str | None]:
    """Read an array as a list of strings.

    Elements must be strings or null unless the declared element type is
    string-convertible (json, jsonb, uuid), in which case they are stringified.
    """
    if isinstance(value, str | bytes) or not hasattr(value, '__iter__'):
        raise TypeConversionError(f'Cannot read {type(value).__name__} as array')

    element_type = field.column.element_type_name.lower() if field.column is not None else ''
    convertible = element_type in STRING_CONVERTIBLE_TYPES

    result = []
    for item in value:
        item = unwrap_numpy(item)
        if item is None:
            result.append(None)
        elif isinstance(item, str):
            result.append(item)
        elif convertible:
            result.append(_render_json(item) if isinstance(item, dict | list) else str(item))
        else:
            raise TypeConversionError(
                "Can't process input, supported types in arrays are string, JSON, UUID,"
                f' and null. Your type: {type(item).__name__}')
    return result


CONVERTERS: dict[FieldType, Callable[[Any, FieldSchema, datetime.tzinfo], Any]] = {
    FieldType.BOOLEAN: to_boolean,
    FieldType.INT8: to_integer,
    FieldType.INT16: to_integer,
    FieldType.INT32: to_integer,
    FieldType.INT64: to_integer,
    FieldType.FLOAT32: to_float32,
    FieldType.FLOAT64: to_float64,
    FieldType.DECIMAL: to_decimal,
    FieldType.STRING: to_string,
    FieldType.BYTES: to_bytes,
    FieldType.DATE: to_date,
    FieldType.TIME: to_time,
    FieldType.TIMESTAMP: to_timestamp,
    FieldType.ARRAY: to_string_array,
    }


def convert_value(value: Any, field: FieldSchema,
                  timezone: datetime.tzinfo = UTC) -> Any:
    """Convert a native column value to the canonical value for a field.

    Args:
        value: Value returned by the driver (None passes through)
        field: Target field schema
        timezone: Canonical calendar for date/time values

    Returns
        Canonical value

    Raises
        TypeConversionError: If the value cannot be represented
    """
    value = unwrap_numpy(value)
    if value is None:
        return None
    return CONVERTERS[field.type](value, field, timezone)
