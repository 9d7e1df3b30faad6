"""
Canonical structured data model.

This module provides:
- SqlType / Nullability: source-side column type codes and nullability flags
- FieldType: engine-neutral field types every SQL type is mapped into
- FieldSchema / Schema: ordered, immutable description of a record shape
- Struct: a record bound to a Schema, validated on every put
- Field: write-path column description consumed by the dialects
"""
import datetime
import decimal
import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any

from sqlstruct.exceptions import TypeConversionError, ValidationError

from libb import attrdict

if TYPE_CHECKING:
    from sqlstruct.adapters.column_info import ColumnDescriptor

logger = logging.getLogger(__name__)


class SqlType(IntEnum):
    """Standard SQL type codes (JDBC/ODBC numbering)."""
    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    DATALINK = 70
    BOOLEAN = 16
    ROWID = -8
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    NCLOB = 2011
    SQLXML = 2009


class Nullability(IntEnum):
    """Column nullability as reported by result-set metadata."""
    NO_NULLS = 0
    NULLABLE = 1
    UNKNOWN = 2


class FieldType(Enum):
    """Canonical field types."""
    BOOLEAN = 'boolean'
    INT8 = 'int8'
    INT16 = 'int16'
    INT32 = 'int32'
    INT64 = 'int64'
    FLOAT32 = 'float32'
    FLOAT64 = 'float64'
    STRING = 'string'
    BYTES = 'bytes'
    DECIMAL = 'decimal'
    DATE = 'date'
    TIME = 'time'
    TIMESTAMP = 'timestamp'
    ARRAY = 'array'


INTEGER_RANGES: dict[FieldType, tuple[int, int]] = {
    FieldType.INT8: (-2**7, 2**7 - 1),
    FieldType.INT16: (-2**15, 2**15 - 1),
    FieldType.INT32: (-2**31, 2**31 - 1),
    FieldType.INT64: (-2**63, 2**63 - 1),
    }


@dataclass(frozen=True, slots=True)
class FieldSchema:
    """Schema of one record field.

    scale is set for DECIMAL fields only; value_type for ARRAY fields only.
    column keeps the source column for fields built from result-set metadata.
    """
    name: str
    type: FieldType
    optional: bool = False
    scale: int | None = None
    value_type: 'FieldSchema | None' = None
    column: 'ColumnDescriptor | None' = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.type == FieldType.DECIMAL and self.scale is None:
            raise ValidationError(f'Decimal field {self.name} requires a scale')
        if self.type == FieldType.ARRAY and self.value_type is None:
            raise ValidationError(f'Array field {self.name} requires a value type')

    def validate(self, value: Any) -> None:
        """Raise TypeConversionError if value does not satisfy this field's type.
        """
        if value is None:
            if not self.optional:
                raise TypeConversionError(f'Field {self.name} is not optional, got null')
            return

        if self.type == FieldType.BOOLEAN:
            ok = isinstance(value, bool)
        elif self.type in INTEGER_RANGES:
            low, high = INTEGER_RANGES[self.type]
            ok = isinstance(value, int) and not isinstance(value, bool) and low <= value <= high
        elif self.type in {FieldType.FLOAT32, FieldType.FLOAT64}:
            ok = isinstance(value, float)
        elif self.type == FieldType.STRING:
            ok = isinstance(value, str)
        elif self.type == FieldType.BYTES:
            ok = isinstance(value, bytes)
        elif self.type == FieldType.DECIMAL:
            ok = (isinstance(value, decimal.Decimal) and value.is_finite()
                  and value.as_tuple().exponent == -self.scale)
        elif self.type == FieldType.DATE:
            ok = isinstance(value, datetime.date) and not isinstance(value, datetime.datetime)
        elif self.type == FieldType.TIME:
            ok = isinstance(value, datetime.time)
        elif self.type == FieldType.TIMESTAMP:
            ok = isinstance(value, datetime.datetime)
        else:
            ok = isinstance(value, list)
            if ok:
                for item in value:
                    self.value_type.validate(item)

        if not ok:
            raise TypeConversionError(
                f'Invalid value for field {self.name} of type {self.type.value}: {value!r}')

    def to_dict(self) -> dict[str, Any]:
        result = {'name': self.name, 'type': self.type.value, 'optional': self.optional}
        if self.scale is not None:
            result['scale'] = self.scale
        if self.value_type is not None:
            result['value_type'] = self.value_type.to_dict()
        return result


class Schema:
    """Ordered, immutable collection of field schemas.

    Field order follows source column order and field names are unique.
    """

    def __init__(self, name: str | None, fields: list[FieldSchema]):
        self.name = name
        self._fields = tuple(fields)
        self._by_name: dict[str, FieldSchema] = {}
        for f in self._fields:
            if f.name in self._by_name:
                raise ValidationError(f'Duplicate field name {f.name!r} in schema {name!r}')
            self._by_name[f.name] = f

    @property
    def fields(self) -> tuple[FieldSchema, ...]:
        return self._fields

    def field(self, name: str) -> FieldSchema:
        """Get a field schema by name.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f'{name!r} is not a field of schema {self.name!r}') from None

    def field_names(self) -> list[str]:
        return [f.name for f in self._fields]

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self):
        return iter(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self.name == other.name and self._fields == other._fields

    def __hash__(self) -> int:
        return hash((self.name, self._fields))

    def __repr__(self) -> str:
        return f'Schema(name={self.name!r}, fields={self.field_names()!r})'

    def to_dict(self) -> dict[str, Any]:
        return {'name': self.name, 'fields': [f.to_dict() for f in self._fields]}


class Struct:
    """Record bound to a Schema.

    Only fields that have been put are present; a value that was put always
    satisfies its field type.
    """

    def __init__(self, schema: Schema):
        self.schema = schema
        self._values: dict[str, Any] = {}

    def put(self, name: str, value: Any) -> 'Struct':
        """Validate and store a value for a field.
        """
        self.schema.field(name).validate(value)
        self._values[name] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        self.schema.field(name)
        return self._values.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Struct):
            return NotImplemented
        return self.schema == other.schema and self._values == other._values

    def __repr__(self) -> str:
        return f'Struct({self._values!r})'

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dict in schema field order.
        """
        return {name: self._values[name] for name in self.schema.field_names()
                if name in self._values}

    def to_attrdict(self) -> attrdict:
        return attrdict(self.to_dict())


@dataclass(frozen=True, slots=True)
class Field:
    """Write-path column: name, canonical type and primary key flag."""
    type: FieldType
    name: str
    primary_key: bool = False
