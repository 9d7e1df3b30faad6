"""
Type resolution for result-set columns.

Maps a column's SQL type code (plus signedness, precision and scale) to a
canonical field type through a total lookup table of TypeRule objects. Every
SqlType member has an entry; codes with no canonical mapping resolve to the
UNSUPPORTED rule, so "unsupported" is an enumerable outcome rather than a
fallthrough.

The module also holds the driver-side maps that translate native type codes
(PostgreSQL OIDs, SQLite declared types) into SqlType codes.

The module focuses solely on type identification, not conversion.
"""
import logging
import re
from typing import TYPE_CHECKING

from sqlstruct.types import FieldSchema, FieldType, SqlType

if TYPE_CHECKING:
    from sqlstruct.adapters.column_info import ColumnDescriptor

logger = logging.getLogger(__name__)

# Vendor types reported under a generic type code that are read as strings
STRING_CONVERTIBLE_TYPES = frozenset({'json', 'jsonb', 'uuid'})

# NUMBER without declared precision (Oracle) reports this scale
UNDEFINED_SCALE = -127


class TypeRule:
    """Base class for column type rules.
    """

    def field_type(self, column: 'ColumnDescriptor', map_numerics: bool) -> FieldType | None:
        """Return the canonical type for the column, or None if unsupported.
        """
        return None

    def build(self, column: 'ColumnDescriptor', map_numerics: bool) -> FieldSchema | None:
        """Build the field schema for a column, or None if it has no mapping.
        """
        field_type = self.field_type(column, map_numerics)
        if field_type is None:
            return None
        return FieldSchema(column.field_name, field_type,
                           optional=column.optional, column=column)

    @property
    def supported(self) -> bool:
        return True


class UnsupportedRule(TypeRule):
    """Rule for type codes with no canonical mapping."""

    @property
    def supported(self) -> bool:
        return False


class SimpleRule(TypeRule):
    """Rule mapping to a single canonical type."""

    def __init__(self, field_type: FieldType) -> None:
        self._field_type = field_type

    def field_type(self, column, map_numerics):
        return self._field_type


class IntegerRule(TypeRule):
    """Fixed-width integer; unsigned columns widen to the next signed type."""

    def __init__(self, signed: FieldType, unsigned: FieldType) -> None:
        self.signed = signed
        self.unsigned = unsigned

    def field_type(self, column, map_numerics):
        return self.signed if column.signed else self.unsigned


class DecimalRule(TypeRule):
    """Fixed-precision decimal carrying the column scale."""

    def field_type(self, column, map_numerics):
        return FieldType.DECIMAL

    def build(self, column, map_numerics):
        return FieldSchema(column.field_name, FieldType.DECIMAL,
                           optional=column.optional, scale=decimal_scale(column),
                           column=column)


class NumericRule(DecimalRule):
    """NUMERIC narrows to an integer type when map_numerics applies.

    Otherwise it falls through to the decimal mapping.
    """

    def field_type(self, column, map_numerics):
        narrowed = narrow_numeric(column, map_numerics)
        return narrowed or FieldType.DECIMAL

    def build(self, column, map_numerics):
        narrowed = narrow_numeric(column, map_numerics)
        if narrowed is None:
            return super().build(column, map_numerics)
        return FieldSchema(column.field_name, narrowed,
                           optional=column.optional, column=column)


class ArrayRule(TypeRule):
    """Arrays map to a list of optional strings."""

    def field_type(self, column, map_numerics):
        return FieldType.ARRAY

    def build(self, column, map_numerics):
        return FieldSchema(column.field_name, FieldType.ARRAY,
                           optional=column.optional,
                           value_type=FieldSchema('element', FieldType.STRING, optional=True),
                           column=column)


class StringConvertibleRule(TypeRule):
    """Generic type code; only json, jsonb and uuid type names are supported."""

    def field_type(self, column, map_numerics):
        if (column.type_name or '').lower() in STRING_CONVERTIBLE_TYPES:
            return FieldType.STRING
        return None


UNSUPPORTED = UnsupportedRule()

TYPE_RULES: dict[SqlType, TypeRule] = {
    SqlType.BIT: SimpleRule(FieldType.BOOLEAN),
    SqlType.BOOLEAN: SimpleRule(FieldType.BOOLEAN),
    SqlType.TINYINT: IntegerRule(FieldType.INT8, FieldType.INT16),
    SqlType.SMALLINT: IntegerRule(FieldType.INT16, FieldType.INT32),
    SqlType.INTEGER: IntegerRule(FieldType.INT32, FieldType.INT64),
    # TODO: unsigned BIGINT has no wider canonical type; values above 2**63 - 1
    # are dropped from the record until an unsigned/decimal mapping is chosen
    SqlType.BIGINT: SimpleRule(FieldType.INT64),
    SqlType.REAL: SimpleRule(FieldType.FLOAT32),
    SqlType.FLOAT: SimpleRule(FieldType.FLOAT64),
    SqlType.DOUBLE: SimpleRule(FieldType.FLOAT64),
    SqlType.NUMERIC: NumericRule(),
    SqlType.DECIMAL: DecimalRule(),
    SqlType.CHAR: SimpleRule(FieldType.STRING),
    SqlType.VARCHAR: SimpleRule(FieldType.STRING),
    SqlType.LONGVARCHAR: SimpleRule(FieldType.STRING),
    SqlType.NCHAR: SimpleRule(FieldType.STRING),
    SqlType.NVARCHAR: SimpleRule(FieldType.STRING),
    SqlType.LONGNVARCHAR: SimpleRule(FieldType.STRING),
    SqlType.CLOB: SimpleRule(FieldType.STRING),
    SqlType.NCLOB: SimpleRule(FieldType.STRING),
    SqlType.DATALINK: SimpleRule(FieldType.STRING),
    SqlType.SQLXML: SimpleRule(FieldType.STRING),
    SqlType.BINARY: SimpleRule(FieldType.BYTES),
    SqlType.BLOB: SimpleRule(FieldType.BYTES),
    SqlType.VARBINARY: SimpleRule(FieldType.BYTES),
    SqlType.LONGVARBINARY: SimpleRule(FieldType.BYTES),
    SqlType.DATE: SimpleRule(FieldType.DATE),
    SqlType.TIME: SimpleRule(FieldType.TIME),
    SqlType.TIMESTAMP: SimpleRule(FieldType.TIMESTAMP),
    SqlType.ARRAY: ArrayRule(),
    SqlType.OTHER: StringConvertibleRule(),
    SqlType.NULL: UNSUPPORTED,
    SqlType.JAVA_OBJECT: UNSUPPORTED,
    SqlType.DISTINCT: UNSUPPORTED,
    SqlType.STRUCT: UNSUPPORTED,
    SqlType.REF: UNSUPPORTED,
    SqlType.ROWID: UNSUPPORTED,
    }


def decimal_scale(column: 'ColumnDescriptor') -> int:
    """Scale of a decimal column with the undefined-precision sentinel normalized.
    """
    scale = column.scale or 0
    if scale == UNDEFINED_SCALE:
        return -UNDEFINED_SCALE
    return scale


def narrow_numeric(column: 'ColumnDescriptor', map_numerics: bool) -> FieldType | None:
    """Smallest integer type for a zero-scale NUMERIC, or None to keep it decimal.
    """
    if not map_numerics:
        return None
    precision = column.precision or 0
    if (column.scale or 0) != 0 or precision >= 19:
        return None
    if precision > 9:
        return FieldType.INT64
    if precision > 4:
        return FieldType.INT32
    if precision > 2:
        return FieldType.INT16
    return FieldType.INT8


def get_rule(sql_type: int) -> TypeRule:
    """Look up the rule for a type code; unknown codes are unsupported.
    """
    try:
        return TYPE_RULES[SqlType(sql_type)]
    except ValueError:
        return UNSUPPORTED


def resolve_field(column: 'ColumnDescriptor', map_numerics: bool = False) -> FieldSchema | None:
    """Resolve the canonical field schema for a column.

    Args:
        column: Column metadata
        map_numerics: Narrow zero-scale NUMERIC columns to integer types

    Returns
        FieldSchema, or None if the column type is not supported
    """
    return get_rule(column.sql_type).build(column, map_numerics)


def supported_sql_types() -> list[SqlType]:
    """SQL type codes that have a canonical mapping.
    """
    return [sql_type for sql_type, rule in TYPE_RULES.items() if rule.supported]


from psycopg.postgres import types

_postgres_names = {
    'bool': SqlType.BIT,
    'int2': SqlType.SMALLINT,
    'int4': SqlType.INTEGER,
    'int8': SqlType.BIGINT,
    'oid': SqlType.BIGINT,
    'float4': SqlType.REAL,
    'float8': SqlType.DOUBLE,
    'numeric': SqlType.NUMERIC,
    '"char"': SqlType.CHAR,
    'bpchar': SqlType.CHAR,
    'varchar': SqlType.VARCHAR,
    'text': SqlType.VARCHAR,
    'name': SqlType.VARCHAR,
    'bytea': SqlType.BINARY,
    'date': SqlType.DATE,
    'time': SqlType.TIME,
    'timetz': SqlType.TIME,
    'timestamp': SqlType.TIMESTAMP,
    'timestamptz': SqlType.TIMESTAMP,
    'json': SqlType.OTHER,
    'jsonb': SqlType.OTHER,
    'uuid': SqlType.OTHER,
    'xml': SqlType.SQLXML,
    }

# OID -> (SqlType, type name); array OIDs use the '_element' naming convention
postgres_sql_types: dict[int, tuple[SqlType, str]] = {}
for _name, _sql_type in _postgres_names.items():
    _info = types.get(_name)
    postgres_sql_types[_info.oid] = (_sql_type, _info.name)
    if _info.array_oid:
        postgres_sql_types[_info.array_oid] = (SqlType.ARRAY, f'_{_info.name}')


def resolve_postgres_type(type_code: int) -> tuple[SqlType, str]:
    """Map a PostgreSQL OID to its SqlType code and type name.
    """
    if type_code in postgres_sql_types:
        return postgres_sql_types[type_code]
    info = types.get(type_code)
    name = info.name if info is not None else str(type_code)
    logger.debug(f'No SQL type for PostgreSQL oid {type_code} ({name})')
    return SqlType.OTHER, name


_DECLTYPE = re.compile(r'^\s*([A-Za-z_][A-Za-z0-9_ ]*?)\s*(?:\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\))?\s*$')

sqlite_sql_types: dict[str, SqlType] = {
    'INTEGER': SqlType.INTEGER,
    'INT': SqlType.INTEGER,
    'TINYINT': SqlType.TINYINT,
    'SMALLINT': SqlType.SMALLINT,
    'MEDIUMINT': SqlType.INTEGER,
    'BIGINT': SqlType.BIGINT,
    'REAL': SqlType.REAL,
    'FLOAT': SqlType.FLOAT,
    'DOUBLE': SqlType.DOUBLE,
    'DOUBLE PRECISION': SqlType.DOUBLE,
    'DECIMAL': SqlType.DECIMAL,
    'BOOLEAN': SqlType.BOOLEAN,
    'TEXT': SqlType.VARCHAR,
    'VARCHAR': SqlType.VARCHAR,
    'CHAR': SqlType.CHAR,
    'NCHAR': SqlType.NCHAR,
    'NVARCHAR': SqlType.NVARCHAR,
    'CLOB': SqlType.CLOB,
    'BLOB': SqlType.BLOB,
    'DATE': SqlType.DATE,
    'TIME': SqlType.TIME,
    'DATETIME': SqlType.TIMESTAMP,
    'TIMESTAMP': SqlType.TIMESTAMP,
    'JSON': SqlType.OTHER,
    'UUID': SqlType.OTHER,
    }


def resolve_sqlite_type(decltype: str | None) -> tuple[SqlType, int, int]:
    """Map a SQLite declared column type to (SqlType, precision, scale).

    NUMERIC without a declared precision reports FLOAT, matching SQLite's
    numeric affinity. Unknown declared types follow the SQLite affinity rules.
    """
    match = _DECLTYPE.match(decltype or '')
    if not match:
        return SqlType.BLOB, 0, 0

    base = ' '.join(match.group(1).upper().split())
    precision = int(match.group(2)) if match.group(2) else 0
    scale = int(match.group(3)) if match.group(3) else 0

    if base == 'NUMERIC':
        if precision:
            return SqlType.NUMERIC, precision, scale
        return SqlType.FLOAT, 0, 0

    if base in sqlite_sql_types:
        return sqlite_sql_types[base], precision, scale

    if 'INT' in base:
        return SqlType.BIGINT, precision, 0
    if any(s in base for s in ('CHAR', 'CLOB', 'TEXT')):
        return SqlType.VARCHAR, precision, 0
    if 'BLOB' in base:
        return SqlType.BLOB, 0, 0
    if any(s in base for s in ('REAL', 'FLOA', 'DOUB')):
        return SqlType.DOUBLE, 0, 0
    return SqlType.FLOAT, precision, scale
