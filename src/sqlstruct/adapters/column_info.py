"""
Column metadata abstraction across database backends.
"""
import logging
from dataclasses import dataclass
from typing import Any, Self

from sqlstruct.adapters.type_mapping import resolve_postgres_type
from sqlstruct.adapters.type_mapping import resolve_sqlite_type
from sqlstruct.exceptions import ValidationError
from sqlstruct.types import Nullability, SqlType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """Description of one result-set column.

    Immutable and hashable, so a tuple of descriptors identifies a query shape.

    Args:
        index: Zero-based position of the column in the result set
        name: Underlying column name
        sql_type: SqlType code (plain ints are accepted and normalized)
        label: Name requested by the query (``AS`` clause), preferred over name
        type_name: Database-native type name (e.g. 'jsonb', '_uuid')
        nullable: Nullability flag
        precision: Numeric precision
        scale: Numeric scale
        signed: Whether numeric values are signed
    """
    index: int
    name: str
    sql_type: SqlType | int
    label: str | None = None
    type_name: str | None = None
    nullable: Nullability = Nullability.UNKNOWN
    precision: int = 0
    scale: int = 0
    signed: bool = True

    def __post_init__(self):
        if self.index < 0:
            raise ValidationError(f'Column index must be >= 0, got {self.index}')
        try:
            object.__setattr__(self, 'sql_type', SqlType(self.sql_type))
        except ValueError:
            pass
        object.__setattr__(self, 'nullable', Nullability(self.nullable))

    @property
    def field_name(self) -> str:
        """Label when present, otherwise the column name."""
        return self.label or self.name

    @property
    def optional(self) -> bool:
        return self.nullable in {Nullability.NULLABLE, Nullability.UNKNOWN}

    @property
    def element_type_name(self) -> str:
        """Element type name for array columns ('_uuid' and 'uuid[]' give 'uuid').
        """
        type_name = (self.type_name or '').strip()
        if type_name.endswith('[]'):
            return type_name[:-2]
        if type_name.startswith('_'):
            return type_name[1:]
        return type_name

    def __repr__(self) -> str:
        sql_type = self.sql_type.name if isinstance(self.sql_type, SqlType) else self.sql_type
        return (f'ColumnDescriptor(index={self.index}, name={self.field_name!r}, '
                f'sql_type={sql_type}, type_name={self.type_name!r})')

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.
        """
        return {
            'index': self.index,
            'name': self.name,
            'label': self.label,
            'sql_type': int(self.sql_type),
            'type_name': self.type_name,
            'nullable': int(self.nullable),
            'precision': self.precision,
            'scale': self.scale,
            'signed': self.signed,
            }

    @classmethod
    def from_cursor_description(cls, index: int, description_item: Any,
                                connection_type: str) -> Self:
        """Create a ColumnDescriptor from a cursor description item.

        Args:
            index: Position of the column in the description
            description_item: One item from cursor.description
            connection_type: Database type ('postgresql', 'sqlite')

        Returns
            ColumnDescriptor instance
        """
        if connection_type == 'postgresql':
            return cls._from_postgres_description(index, description_item)
        name = str(description_item[0]) if description_item else f'column{index}'
        logger.debug(f'No type information in {connection_type} cursor description for {name}')
        return cls(index=index, name=name, sql_type=SqlType.OTHER, type_name='')

    @classmethod
    def _from_postgres_description(cls, index: int, description_item: Any) -> Self:
        """Extract column information from a psycopg cursor description.
        """
        type_code = getattr(description_item, 'type_code', None)
        sql_type, type_name = resolve_postgres_type(type_code)
        null_ok = getattr(description_item, 'null_ok', None)
        if null_ok is None:
            nullable = Nullability.UNKNOWN
        else:
            nullable = Nullability.NULLABLE if null_ok else Nullability.NO_NULLS
        return cls(
            index=index,
            name=getattr(description_item, 'name', None) or f'column{index}',
            sql_type=sql_type,
            type_name=type_name,
            nullable=nullable,
            precision=getattr(description_item, 'precision', None) or 0,
            scale=getattr(description_item, 'scale', None) or 0,
            )


def columns_from_cursor_description(cursor: Any, connection_type: str) -> list[ColumnDescriptor]:
    """Create ColumnDescriptors directly from a cursor description.

    Args:
        cursor: Database cursor with a description attribute
        connection_type: Database type ('postgresql', 'sqlite')

    Returns
        List of ColumnDescriptor objects
    """
    if cursor.description is None:
        return []
    return [ColumnDescriptor.from_cursor_description(i, item, connection_type)
            for i, item in enumerate(cursor.description)]


def columns_from_sqlite_table(connection: Any, table: str) -> list[ColumnDescriptor]:
    """Describe a SQLite table's columns from PRAGMA table_info.

    sqlite3 cursor descriptions carry names only, so the declared column types
    are read from the table definition instead.

    Args:
        connection: sqlite3 connection
        table: Table name

    Returns
        List of ColumnDescriptor objects in column order
    """
    quoted = '"' + table.replace('"', '""') + '"'
    rows = connection.execute(f'PRAGMA table_info({quoted})').fetchall()
    if not rows:
        raise ValidationError(f'Table {table!r} does not exist or has no columns')

    columns = []
    for cid, name, decltype, notnull, _, pk in rows:
        sql_type, precision, scale = resolve_sqlite_type(decltype)
        nullable = Nullability.NO_NULLS if notnull or pk else Nullability.NULLABLE
        columns.append(ColumnDescriptor(
            index=cid,
            name=name,
            sql_type=sql_type,
            type_name=(decltype or '').lower(),
            nullable=nullable,
            precision=precision,
            scale=scale,
            ))
    return columns
