"""
Base dialect interface for SQL statement generation.

Defines the abstract base class every database-specific dialect inherits from.
A dialect turns a table name and a list of fields (or column names) into the
CREATE TABLE, ALTER TABLE and upsert statements for one engine. Dialects only
generate text; they never execute it.

Each concrete dialect carries a class-level type map from canonical field type
to native column type, its parameter placeholder style and its statement
terminator.
"""
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from sqlstruct.exceptions import ValidationError
from sqlstruct.types import Field, FieldType
from sqlstruct.utils.strings import join

logger = logging.getLogger(__name__)

# Registry of dialect name -> dialect class
# Defined here to avoid circular imports (concrete dialects import from base)
_DIALECT_REGISTRY: dict[str, type['Dialect']] = {}

LINE_SEPARATOR = '\n'


def register_dialect(*names: str):
    """Decorator to register a dialect class under one or more names.

    Usage:
        @register_dialect('mssql', 'sqlserver')
        class SqlServerDialect(Dialect):
            ...
    """
    def decorator(cls: type['Dialect']) -> type['Dialect']:
        for name in names:
            _DIALECT_REGISTRY[name] = cls
        cls.name = names[0]
        return cls
    return decorator


class Dialect(ABC):
    """Base class for database-specific SQL generation.
    """

    name: str = ''
    type_map: dict[FieldType, str] = {}
    placeholder: str = '?'
    statement_terminator: str = ';'

    def sql_type(self, field_type: FieldType) -> str:
        """Native column type for a canonical field type.

        Raises
            ValidationError: If the dialect has no mapping for the type
        """
        try:
            return self.type_map[field_type]
        except KeyError:
            raise ValidationError(
                f'{type(self).__name__} does not support field type {field_type.value}') from None

    def placeholders(self, count: int) -> list[str]:
        """Parameter markers for count bound values, in order."""
        return [self.placeholder] * count

    def column_definition(self, field: Field) -> str:
        nullability = 'NOT NULL' if field.primary_key else 'NULL'
        return f'{field.name} {self.sql_type(field.type)} {nullability}'

    def create_table(self, table: str, fields: Sequence[Field]) -> str:
        """Generate the CREATE TABLE statement for a table.

        Primary key fields are declared NOT NULL and listed, in input order, in a
        trailing PRIMARY KEY clause; all other fields are NULL.

        Args:
            table: Table name
            fields: Fields in column order

        Returns
            CREATE TABLE statement
        """
        self._validate_table(table)
        self._validate_fields(fields)

        lines = [self.column_definition(f) for f in fields]
        primary_keys = [f.name for f in fields if f.primary_key]
        if primary_keys:
            lines.append(f'PRIMARY KEY({join(primary_keys, ",")})')
        body = f',{LINE_SEPARATOR}'.join(lines)
        return f'CREATE TABLE {table} ({LINE_SEPARATOR}{body}){self.statement_terminator}'

    @abstractmethod
    def alter_table(self, table: str, fields: Sequence[Field]) -> list[str]:
        """Generate the statements adding fields to an existing table.

        Added columns are always NULL since existing rows have no value for them.

        Args:
            table: Table name
            fields: Fields to add

        Returns
            List of ALTER TABLE statements
        """

    @abstractmethod
    def upsert_query(self, table: str, non_key_columns: Sequence[str],
                     key_columns: Sequence[str]) -> str:
        """Generate an insert-or-update statement for one row.

        Bound values are expected in the order non_key_columns + key_columns.

        Args:
            table: Table name
            non_key_columns: Columns updated when the key matches
            key_columns: Columns identifying the row

        Returns
            Parameterized upsert statement
        """

    def _validate_table(self, table: str | None) -> None:
        if table is None or not table.strip():
            raise ValidationError('<table> is not a valid parameter')

    def _validate_fields(self, fields: Sequence[Field] | None) -> None:
        if not fields:
            raise ValidationError('<fields> is invalid. Expecting a non empty collection')

    def _validate_upsert(self, table: str | None, non_key_columns: Sequence[str] | None,
                         key_columns: Sequence[str] | None) -> None:
        self._validate_table(table)
        if not non_key_columns:
            raise ValidationError('<non_key_columns> is invalid. Expecting a non empty collection')
        if not key_columns:
            raise ValidationError('<key_columns> is invalid. Expecting a non empty collection')

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'
