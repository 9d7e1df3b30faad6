"""
Row readers providing a consistent per-column read interface.

A reader returns the native value for a column index together with an
explicit "was null" flag. Readers handle ONLY row structure; they do NOT
perform any type conversion.
"""
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any


class RowReader(ABC):
    """Base reader for one result-set row."""

    @abstractmethod
    def read(self, index: int) -> tuple[Any, bool]:
        """Read a column value.

        Args:
            index: Zero-based column index

        Returns
            (value, was_null) - when was_null is True the value must be ignored
        """


class SequenceRowReader(RowReader):
    """Reader over a DB-API row tuple (or any sequence); None means null."""

    def __init__(self, row: Sequence[Any]):
        self.row = row

    def read(self, index):
        value = self.row[index]
        return value, value is None


class MappingRowReader(RowReader):
    """Reader over a dict-like row (sqlite3.Row, dict rows) keyed by column name.

    names maps a column index to its key, as a sequence or an {index: name} dict.
    """

    def __init__(self, row: Mapping[str, Any], names: Sequence[str] | Mapping[int, str]):
        self.row = row
        self.names = names

    def read(self, index):
        value = self.row[self.names[index]]
        return value, value is None


def create_row_reader(row: Any,
                      names: Sequence[str] | Mapping[int, str] | None = None) -> RowReader:
    """Create the appropriate reader for a row object.

    Args:
        row: RowReader, mapping row or sequence row
        names: Column names by index, required for mapping rows

    Returns
        RowReader instance
    """
    if isinstance(row, RowReader):
        return row
    if isinstance(row, Mapping):
        if names is None:
            names = list(row.keys())
        return MappingRowReader(row, names)
    return SequenceRowReader(row)
