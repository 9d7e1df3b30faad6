from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pandas as pd
import pyarrow as pa
from sqlstruct.adapters.type_conversion import get_timezone
from sqlstruct.dialect import get_available_dialects, is_supported_dialect
from sqlstruct.types import Schema, Struct

from libb import ConfigOptions

__all__ = [
    'ConverterOptions',
    'pandas_numpy_data_loader',
    'pandas_pyarrow_data_loader',
    'iterdict_data_loader',
]


def iterdict_data_loader(records: list[Struct], schema: Schema, **kwargs) -> list[dict]:
    """Minimal data loader.

    Accepts additional keyword arguments (like table_name) for compatibility
    with other data loaders, but doesn't use them.
    """
    if not records:
        return []
    return [record.to_dict() for record in records]


def _field_types(schema: Schema) -> dict[str, dict[str, Any]]:
    return {f.name: f.to_dict() for f in schema.fields}


def _empty_dataframe(schema: Schema) -> pd.DataFrame:
    """Create empty DataFrame with field metadata."""
    df = pd.DataFrame(columns=schema.field_names())
    df.attrs['field_types'] = _field_types(schema)
    return df


def pandas_numpy_data_loader(records: list[Struct], schema: Schema, **kwargs) -> pd.DataFrame:
    """Standard pandas DataFrame loader using NumPy.

    Always returns a DataFrame, never None, with columns preserved for empty
    results. Fields omitted from a record load as missing values. Includes
    field type information in the DataFrame.attrs attribute.
    """
    if not records:
        return _empty_dataframe(schema)

    names = schema.field_names()
    df = pd.DataFrame.from_records([record.to_dict() for record in records], columns=names)
    df.attrs['field_types'] = _field_types(schema)
    return df


def pandas_pyarrow_data_loader(records: list[Struct], schema: Schema, **kwargs) -> pd.DataFrame:
    """PyArrow-based pandas DataFrame loader.

    Always returns a DataFrame, never None, with columns preserved for empty results.
    """
    if not records:
        return _empty_dataframe(schema)

    names = schema.field_names()
    columns_data = [[record.get(name) for record in records] for name in names]
    df = pa.table(columns_data, names=names).to_pandas(types_mapper=pd.ArrowDtype)
    df.attrs['field_types'] = _field_types(schema)
    return df


@dataclass
class ConverterOptions(ConfigOptions):
    """Options

    supported dialect names: see `sqlstruct.dialect.get_available_dialects()`

    - map_numerics: Narrow zero-scale NUMERIC columns to integer types (default: False)
    - timezone: Canonical calendar for date/time values (default: UTC)
    - dialect: Dialect used for DDL/DML generation (default: None)
    - use_cache: Cache converted schemas per query shape (default: True)
    - data_loader: Callable materializing converted records (default: iterdict)
    """
    map_numerics: bool = False
    timezone: str = 'UTC'
    dialect: str | None = None
    use_cache: bool = True
    data_loader: Callable[..., Any] | None = None

    def __post_init__(self):
        if self.dialect is not None and not is_supported_dialect(self.dialect):
            available = get_available_dialects()
            raise ValueError(f'dialect must be one of: {available}')
        get_timezone(self.timezone)
        if self.data_loader is None:
            self.data_loader = iterdict_data_loader
