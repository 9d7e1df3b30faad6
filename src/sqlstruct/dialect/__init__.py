"""
Dialect factory for database-specific SQL generation.
"""
import logging
from functools import lru_cache

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlstruct.dialect.base import _DIALECT_REGISTRY
from sqlstruct.dialect.base import Dialect as Dialect
from sqlstruct.dialect.base import register_dialect as register_dialect
from sqlstruct.dialect.mariadb import MariaDbDialect as MariaDbDialect
from sqlstruct.dialect.mysql import MySqlDialect as MySqlDialect
from sqlstruct.dialect.oracle import OracleDialect as OracleDialect
from sqlstruct.dialect.postgres import PostgresDialect as PostgresDialect
from sqlstruct.dialect.sqlite import SQLiteDialect as SQLiteDialect
from sqlstruct.dialect.sqlserver import SqlServerDialect as SqlServerDialect
from sqlstruct.exceptions import DialectNotFoundError

logger = logging.getLogger(__name__)


def _validate_dialect(dialect: str) -> None:
    """Raise DialectNotFoundError if dialect is not registered."""
    if dialect not in _DIALECT_REGISTRY:
        available = get_available_dialects()
        raise DialectNotFoundError(f'Unsupported dialect: {dialect}. Available: {available}')


@lru_cache(maxsize=16)
def _get_dialect(dialect: str) -> Dialect:
    """Get cached dialect instance for a dialect name."""
    _validate_dialect(dialect)
    return _DIALECT_REGISTRY[dialect]()


def get_dialect(dialect: str) -> Dialect:
    """Get dialect instance for a dialect name.

    Names are case-insensitive: 'sqlite', 'mariadb', 'mysql', 'mssql' or
    'sqlserver', 'postgresql' or 'postgres', 'oracle'.
    """
    return _get_dialect(dialect.strip().lower())


def get_dialect_for_url(url: str) -> Dialect:
    """Get dialect instance for a connection URL.

    Accepts JDBC URLs (jdbc:sqlserver://host;databaseName=db) and SQLAlchemy
    URLs (mssql+pyodbc://user@dsn, postgresql://host/db, sqlite:///file.db).
    """
    if url.lower().startswith('jdbc:'):
        product = url[5:].split(':', 1)[0]
        logger.debug(f'Resolved JDBC url to dialect {product}')
        return get_dialect(product)
    try:
        backend = make_url(url).get_backend_name()
    except ArgumentError as exc:
        raise DialectNotFoundError(f'Cannot determine dialect for url {url!r}: {exc}') from exc
    return get_dialect(backend)


def get_available_dialects() -> list[str]:
    """Return list of registered dialect names."""
    return list(_DIALECT_REGISTRY.keys())


def is_supported_dialect(dialect: str) -> bool:
    """Check if a dialect is supported."""
    return dialect.strip().lower() in _DIALECT_REGISTRY


def get_dialect_class(dialect: str) -> type['Dialect']:
    """Get the dialect class for a dialect name without instantiating."""
    dialect = dialect.strip().lower()
    _validate_dialect(dialect)
    return _DIALECT_REGISTRY[dialect]
