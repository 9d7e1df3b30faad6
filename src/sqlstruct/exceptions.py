"""
Error taxonomy for schema conversion and SQL generation.
"""


class SqlStructError(Exception):
    """Base class for all sqlstruct errors.
    """


class ValidationError(SqlStructError, ValueError):
    """Invalid argument passed by the caller (empty table, empty field list, ...).
    """


class ConfigurationError(SqlStructError, ValueError):
    """Invalid or unsupported configuration value.
    """


class DialectNotFoundError(ConfigurationError):
    """No dialect is registered for the requested database product.
    """


class UnsupportedTypeError(SqlStructError):
    """SQL type code with no canonical mapping.
    """


class TypeConversionError(SqlStructError):
    """Error converting a native column value to its canonical value.
    """


# Errors caught per field during record conversion
ConversionErrors = (
    TypeConversionError,
    UnsupportedTypeError,
    ValueError,
    TypeError,
    ArithmeticError,
    )
