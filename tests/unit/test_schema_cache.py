"""
Unit tests for schema cache utilities.
"""
import sqlstruct
from sqlstruct.cache import Cache, cacheable_schema


def test_cache_singleton():
    """Test that Cache is a singleton"""
    cache1 = Cache.get_instance()
    cache2 = Cache.get_instance()
    assert cache1 is cache2


def test_cache_operations():
    """Test named cache get/set operations"""
    cache = Cache.get_instance()

    schemas = cache.get_cache('test_schemas')
    schemas[('test_table', (), False)] = 'schema'
    assert ('test_table', (), False) in schemas

    cache.clear_all()

    schemas = cache.get_cache('test_schemas')
    assert ('test_table', (), False) not in schemas


def test_clear_for_table():
    """Test clearing cache entries for a specific table"""
    cache = Cache.get_instance()
    schemas = cache.get_cache('test_schemas')
    schemas[('table1', (), False)] = 'one'
    schemas[('table2', (), False)] = 'two'

    cache.clear_for_table('table1')

    assert ('table1', (), False) not in schemas
    assert ('table2', (), False) in schemas


def test_cacheable_schema_decorator():
    """Test the decorator calls through once per key"""
    calls = []

    @cacheable_schema('test_decorated')
    def build(table_name, columns, map_numerics):
        calls.append((table_name, columns, map_numerics))
        return object()

    first = build('t', ['a'])
    assert build('t', ('a',)) is first
    assert build('t', ['a'], map_numerics=True) is not first
    build('t', ['a'], bypass_cache=True)
    assert len(calls) == 3
    assert calls[0] == ('t', ('a',), False)


def test_package_clear_cache(make_column):
    """Test the package-level clear_cache helper"""
    from sqlstruct.types import SqlType
    columns = [make_column(SqlType.INTEGER, name='id')]
    first = sqlstruct.convert_schema('users', columns)
    sqlstruct.clear_cache('users')
    assert sqlstruct.convert_schema('users', columns) is not first
    sqlstruct.clear_cache()


if __name__ == '__main__':
    __import__('pytest').main([__file__])
