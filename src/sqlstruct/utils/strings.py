"""
String helpers for building SQL text and parsing key/value settings.
"""
from collections.abc import Iterable
from typing import Any


def join(elements: Iterable[Any], delim: str) -> str:
    """Join elements, converted to strings, with a delimiter.

    Args:
        elements: Elements to concatenate
        delim: Delimiter placed between each element

    Returns
        The concatenated string
    """
    return delim.join(str(e) for e in elements)


def string_to_map(input: str, delim: str, kv_sep: str) -> dict[str, str]:
    """Parse a delimited list of key/value pairs.

    >>> string_to_map('a=1,b=2', ',', '=')
    {'a': '1', 'b': '2'}

    Args:
        input: String of key/value pairs
        delim: Delimiter placed between each pair
        kv_sep: Separator between the key and value in a pair

    Returns
        dict of the pairs

    Raises
        ValueError: If a pair does not split into exactly a key and a value
    """
    result = {}
    for pair in input.split(delim):
        key_value = pair.split(kv_sep)
        if len(key_value) != 2:
            raise ValueError(f"Could not parse key value pair '{pair}' with separator '{kv_sep}'.")
        result[key_value[0]] = key_value[1]
    return result
