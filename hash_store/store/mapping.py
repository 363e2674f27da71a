"""
Hash Entry Mapping

Converts between a local field -> value dict and the field/value
pairs a Redis hash command works with.
"""

from typing import Dict, Iterable, List, Mapping, Tuple, Union

HashEntry = Tuple[str, str]


def _text(value: Union[str, bytes]) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def to_hash_entries(values: Mapping[str, str]) -> List[HashEntry]:
    """
    Convert a mapping into one (field, value) pair per item.

    Args:
        values: Local field -> value mapping

    Returns:
        List of (field, value) tuples, same length as the mapping
    """
    return [(field, value) for field, value in values.items()]


def flatten_hash_entries(entries: Iterable[HashEntry]) -> List[str]:
    """Lay pairs out as the HSET argument list: f1, v1, f2, v2, ..."""
    items: List[str] = []
    for field, value in entries:
        items.append(field)
        items.append(value)
    return items


def from_hash_entries(
    entries: Union[Mapping[Union[str, bytes], Union[str, bytes]], Iterable[Tuple]]
) -> Dict[str, str]:
    """
    Convert HGETALL output back into a field -> value dict.

    Accepts the dict redis-py returns or any iterable of pairs. Bytes
    are decoded as UTF-8; a later duplicate field overwrites an earlier one.
    """
    if isinstance(entries, Mapping):
        entries = entries.items()

    result: Dict[str, str] = {}
    for field, value in entries:
        result[_text(field)] = _text(value)
    return result
