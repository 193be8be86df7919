"""
Ordered multi-value map

This module provides the case-preserving, insertion-ordered, multi-valued
string map used for both HTTP headers and query parameters.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional


@dataclass
class MultiMapValue:
    """
    A map entry

    Attributes:
        key: The key, with the case used when it was first added
        values: The ordered list of values
    """
    key: str
    values: List[Any] = field(default_factory=list)


class MultiMap:
    """
    A case-preserving string key multi-value map.

    Keys are compared case-insensitively unless ``case_insensitive`` is
    ``False``, and are returned in first-insertion order with their original
    case. Adding ``None`` is ignored; putting ``None`` removes the key.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None, case_insensitive: bool = True):
        """
        Initialize the map.

        Args:
            values: Optional mapping whose items are added via ``put_all()``
            case_insensitive: Whether key comparisons ignore case
        """
        self.case_insensitive = case_insensitive
        self._mappings: Dict[str, MultiMapValue] = {}
        if values:
            self.put_all(values)

    def _normalize_key(self, key: str) -> str:
        return key.lower() if self.case_insensitive else key

    def _add_value(self, key: str, value: Any, replace: bool = False) -> 'MultiMap':
        normalized = self._normalize_key(key)
        mapping = self._mappings.get(normalized)
        if mapping is None:
            mapping = MultiMapValue(key=key)
            self._mappings[normalized] = mapping
        if replace:
            mapping.values.clear()
        if isinstance(value, (list, tuple)):
            mapping.values.extend(value)
        else:
            mapping.values.append(value)
        return self

    def add(self, key: str, value: Any) -> 'MultiMap':
        """
        Add a value, appending to any existing values for the key.

        Args:
            key: The key to use
            value: The value to add; a list or tuple adds each item; ``None``
                is ignored

        Returns:
            MultiMap: Self for method chaining
        """
        if value is None:
            return self
        return self._add_value(key, value)

    def put(self, key: str, value: Any) -> 'MultiMap':
        """
        Set a value, replacing any existing values for the key.

        Args:
            key: The key to use
            value: The value to set; a list or tuple sets each item; ``None``
                removes the key

        Returns:
            MultiMap: Self for method chaining
        """
        if value is None:
            self.remove(key)
            return self
        return self._add_value(key, value, replace=True)

    def put_all(self, values: Mapping[str, Any]) -> 'MultiMap':
        """
        Set multiple values, replacing existing values for each key.

        Args:
            values: Mapping of keys to values, each applied via ``put()``

        Returns:
            MultiMap: Self for method chaining
        """
        for key, value in values.items():
            self.put(key, value)
        return self

    def values(self, key: str) -> Optional[List[Any]]:
        """
        Get the values associated with a key.

        Returns:
            list: The values, or None if the key is not present
        """
        mapping = self._mappings.get(self._normalize_key(key))
        return mapping.values if mapping is not None else None

    def first_value(self, key: str) -> Optional[Any]:
        """Get the first value associated with a key, or None."""
        values = self.values(key)
        return values[0] if values else None

    def remove(self, key: str) -> Optional[List[Any]]:
        """
        Remove all values associated with a key.

        Returns:
            list: The removed values, or None if the key was not present
        """
        mapping = self._mappings.pop(self._normalize_key(key), None)
        return mapping.values if mapping is not None else None

    def clear(self) -> 'MultiMap':
        """Remove all entries."""
        self._mappings.clear()
        return self

    def size(self) -> int:
        """Get the number of keys in the map."""
        return len(self._mappings)

    def is_empty(self) -> bool:
        return not self._mappings

    def contains_key(self, key: str) -> bool:
        return self._normalize_key(key) in self._mappings

    def key_set(self) -> List[str]:
        """
        Get all keys, in first-insertion order with their original case.
        """
        return [mapping.key for mapping in self._mappings.values()]

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.contains_key(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.key_set())

    def __repr__(self) -> str:
        items = ", ".join(f"{m.key!r}: {m.values!r}" for m in self._mappings.values())
        return f"{type(self).__name__}({{{items}}})"
