"""Insertion-ordered key-value container used for flattened records.

`OrderedMap` keeps a dict from key to node for O(1) lookup and links the nodes
in a doubly-linked list that records insertion order. Setting an existing key
updates its node in place, so re-setting a key never moves it.

Iteration mirrors a cursor API::

    pair = record.oldest()
    while pair is not None:
        handle(pair.key, pair.value)
        pair = pair.next()

`oldest()` can be called again at any time and yields the same sequence as long
as the map has not been modified in between. Plain Python iteration over the
map yields `(key, value)` tuples in the same order.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

__all__ = ["OrderedMap", "Pair", "RecordValue"]

# Values emitted by the flattener: strings, booleans and doubles.
RecordValue = Union[str, bool, float]


class Pair:
    """One key/value entry of an `OrderedMap`, linked to its neighbours."""

    __slots__ = ("key", "value", "_prev", "_next")

    def __init__(self, key: str, value: Any) -> None:
        self.key = key
        self.value = value
        self._prev: Optional[Pair] = None
        self._next: Optional[Pair] = None

    def next(self) -> Optional["Pair"]:
        """Return the following pair, or None at the end of the map."""
        return self._next

    def prev(self) -> Optional["Pair"]:
        """Return the preceding pair, or None at the start of the map."""
        return self._prev

    def __repr__(self) -> str:
        return f"Pair({self.key!r}, {self.value!r})"


class OrderedMap:
    """String-keyed map with deterministic insertion-order iteration."""

    __slots__ = ("_nodes", "_head", "_tail")

    def __init__(self) -> None:
        self._nodes: Dict[str, Pair] = {}
        self._head: Optional[Pair] = None
        self._tail: Optional[Pair] = None

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], prefix: str = "") -> "OrderedMap":
        """Build a map from an unordered mapping, keys sorted ascending.

        The source mapping's own iteration order is ignored.
        """
        out = cls()
        for key in sorted(mapping):
            out.set(f"{prefix}{key}", mapping[key])
        return out

    def set(self, key: str, value: Any) -> None:
        node = self._nodes.get(key)
        if node is not None:
            node.value = value
            return
        node = Pair(key, value)
        self._nodes[key] = node
        if self._tail is None:
            self._head = node
        else:
            self._tail._next = node
            node._prev = self._tail
        self._tail = node

    def get(self, key: str, default: Any = None) -> Any:
        node = self._nodes.get(key)
        return default if node is None else node.value

    def delete(self, key: str) -> bool:
        """Remove `key` from lookup and order. Returns False if it was absent."""
        node = self._nodes.pop(key, None)
        if node is None:
            return False
        if node._prev is None:
            self._head = node._next
        else:
            node._prev._next = node._next
        if node._next is None:
            self._tail = node._prev
        else:
            node._next._prev = node._prev
        node._prev = node._next = None
        return True

    def oldest(self) -> Optional[Pair]:
        """Return the first pair in insertion order, or None if empty."""
        return self._head

    def newest(self) -> Optional[Pair]:
        """Return the last pair in insertion order, or None if empty."""
        return self._tail

    def merge(self, other: "OrderedMap", prefix: str = "") -> None:
        """Set every pair of `other`, in its order, optionally prefixing keys."""
        pair = other.oldest()
        while pair is not None:
            self.set(f"{prefix}{pair.key}", pair.value)
            pair = pair.next()

    def keys(self) -> List[str]:
        return [key for key, _ in self]

    def items(self) -> List[Tuple[str, Any]]:
        return list(self)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        pair = self._head
        while pair is not None:
            yield pair.key, pair.value
            pair = pair._next

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __eq__(self, other: object) -> bool:
        # Order-sensitive: same keys, same order, same values.
        if not isinstance(other, OrderedMap):
            return NotImplemented
        return len(self) == len(other) and self.items() == other.items()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self)
        return f"OrderedMap({{{body}}})"
