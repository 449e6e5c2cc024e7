"""Bounded least-recently-used cache.

One instance per fetched resource kind (entities, species, moves, abilities,
rendered sprites). Not thread-safe: callers share it from the single event
loop thread only.
"""
from __future__ import annotations
from collections import OrderedDict
from typing import Generic, Hashable, TypeVar, Union

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

class _Miss:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False

# Returned by LRUCache.get on a miss so cached None / falsy values stay distinguishable
MISS = _Miss()

class LRUCache(Generic[K, V]):
    def __init__(self, max_size: int = 100):
        self._data: OrderedDict[K, V] = OrderedDict()
        self.max_size = max(0, int(max_size))

    def get(self, key: K) -> Union[V, _Miss]:
        if key not in self._data:
            return MISS
        self._data.move_to_end(key)
        return self._data[key]

    def set(self, key: K, value: V) -> None:
        if self.max_size == 0:
            return
        if key in self._data:
            self._data.move_to_end(key)
        self._data[key] = value
        if len(self._data) > self.max_size:
            self._data.popitem(last=False)

    def has(self, key: K) -> bool:
        return key in self._data

    def clear(self) -> None:
        self._data.clear()

    @property
    def size(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

__all__ = ["LRUCache", "MISS"]
