"""Session-level generation setting.

Holds which generation the user is viewing. Created once at startup and
handed to whatever needs it; tests build their own instances.
"""
from __future__ import annotations
from typing import Callable, List

from poclidex.core.errors import InvalidGeneration
from poclidex.core.logging import logger
from poclidex.data.version_groups import MAX_GENERATION, MIN_GENERATION

class GenerationSession:
    def __init__(self):
        self._generation = MAX_GENERATION
        self._listeners: List[Callable[[int], None]] = []

    def current(self) -> int:
        return self._generation

    def set_current(self, generation: int) -> None:
        if isinstance(generation, bool) or not isinstance(generation, int) \
                or not MIN_GENERATION <= generation <= MAX_GENERATION:
            raise InvalidGeneration(generation)
        changed = generation != self._generation
        self._generation = generation
        logger.debug("SessionGenerationSet", generation=generation)
        if changed:
            self._notify()

    def effective(self, introduced_generation: int) -> int:
        """Never earlier than the generation the entity was introduced in."""
        return max(self._generation, introduced_generation)

    def on_change(self, fn: Callable[[int], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self._generation)

__all__ = ["GenerationSession"]
