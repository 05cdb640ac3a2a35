"""
CHIP-8 VM — Entropy Sources for the CXNN (RND) instruction

The executor never reads an entropy device itself; it asks the injected
EntropySource for one byte per RND instruction. A source that cannot
deliver raises EntropyUnavailable, which is fatal for the run. There is
no silent fallback byte.
"""

import os
import random
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .errors import EntropyUnavailable


class EntropySource(ABC):
    """Supplies pseudo-random bytes, one per call."""

    @abstractmethod
    def next_byte(self) -> int:
        """Return an int in 0..255 or raise EntropyUnavailable."""


class SystemEntropy(EntropySource):
    """Bytes from the operating system CSPRNG (os.urandom)."""

    def next_byte(self) -> int:
        try:
            data = os.urandom(1)
        except (OSError, NotImplementedError) as e:
            raise EntropyUnavailable(f"System entropy unavailable: {e}") from e
        if len(data) != 1:
            raise EntropyUnavailable("System entropy returned no data")
        return data[0]


class SeededEntropy(EntropySource):
    """Reproducible stream from random.Random(seed)."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def next_byte(self) -> int:
        return self._rng.getrandbits(8)


class FixedEntropy(EntropySource):
    """Replays a fixed byte sequence.

    When the sequence runs out, either start over (cycle=True) or raise
    EntropyUnavailable.
    """

    def __init__(self, data: Iterable[int], cycle: bool = False):
        self._data = bytes(data)
        self._pos = 0
        self._cycle = cycle

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def next_byte(self) -> int:
        if self._pos >= len(self._data):
            if not self._cycle or not self._data:
                raise EntropyUnavailable(
                    f"Fixed entropy exhausted after {len(self._data)} bytes")
            self._pos = 0
        value = self._data[self._pos]
        self._pos += 1
        return value
